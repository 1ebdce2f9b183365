"""Locate-and-dispatch engine driving the diagram rewriting phases.

Handlers declare which node kind they target and in which phase they run via
the ``@locates`` decorator, which records a lightweight :class:`RuleDefinition`
on the callable. :class:`Dispatcher` collects those declarations, then walks
the tree once per :class:`DiagramPhase`.

Within a phase every matching node gets its own asynchronous unit of work.
Units never touch the tree: each one settles into exactly one
:class:`Outcome`, and the dispatcher applies outcomes in document order once
the whole phase has settled. A failing unit therefore only affects its own
node, and diagnostics come out in the order nodes appear in the document.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum, auto
import logging
from typing import TYPE_CHECKING, Any, cast

from .exceptions import InvalidNodeError
from .nodes import Node, NodeRef, Root, replace_node, walk


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .context import DocumentContext


logger = logging.getLogger(__name__)


class DiagramPhase(Enum):
    """Ordered passes executed over the document tree.

    ``CODE``
    : replace fenced diagram code blocks.

    ``LINK``
    : follow links titled as diagrams.

    ``IMAGE``
    : follow images titled as diagrams.

    Running code blocks first guarantees their diagnostics precede those of
    links and images in the same document.
    """

    CODE = auto()
    LINK = auto()
    IMAGE = auto()


@dataclass(frozen=True, slots=True)
class Outcome:
    """Single settlement of one node's unit of work."""

    replacement: Node | None = None
    message: str | None = None
    error: BaseException | None = None

    @classmethod
    def replaced(cls, replacement: Node, message: str) -> Outcome:
        return cls(replacement=replacement, message=message)

    @classmethod
    def failed(cls, error: BaseException) -> Outcome:
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None


NodePredicate = Callable[[Node], bool]
NodeTask = Callable[[Any, "DocumentContext"], Awaitable[Outcome]]


@dataclass(frozen=True, slots=True)
class PhaseRule:
    """Concrete rule registered in the dispatcher."""

    phase: DiagramPhase
    kind: str
    predicate: NodePredicate
    task: NodeTask
    name: str

    def matches(self, node: Node) -> bool:
        return node.kind == self.kind and self.predicate(node)


@dataclass(frozen=True, slots=True)
class RuleDefinition:
    """Descriptor installed on handler callables by the decorator."""

    phase: DiagramPhase
    kind: str
    predicate: NodePredicate
    name: str | None = None

    def bind(self, task: NodeTask) -> PhaseRule:
        name = self.name or getattr(task, "__name__", task.__class__.__name__)
        return PhaseRule(
            phase=self.phase,
            kind=self.kind,
            predicate=self.predicate,
            task=task,
            name=name,
        )


def locates(
    kind: str,
    *,
    phase: DiagramPhase,
    predicate: NodePredicate,
    name: str | None = None,
) -> Callable[[NodeTask], NodeTask]:
    """Decorator used to register node handlers."""
    definition = RuleDefinition(phase=phase, kind=kind, predicate=predicate, name=name)

    def decorator(task: NodeTask) -> NodeTask:
        cast(Any, task).__phase_rule__ = definition
        return task

    return decorator


class Dispatcher:
    """Run registered rules phase by phase against a document tree."""

    def __init__(
        self,
        rules: Iterable[PhaseRule] = (),
        *,
        max_concurrency: int | None = None,
    ) -> None:
        self._rules: dict[DiagramPhase, list[PhaseRule]] = {}
        self.max_concurrency = max_concurrency
        for rule in rules:
            self.register(rule)

    def register(self, rule: PhaseRule) -> None:
        """Register a rule for later execution."""
        self._rules.setdefault(rule.phase, []).append(rule)

    def collect_from(self, owner: Any) -> None:
        """Collect decorated callables from an object or module."""
        for attribute in dir(owner):
            if attribute.startswith("__"):
                continue
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__phase_rule__", None)
            if definition is None and hasattr(handler, "__func__"):
                definition = getattr(handler.__func__, "__phase_rule__", None)
            if isinstance(definition, RuleDefinition):
                self.register(definition.bind(handler))

    def rules_for_phase(self, phase: DiagramPhase) -> tuple[PhaseRule, ...]:
        return tuple(self._rules.get(phase, ()))

    async def run(self, tree: Root, context: DocumentContext) -> Root:
        """Execute every phase in order, each one fully settled before the next."""
        for phase in DiagramPhase:
            for rule in self.rules_for_phase(phase):
                await self.run_rule(rule, tree, context)
        return tree

    async def run_rule(self, rule: PhaseRule, tree: Root, context: DocumentContext) -> int:
        """Apply one rule to every matching node and return the match count."""
        matches = [ref for ref in walk(tree) if rule.matches(ref.node)]
        if not matches:
            return 0

        logger.debug("%s: %d matching %s node(s)", rule.name, len(matches), rule.kind)
        gate = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        outcomes = await asyncio.gather(
            *(self._settle(rule, ref, context, gate) for ref in matches)
        )

        for ref, outcome in zip(matches, outcomes, strict=True):
            self._apply(ref, outcome, context)
        return len(matches)

    async def _settle(
        self,
        rule: PhaseRule,
        ref: NodeRef,
        context: DocumentContext,
        gate: asyncio.Semaphore | None,
    ) -> Outcome:
        try:
            if gate is None:
                return await rule.task(ref.node, context)
            async with gate:
                return await rule.task(ref.node, context)
        except Exception as exc:
            logger.debug("%s failed on %s node", rule.name, rule.kind, exc_info=True)
            return Outcome.failed(exc)

    def _apply(self, ref: NodeRef, outcome: Outcome, context: DocumentContext) -> None:
        position = ref.node.position
        if outcome.error is not None:
            context.error(outcome.error, position)
            return
        if outcome.replacement is not None:
            try:
                replace_node(ref, outcome.replacement)
            except InvalidNodeError as exc:
                context.error(exc, position)
                return
        if outcome.message:
            context.info(outcome.message, position)


__all__ = [
    "DiagramPhase",
    "Dispatcher",
    "NodePredicate",
    "NodeTask",
    "Outcome",
    "PhaseRule",
    "RuleDefinition",
    "locates",
]
