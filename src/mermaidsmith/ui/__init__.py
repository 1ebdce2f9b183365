"""User interfaces for mermaidsmith."""
