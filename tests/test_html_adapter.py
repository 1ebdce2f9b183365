from mermaidsmith.adapters.html import tree_from_html, tree_to_html
from mermaidsmith.core.nodes import Code, Element, Html, Image, Link, Position, Text


def test_fenced_code_becomes_code_node() -> None:
    tree = tree_from_html('<pre><code class="language-mermaid">graph TD;\nA--&gt;B;\n</code></pre>')
    code = tree.children[0]
    assert isinstance(code, Code)
    assert code.value == "graph TD;\nA-->B;"
    assert code.lang == "mermaid"
    assert code.final_newline


def test_code_without_language_has_no_lang() -> None:
    tree = tree_from_html("<pre><code>plain\n</code></pre>")
    assert tree.children == [Code(value="plain")]


def test_pre_with_mixed_content_stays_an_element() -> None:
    tree = tree_from_html("<pre>text <code>x</code></pre>")
    assert isinstance(tree.children[0], Element)


def test_links_and_images_expose_url_and_title() -> None:
    tree = tree_from_html(
        '<p><a href="flow.mmd" title="mermaid:" class="x">Flow</a>'
        '<img src="seq.mmd" alt="Sequence" title="mermaid:"></p>'
    )
    paragraph = tree.children[0]
    assert isinstance(paragraph, Element)
    assert paragraph.children == [
        Link(
            url="flow.mmd",
            title="mermaid:",
            attributes={"class": "x"},
            children=[Text(value="Flow")],
        ),
        Image(url="seq.mmd", title="mermaid:", alt="Sequence"),
    ]


def test_positions_are_tracked_on_request() -> None:
    html = '<p>Intro</p>\n<pre><code class="language-mermaid">graph TD;</code></pre>\n'
    tracked = tree_from_html(html, track_positions=True)
    untracked = tree_from_html(html)

    assert tracked.children[2].position == Position(2, 1)
    assert untracked.children[2].position is None


def test_serialisation_round_trips_structure() -> None:
    html = (
        "<!-- note -->"
        '<h1 id="title">Title &amp; more</h1>'
        '<p>See <a href="a.html" title="A">a</a><br /></p>'
        '<img alt="Logo" src="logo.png" />'
        '<pre><code class="language-python">x = 1 &lt; 2\n</code></pre>'
    )
    assert tree_to_html(tree_from_html(html)) == html


def test_raw_html_is_emitted_verbatim() -> None:
    tree = tree_from_html("<p>x</p>")
    tree.children.append(Html(value='<div class="mermaid">\n  A-->B\n</div>'))
    assert tree_to_html(tree) == '<p>x</p><div class="mermaid">\n  A-->B\n</div>'


def test_script_and_style_bodies_are_kept_verbatim() -> None:
    html = (
        "<head><style>ul > li a[href^='#'] { color: red; }</style></head>"
        "<body><script>if (a < b && c) { mermaid.initialize({startOnLoad: true}); }</script>"
        "</body>"
    )
    tree = tree_from_html(html)

    assert tree_to_html(tree) == html


def test_processing_instructions_survive() -> None:
    html = "<?xml-stylesheet href='a.css'?><p>x</p>"
    assert tree_to_html(tree_from_html(html)) == html


def test_code_block_attributes_round_trip() -> None:
    html = (
        '<pre class="hl" data-line="3">'
        '<code class="language-python numbered" id="c1">x = 1\n</code></pre>'
        "<pre><code>no trailing newline</code></pre>"
    )
    tree = tree_from_html(html)

    first, second = tree.children
    assert isinstance(first, Code)
    assert first.lang == "python"
    assert first.container_attributes == {"class": "hl", "data-line": "3"}
    assert first.attributes == {"class": "language-python numbered", "id": "c1"}
    assert isinstance(second, Code)
    assert not second.final_newline
    assert tree_to_html(tree) == html


def test_highlighted_code_stays_generic_markup() -> None:
    html = '<pre><code class="language-python"><span class="k">def</span> f(): pass\n</code></pre>'
    tree = tree_from_html(html)

    assert isinstance(tree.children[0], Element)
    assert tree_to_html(tree) == html


def test_code_nodes_without_markup_attributes_get_a_language_class() -> None:
    tree = tree_from_html("")
    tree.children.append(Code(value="graph TD;", lang="mermaid"))
    assert tree_to_html(tree) == '<pre><code class="language-mermaid">graph TD;\n</code></pre>'
