"""Tests for the D2 exporter."""

import pytest

from mindmap_tools import MindMapTree, NodeStyle, UnsupportedImportError, parse_d2, to_d2
from mindmap_tools.d2 import escape_label


def test_first_line_is_direction():
    d2 = to_d2(MindMapTree(id="root", content="Root"))
    assert d2.split("\n")[0] == "direction: right"
    assert "Root: root" in d2


def test_two_children_use_container():
    root = MindMapTree(id="root", content="Root")
    root.add_child("A", id="a")
    root.add_child("B", id="b")
    d2 = to_d2(root)
    assert d2 == "direction: right\n\nRoot: root\nroot: {\n  root.A: a\n  root.B: b\n}"

    start = d2.index("root: {")
    end = d2.index("}", start)
    inner = d2[start:end]
    assert "A: a" in inner
    assert "B: b" in inner


def test_single_child_is_direct():
    root = MindMapTree(id="root", content="Root")
    root.add_child("C", id="c")
    d2 = to_d2(root)
    assert "root.C: c" in d2
    assert "{" not in d2


def test_nested_containers():
    root = MindMapTree(id="root", content="Root")
    a = root.add_child("A", id="a")
    a.add_child("A1", id="a1")
    a.add_child("A2", id="a2")
    root.add_child("B", id="b")
    assert to_d2(root).split("\n")[2:] == [
        "Root: root",
        "root: {",
        "  root.A: a",
        "  a: {",
        "    a.A1: a1",
        "    a.A2: a2",
        "  }",
        "  root.B: b",
        "}",
    ]


def test_child_order_preserved():
    root = MindMapTree(id="root", content="Root")
    for name in ("X", "Y", "Z"):
        root.add_child(name, id=name.lower())
    d2 = to_d2(root)
    assert d2.index("root.X") < d2.index("root.Y") < d2.index("root.Z")


def test_quotes_are_escaped():
    root = MindMapTree(id="root", content="Root")
    root.add_child('Node with "quotes"', id="q")
    assert 'Node with \\"quotes\\"' in to_d2(root)


def test_newlines():
    assert escape_label("line1\nline2") == "line1\\nline2"
    assert escape_label("already\\nescaped") == "already\\nescaped"


def test_hyphenated_ids_are_sanitized_everywhere():
    root = MindMapTree(id="root-node", content="Root")
    child = root.add_child("Child", id="node-with-hyphens")
    child.add_child("X", id="x-1")
    child.add_child("Y", id="y-1")
    d2 = to_d2(root)
    assert "node_with_hyphens" in d2
    assert "node-with-hyphens" not in d2
    assert "root_node.Child: node_with_hyphens" in d2
    assert "node_with_hyphens: {" in d2
    assert "node_with_hyphens.X: x_1" in d2
    # the tree is untouched
    assert child.id == "node-with-hyphens"


def test_colliding_sanitized_ids_stay_distinct():
    root = MindMapTree(id="root", content="Root")
    root.add_child("A", id="a-b")
    root.add_child("B", id="a_b")
    d2 = to_d2(root)
    assert "root.A: a_b" in d2
    assert "root.B: a_b_2" in d2


def test_root_style_block():
    root = MindMapTree(id="root", content="Root", style=NodeStyle(color="#ff0000"), link="https://x")
    d2 = to_d2(root)
    assert "Root: root {" in d2
    assert "  stroke: #ff0000" in d2
    assert "link:" not in d2


def test_child_attributes_in_fixed_order():
    root = MindMapTree(id="root", content="Root")
    root.add_child(
        "Styled",
        id="s",
        style=NodeStyle(color="#f00", background_color="#fff", font_size=20, bold=True),
        icon="https://icons.example/idea.svg",
        link="https://example.com",
        metadata={"description": "more"},
    )
    assert to_d2(root).split("\n")[2:] == [
        "Root: root",
        "root.Styled: s {",
        "  stroke: #f00",
        "  fill: #fff",
        "  icon: https://icons.example/idea.svg",
        "  link: https://example.com",
        "  tooltip: more",
        "}",
    ]


def test_unmapped_style_fields_are_ignored():
    root = MindMapTree(id="root", content="Root", style=NodeStyle(font_size=30, italic=True))
    assert "Root: root" in to_d2(root)
    assert "{" not in to_d2(root)


@pytest.mark.parametrize("text", ["", "direction: right\nRoot: root\n", "\x00garbage{{{", None])
def test_import_is_unsupported(text):
    with pytest.raises(UnsupportedImportError) as info:
        parse_d2(text)
    message = str(info.value)
    assert message.startswith("D2 import is not supported")
    for name in ("JSON", "FreeMind", "OPML", "Markdown"):
        assert name in message


def test_deep_tree():
    root = MindMapTree(id="n0", content="0")
    node = root
    for i in range(1, 3000):
        node = node.add_child(str(i), id=f"n{i}")
    lines = to_d2(root).splitlines()
    assert len(lines) == 3002
    assert lines[-1] == "n2998.2999: n2999"
