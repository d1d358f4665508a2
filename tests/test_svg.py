"""Tests for the SVG exporter."""

import xml.etree.ElementTree as ET

import pytest

from mindmap_tools import (
    Cloud,
    EdgeStyle,
    MindMapTree,
    NodeStyle,
    SvgConfig,
    UnsupportedImportError,
    parse_svg,
    to_svg,
)

NS = {"svg": "http://www.w3.org/2000/svg"}


def make_tree():
    root = MindMapTree(id="root", content="Root")
    root.add_child("A", id="a")
    b = root.add_child("B", id="b")
    b.add_child("B1", id="b1")
    b.add_child("B2", id="b2")
    return root


def node_groups(svg):
    return svg.findall("svg:g[@class='nodes']/svg:g", NS)


def rect_x(group):
    return float(group.find("svg:rect", NS).get("x"))


def test_document_shape():
    text = to_svg(make_tree())
    assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')
    svg = ET.fromstring(text)
    assert svg.tag == "{http://www.w3.org/2000/svg}svg"
    assert svg.get("viewBox").startswith("0 0 ")
    assert svg.find("svg:defs/svg:style", NS) is not None


def test_one_group_per_node_and_one_line_per_edge():
    svg = ET.fromstring(to_svg(make_tree()))
    assert [g.get("id") for g in node_groups(svg)] == ["root", "a", "b", "b1", "b2"]
    assert len(svg.findall("svg:g[@class='edges']/svg:line", NS)) == 4


def test_parents_are_centred_over_children():
    groups = {g.get("id"): g for g in node_groups(ET.fromstring(to_svg(make_tree())))}
    assert rect_x(groups["b"]) == (rect_x(groups["b1"]) + rect_x(groups["b2"])) / 2
    assert rect_x(groups["root"]) == (rect_x(groups["a"]) + rect_x(groups["b"])) / 2
    assert rect_x(groups["a"]) < rect_x(groups["b1"]) < rect_x(groups["b2"])


def test_collapsed_subtree_not_drawn():
    tree = make_tree()
    tree.find("b").collapsed = True
    svg = ET.fromstring(to_svg(tree))
    assert [g.get("id") for g in node_groups(svg)] == ["root", "a", "b"]


def test_node_decorations():
    root = MindMapTree(
        id="root",
        content="Root",
        style=NodeStyle(color="#ff0000", background_color="#ffffcc", bold=True, font_size=18),
        icon="idea",
        link="https://example.com",
        metadata={"description": "hover text"},
        cloud=Cloud("#abcdef"),
    )
    group = node_groups(ET.fromstring(to_svg(root)))[0]

    assert group.find("svg:title", NS).text == "hover text"
    cloud, box = group.findall("svg:rect", NS)
    assert cloud.get("fill") == "#abcdef"
    assert box.get("fill") == "#ffffcc"
    assert box.get("stroke") == "#ff0000"

    icon = group.find("svg:text[@class='node-icon']", NS)
    assert icon.text == "💡"

    anchor = group.find("svg:a", NS)
    assert anchor.get("href") == "https://example.com"
    label = anchor.find("svg:text", NS)
    assert label.text == "Root"
    assert label.get("font-weight") == "bold"
    assert label.get("font-size") == "18"


def test_edge_style_applies_to_line():
    root = MindMapTree(id="root", content="Root")
    root.add_child("C", id="c", edge_style=EdgeStyle(color="#00ff00", width=4))
    root.add_child("D", id="d")
    lines = ET.fromstring(to_svg(root)).findall("svg:g[@class='edges']/svg:line", NS)
    assert lines[0].get("stroke") == "#00ff00"
    assert lines[0].get("stroke-width") == "4"
    assert lines[1].get("stroke") == "#666666"


def test_text_is_escaped_and_ids_sanitized():
    root = MindMapTree(id="1 root", content="A < B & C")
    svg_text = to_svg(root)
    group = node_groups(ET.fromstring(svg_text))[0]
    assert group.get("id") == "n_1_root"
    assert group.find("svg:text", NS).text == "A < B & C"
    assert "A &lt; B &amp; C" in svg_text


def test_config_changes_size():
    small = ET.fromstring(to_svg(make_tree(), config=SvgConfig(node_width=50, padding=0)))
    large = ET.fromstring(to_svg(make_tree()))
    assert float(small.get("width")) < float(large.get("width"))


@pytest.mark.parametrize("text", ["", "<svg xmlns='http://www.w3.org/2000/svg'/>", "garbage"])
def test_import_is_unsupported(text):
    with pytest.raises(UnsupportedImportError, match="SVG import is not supported"):
        parse_svg(text)


def test_deep_tree():
    root = MindMapTree(id="n0", content="0")
    node = root
    for i in range(1, 3000):
        node = node.add_child(str(i), id=f"n{i}")
    svg = ET.fromstring(to_svg(root))
    assert len(node_groups(svg)) == 3000
    assert len(svg.findall("svg:g[@class='edges']/svg:line", NS)) == 2999


def test_control_characters_are_dropped():
    svg_text = to_svg(MindMapTree(id="r", content="a\x01b"))
    assert node_groups(ET.fromstring(svg_text))[0].find("svg:text", NS).text == "ab"
