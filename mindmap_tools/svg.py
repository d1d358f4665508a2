"""Export a tree as a standalone SVG drawing.

Layout is top-down: each level sits on its own row, leaves take
consecutive slots left to right and every parent is centred over its
children. Collapsed subtrees are not drawn.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

from .config import DEFAULT_SVG, SvgConfig
from .errors import UnsupportedImportError
from .formats import Format
from .icons import display_icon
from .ids import IdSanitizer
from .models import MindMapTree
from .xmlutil import to_xml_string

NS = "http://www.w3.org/2000/svg"


@dataclass
class _Box:
    node: MindMapTree
    depth: int
    x: float = 0
    y: float = 0
    children: list[_Box] = field(default_factory=list)


def to_svg(tree: MindMapTree, *, config: SvgConfig = DEFAULT_SVG) -> str:
    """Render a tree to SVG markup."""
    boxes = _layout(tree, config)

    min_x = min(b.x for b in boxes)
    max_x = max(b.x for b in boxes) + config.node_width
    max_y = max(b.y for b in boxes) + config.node_height
    width = max_x - min_x + 2 * config.padding
    height = max_y + 2 * config.padding
    shift_x = config.padding - min_x
    shift_y = config.padding

    svg = ET.Element("svg", {
        "xmlns": NS,
        "viewBox": f"0 0 {_num(width)} {_num(height)}",
        "width": _num(width),
        "height": _num(height),
    })
    defs = ET.SubElement(svg, "defs")
    ET.SubElement(defs, "style", type="text/css").text = _stylesheet(config)

    edges = ET.SubElement(svg, "g", {"class": "edges"})
    nodes = ET.SubElement(svg, "g", {"class": "nodes"})
    ids = IdSanitizer(Format.SVG)

    for box in boxes:
        x = box.x + shift_x
        y = box.y + shift_y
        for child in box.children:
            _draw_edge(edges, child, x, y, shift_x, shift_y, config)
        _draw_node(nodes, box.node, x, y, ids.sanitize(box.node.id), config)

    logger.debug("Rendered tree {!r} to SVG ({} nodes)", tree.id, len(boxes))
    return to_xml_string(svg)


def _layout(tree: MindMapTree, config: SvgConfig) -> list[_Box]:
    """Place every visible node; returns boxes in pre-order."""
    root = _Box(tree, 0)
    order = []
    stack = [root]
    while stack:
        box = stack.pop()
        order.append(box)
        if box.node.collapsed:
            continue
        box.children = [_Box(child, box.depth + 1) for child in box.node.children]
        stack.extend(reversed(box.children))

    step_x = config.node_width + config.horizontal_spacing
    step_y = config.node_height + config.vertical_spacing
    slot = 0
    for box in order:
        box.y = box.depth * step_y
        if not box.children:
            box.x = slot * step_x
            slot += 1
    # parents after their children
    for box in reversed(order):
        if box.children:
            box.x = (box.children[0].x + box.children[-1].x) / 2
    return order


def _draw_edge(
    parent: ET.Element,
    child: _Box,
    px: float,
    py: float,
    shift_x: float,
    shift_y: float,
    config: SvgConfig,
) -> None:
    edge_style = child.node.edge_style
    color = (edge_style.color if edge_style else None) or config.edge_color
    stroke_width = (edge_style.width if edge_style else None) or config.edge_width
    ET.SubElement(parent, "line", {
        "x1": _num(px + config.node_width / 2),
        "y1": _num(py + config.node_height),
        "x2": _num(child.x + shift_x + config.node_width / 2),
        "y2": _num(child.y + shift_y),
        "stroke": color,
        "stroke-width": _num(stroke_width),
    })


def _draw_node(
    parent: ET.Element, node: MindMapTree, x: float, y: float, key: str, config: SvgConfig
) -> None:
    group = ET.SubElement(parent, "g", {"id": key, "class": "node"})
    style = node.style

    if isinstance(node.description, str) and node.description:
        ET.SubElement(group, "title").text = node.description

    if node.cloud is not None:
        ET.SubElement(group, "rect", {
            "x": _num(x - 10),
            "y": _num(y - 10),
            "width": _num(config.node_width + 20),
            "height": _num(config.node_height + 20),
            "rx": "10",
            "ry": "10",
            "fill": node.cloud.color or config.cloud_color,
            "opacity": "0.3",
        })

    stroke = (style.color if style else None) or config.text_color
    ET.SubElement(group, "rect", {
        "x": _num(x),
        "y": _num(y),
        "width": _num(config.node_width),
        "height": _num(config.node_height),
        "rx": "5",
        "ry": "5",
        "fill": (style.background_color if style else None) or config.node_fill,
        "stroke": stroke,
        "stroke-width": "1",
    })

    if node.icon:
        ET.SubElement(group, "text", {
            "x": _num(x + 10),
            "y": _num(y + config.node_height / 2),
            "class": "node-icon",
            "fill": stroke,
        }).text = display_icon(node.icon)

    text_attrs = {
        "x": _num(x + config.node_width / 2),
        "y": _num(y + config.node_height / 2),
        "class": "node-text",
        "font-weight": "bold" if style and style.bold else "normal",
        "font-style": "italic" if style and style.italic else "normal",
        "font-size": _num((style.font_size if style else None) or config.font_size),
        "fill": stroke,
    }
    if style and style.font_name:
        text_attrs["font-family"] = style.font_name

    holder = group
    if node.link:
        holder = ET.SubElement(group, "a", {
            "href": node.link,
            "target": "_blank",
            "class": "node-link",
        })
    ET.SubElement(holder, "text", text_attrs).text = " ".join(node.content.splitlines())


def _stylesheet(config: SvgConfig) -> str:
    return (
        f".node-text {{ font-family: {config.font_family}; font-size: {config.font_size}px; "
        f"fill: {config.text_color}; text-anchor: middle; dominant-baseline: middle; }}\n"
        ".node-icon { font-family: Arial; font-size: 12px; dominant-baseline: middle; }\n"
        ".node-link { cursor: pointer; }"
    )


def _num(value: Optional[float]) -> str:
    if value is None:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def parse_svg(text: Union[str, bytes, None] = None) -> MindMapTree:
    """SVG is write-only; always raises UnsupportedImportError."""
    raise UnsupportedImportError(Format.SVG.label)
