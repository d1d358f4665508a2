"""Read and write FreeMind ``.mm`` mind maps.

FreeMind keeps the whole map in nested ``<node>`` elements under ``<map>``:

    <map version="1.0.1">
      <node TEXT="Root" ID="root" FOLDED="false">
        <icon BUILTIN="idea"/>
        <edge COLOR="#ff0000" WIDTH="2" STYLE="bezier"/>
        <font NAME="Arial" SIZE="12" BOLD="true"/>
        <node TEXT="Child" LINK="https://example.com"/>
      </node>
    </map>

Notes and descriptions travel as ``<richcontent>`` HTML, other string
metadata as ``<attribute NAME VALUE>`` pairs. Cross-links
(``<arrowlink>``) have no place in a tree and are skipped.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional

from loguru import logger

from .errors import FormatError
from .icons import to_freemind_icon
from .ids import generate_id
from .models import Cloud, EdgeStyle, MindMapTree, NodeStyle
from .xmlutil import parse_xml, to_xml_string

FREEMIND_VERSION = "1.0.1"

# richcontent TYPE -> metadata key
_RICH_TYPES = {"NOTE": "notes", "DETAILS": "description"}
_IGNORED = {"arrowlink", "linktarget", "hook", "attribute_layout", "attribute_registry"}


def parse_freemind(text: str) -> MindMapTree:
    """Parse FreeMind XML into a tree.

    ``ID`` attributes are kept when present and unique; other nodes get
    fresh ids.

    Raises:
        FormatError: empty input, malformed XML, or no ``<map><node>``.
    """
    if not text or not text.strip():
        raise FormatError("Empty FreeMind input")
    map_elem = parse_xml(text, "FreeMind")
    if map_elem.tag != "map":
        raise FormatError("Invalid FreeMind format: root element is not <map>", fragment=f"<{map_elem.tag}>")

    root_elem = map_elem.find("node")
    if root_elem is None:
        raise FormatError("Invalid FreeMind format: no root node found", fragment="<map>")

    used_ids: set[str] = set()
    root = _parse_node(root_elem, used_ids)
    stack = [(root_elem, root)]
    while stack:
        elem, node = stack.pop()
        for child_elem in elem.findall("node"):
            child = _parse_node(child_elem, used_ids)
            node.children.append(child)
            stack.append((child_elem, child))

    logger.debug("Parsed FreeMind map {!r} with {} nodes", root.content, len(used_ids))
    return root


def _parse_node(elem: ET.Element, used_ids: set[str]) -> MindMapTree:
    """Build a childless tree node from one ``<node>`` element."""
    node_id = elem.get("ID")
    if not node_id or node_id in used_ids:
        if node_id:
            logger.warning("Duplicate FreeMind ID {!r}; assigning a new id", node_id)
        node_id = generate_id()
    used_ids.add(node_id)

    node = MindMapTree(id=node_id, content=elem.get("TEXT", ""))

    folded = elem.get("FOLDED")
    if folded is not None:
        node.collapsed = folded == "true"
    node.link = elem.get("LINK")
    node.created = _int_attr(elem, "CREATED")
    node.modified = _int_attr(elem, "MODIFIED")

    style = NodeStyle(
        color=elem.get("COLOR"),
        background_color=elem.get("BACKGROUND_COLOR"),
    )
    metadata: dict[str, str] = {}

    for child in elem:
        tag = child.tag
        if tag == "node":
            continue
        elif tag == "icon":
            builtin = child.get("BUILTIN")
            if builtin and node.icon is None:
                node.icon = builtin
        elif tag == "edge":
            edge = EdgeStyle(
                color=child.get("COLOR"),
                width=_int_attr(child, "WIDTH"),
                style=child.get("STYLE"),
            )
            if not edge.is_empty():
                node.edge_style = edge
        elif tag == "font":
            style.font_name = child.get("NAME")
            style.font_size = _int_attr(child, "SIZE")
            if child.get("BOLD") is not None:
                style.bold = child.get("BOLD") == "true"
            if child.get("ITALIC") is not None:
                style.italic = child.get("ITALIC") == "true"
        elif tag == "cloud":
            node.cloud = Cloud(color=child.get("COLOR"))
        elif tag == "attribute":
            name = child.get("NAME")
            if name:
                metadata[name] = child.get("VALUE", "")
        elif tag == "richcontent":
            kind = child.get("TYPE", "").upper()
            if kind == "NODE" and "TEXT" not in elem.attrib:
                node.content = _html_text(child)
            elif kind in _RICH_TYPES:
                metadata[_RICH_TYPES[kind]] = _html_text(child)
        elif tag not in _IGNORED:
            logger.debug("Ignoring FreeMind element <{}>", tag)

    if not style.is_empty():
        node.style = style
    if metadata:
        node.metadata = metadata
    return node


def _int_attr(elem: ET.Element, name: str) -> Optional[int]:
    value = elem.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-numeric {}={!r} on <{}>", name, value, elem.tag)
        return None


def _html_text(rich: ET.Element) -> str:
    """Plain text of a richcontent block, one line per paragraph."""
    paragraphs = rich.findall(".//p")
    if paragraphs:
        return "\n".join("".join(p.itertext()) for p in paragraphs)
    return "".join(rich.itertext()).strip()


def to_freemind(tree: MindMapTree) -> str:
    """Serialize a tree as FreeMind XML."""
    map_elem = ET.Element("map", version=FREEMIND_VERSION)
    stack = [(tree, map_elem)]
    count = 0
    while stack:
        node, parent_elem = stack.pop()
        elem = _build_node_elem(node)
        parent_elem.append(elem)
        count += 1
        # siblings pop in tree order
        for child in reversed(node.children):
            stack.append((child, elem))

    logger.debug("Serialized tree {!r} to FreeMind ({} nodes)", tree.id, count)
    return to_xml_string(map_elem)


def _build_node_elem(node: MindMapTree) -> ET.Element:
    elem = ET.Element("node")
    elem.set("TEXT", node.content)
    elem.set("ID", node.id)

    style = node.style or NodeStyle()
    if style.color:
        elem.set("COLOR", style.color)
    if style.background_color:
        elem.set("BACKGROUND_COLOR", style.background_color)
    if node.collapsed is not None:
        elem.set("FOLDED", "true" if node.collapsed else "false")
    if node.link:
        elem.set("LINK", node.link)
    if node.created is not None:
        elem.set("CREATED", str(node.created))
    if node.modified is not None:
        elem.set("MODIFIED", str(node.modified))

    if node.icon:
        ET.SubElement(elem, "icon", BUILTIN=to_freemind_icon(node.icon))

    if node.edge_style is not None and not node.edge_style.is_empty():
        edge_elem = ET.SubElement(elem, "edge")
        if node.edge_style.color:
            edge_elem.set("COLOR", node.edge_style.color)
        if node.edge_style.width is not None:
            edge_elem.set("WIDTH", str(int(node.edge_style.width)))
        if node.edge_style.style:
            edge_elem.set("STYLE", node.edge_style.style)

    font_attrs = {}
    if style.font_name:
        font_attrs["NAME"] = style.font_name
    if style.font_size is not None:
        font_attrs["SIZE"] = str(style.font_size)
    if style.bold is not None:
        font_attrs["BOLD"] = "true" if style.bold else "false"
    if style.italic is not None:
        font_attrs["ITALIC"] = "true" if style.italic else "false"
    if font_attrs:
        ET.SubElement(elem, "font", font_attrs)

    if node.cloud is not None:
        cloud_elem = ET.SubElement(elem, "cloud")
        if node.cloud.color:
            cloud_elem.set("COLOR", node.cloud.color)

    metadata = node.metadata or {}
    for kind, key in _RICH_TYPES.items():
        value = metadata.get(key)
        if isinstance(value, str):
            elem.append(_rich_elem(kind, value))
    for key, value in metadata.items():
        if key in _RICH_TYPES.values():
            continue
        if isinstance(value, str):
            ET.SubElement(elem, "attribute", NAME=key, VALUE=value)
        else:
            logger.debug("Dropping non-text metadata {!r} from FreeMind output", key)

    return elem


def _rich_elem(kind: str, text: str) -> ET.Element:
    rich = ET.Element("richcontent", TYPE=kind)
    html = ET.SubElement(rich, "html")
    ET.SubElement(html, "head")
    body = ET.SubElement(html, "body")
    for line in text.split("\n"):
        p = ET.SubElement(body, "p")
        p.text = line
    return rich
