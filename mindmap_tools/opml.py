"""OPML 2.0 outlines.

OPML carries text and nesting only. Links, notes and icons ride along as
``url``/``_note``/``_icon`` attributes; other fields are dropped.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from loguru import logger

from .errors import FormatError
from .ids import generate_id
from .models import MindMapTree
from .xmlutil import parse_xml, to_xml_string

OPML_VERSION = "2.0"


def to_opml(tree: MindMapTree) -> str:
    """Serialize a tree as OPML; the root becomes the single top-level outline."""
    opml = ET.Element("opml", version=OPML_VERSION)
    head = ET.SubElement(opml, "head")
    ET.SubElement(head, "title").text = tree.content
    body = ET.SubElement(opml, "body")

    stack = [(tree, body)]
    while stack:
        node, parent_elem = stack.pop()
        outline = ET.SubElement(parent_elem, "outline", text=node.content)
        if node.link:
            outline.set("type", "link")
            outline.set("url", node.link)
        if isinstance(node.notes, str) and node.notes:
            outline.set("_note", node.notes)
        if node.icon:
            outline.set("_icon", node.icon)
        for child in reversed(node.children):
            stack.append((child, outline))

    logger.debug("Serialized tree {!r} to OPML", tree.id)
    return to_xml_string(opml)


def parse_opml(text: str) -> MindMapTree:
    """Parse an OPML document.

    A body holding exactly one top-level outline yields that outline as the
    root. Otherwise a root is made from ``<head><title>`` and the top-level
    outlines become its children.

    Raises:
        FormatError: empty input, malformed XML, or no ``<body>``.
    """
    if not text or not text.strip():
        raise FormatError("Empty OPML input")
    opml = parse_xml(text, "OPML")
    if opml.tag != "opml":
        raise FormatError("Invalid OPML format: root element is not <opml>", fragment=f"<{opml.tag}>")
    body = opml.find("body")
    if body is None:
        raise FormatError("Invalid OPML format: no body element found", fragment="<opml>")

    top = body.findall("outline")
    if len(top) == 1:
        root_elem = top[0]
        root = _outline_node(root_elem)
        stack = [(root_elem, root)]
    else:
        title = opml.findtext("head/title") or "Root"
        root = MindMapTree(id=generate_id(), content=title)
        stack = [(body, root)]

    while stack:
        elem, node = stack.pop()
        for child_elem in elem.findall("outline"):
            child = _outline_node(child_elem)
            node.children.append(child)
            stack.append((child_elem, child))

    logger.debug("Parsed OPML outline {!r} with {} nodes", root.content, root.count())
    return root


def _outline_node(elem: ET.Element) -> MindMapTree:
    content = elem.get("text")
    if content is None:
        content = elem.get("title", elem.get("TEXT", ""))
    node = MindMapTree(id=generate_id(), content=content)
    url = elem.get("url") or elem.get("htmlUrl") or elem.get("xmlUrl")
    if url:
        node.link = url
    note = elem.get("_note")
    if note:
        node.metadata = {"notes": note}
    icon = elem.get("_icon")
    if icon:
        node.icon = icon
    return node
