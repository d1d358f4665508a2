"""XML helpers shared by the FreeMind, OPML and SVG codecs."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Union

import defusedxml.ElementTree as SafeET
from defusedxml import DefusedXmlException
from loguru import logger

from .errors import FormatError

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
_INDENT = "  "

# code points XML 1.0 cannot carry, not even as character references
_INVALID_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def parse_xml(text: str, format_name: str) -> ET.Element:
    """Parse untrusted XML, turning every failure into a FormatError."""
    try:
        return SafeET.fromstring(text)
    except ET.ParseError as exc:
        line = exc.position[0]
        lines = text.splitlines()
        fragment = lines[line - 1].strip() if 0 < line <= len(lines) else None
        raise FormatError(
            f"Malformed {format_name} XML: {exc}",
            line=line,
            fragment=fragment,
        ) from exc
    except DefusedXmlException as exc:
        raise FormatError(f"Forbidden construct in {format_name} XML: {exc}") from exc


def to_xml_string(elem: ET.Element) -> str:
    """Pretty-print ``elem`` as a UTF-8 XML document.

    Written with an explicit stack, so tree depth is not bounded by the
    interpreter's recursion limit. Elements hold either text or child
    elements; tails are not written.
    """
    out = [XML_DECLARATION]
    # frames: an element to open, or a closing tag string
    stack: list[tuple[Union[ET.Element, str], int]] = [(elem, 0)]
    while stack:
        node, depth = stack.pop()
        pad = _INDENT * depth
        if isinstance(node, str):
            out.append(f"{pad}</{node}>\n")
            continue

        attrs = "".join(f' {key}="{_escape_attrib(value)}"' for key, value in node.attrib.items())
        children = list(node)
        if children:
            out.append(f"{pad}<{node.tag}{attrs}>\n")
            if node.text and node.text.strip():
                out.append(f"{pad}{_INDENT}{_escape_text(node.text)}\n")
            stack.append((node.tag, depth))
            for child in reversed(children):
                stack.append((child, depth + 1))
        elif node.text:
            out.append(f"{pad}<{node.tag}{attrs}>{_escape_text(node.text)}</{node.tag}>\n")
        else:
            out.append(f"{pad}<{node.tag}{attrs} />\n")
    return "".join(out)


def _strip_invalid(text: str) -> str:
    cleaned = _INVALID_CHARS.sub("", text)
    if len(cleaned) != len(text):
        logger.warning("Dropped {} character(s) not allowed in XML", len(text) - len(cleaned))
    return cleaned


def _escape_text(text: str) -> str:
    text = _strip_invalid(str(text))
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\r", "&#13;")
    )


def _escape_attrib(value: str) -> str:
    value = _strip_invalid(str(value))
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("\r", "&#13;")
        .replace("\n", "&#10;")
        .replace("\t", "&#09;")
    )
