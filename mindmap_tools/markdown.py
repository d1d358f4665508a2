"""Export/import between mind map trees and Markdown outlines.

Markdown format uses:
- An H1 heading for the root
- Nested ``-`` bullets, two spaces per level, for everything below it
- ``[content](link)`` for nodes with a hyperlink
- ``<br>`` for line breaks inside a node's text
- Backslash escapes (``\\\\``, ``\\[``, ``\\<br>``, ``\\uXXXX``) for text that
  would otherwise read back differently
- Optional YAML front matter, skipped on import

Import also accepts deeper headings, ``*``/``+``/``1.`` bullets, and plain
indented lines. Nesting comes strictly from indentation: a document must
indent with tabs or with spaces, never both.
"""

from __future__ import annotations

import re
from typing import Optional

import yaml
from loguru import logger

from .errors import FormatError
from .ids import generate_id
from .models import MindMapTree

_HEADING = re.compile(r"^(#{1,6})(?:\s+(.*))?$")
_BULLET = re.compile(r"^(?:[-*+]|\d+[.)])(?:\s+(.*))?$")
_LINK = re.compile(r"^\[(.*)\]\((?:<([^<>]*)>|(\S*))\)$")
_RULE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
_BREAK = "<br>"
# backslash escapes on import: \\ \[ \<br> and \uXXXX; a bare <br> is a line break
_ESCAPE = re.compile(r"\\(\\|\[|<br>|u[0-9a-fA-F]{4})|<br>")
# characters a stripped outline line would lose or mangle
_UNSAFE = re.compile(r"[\x00-\x09\x0b-\x1f\x7f]")
_EDGE_SPACE = re.compile(r"^\s+|\s+$")
_INDENT = "  "


def to_markdown(tree: MindMapTree, *, include_frontmatter: bool = False) -> str:
    """Export a tree to a Markdown outline.

    Args:
        tree: The root node.
        include_frontmatter: Whether to prepend YAML front matter with the
            title and node count.

    Returns:
        Markdown string ending in a newline.
    """
    lines = []

    if include_frontmatter:
        lines.append("---")
        lines.extend(yaml.safe_dump(
            {"title": tree.content, "nodes": tree.count()},
            sort_keys=False,
            allow_unicode=True,
        ).splitlines())
        lines.append("---")
        lines.append("")

    root_text = _node_text(tree)
    lines.append(f"# {root_text}" if root_text else "#")

    stack = [(child, 0) for child in reversed(tree.children)]
    while stack:
        node, depth = stack.pop()
        text = _node_text(node)
        lines.append(f"{_INDENT * depth}- {text}" if text else f"{_INDENT * depth}-")
        for child in reversed(node.children):
            stack.append((child, depth + 1))

    return "\n".join(lines) + "\n"


def _node_text(node: MindMapTree) -> str:
    text = _escape_content(node.content)
    if node.link:
        target = f"<{node.link}>" if re.search(r"[\s()]", node.link) else node.link
        return f"[{text}]({target})"
    return text


def _escape_content(text: str) -> str:
    """Make node text survive as one outline line, unchanged on import."""
    text = text.replace("\\", "\\\\").replace(_BREAK, "\\" + _BREAK)
    text = _UNSAFE.sub(lambda m: _code_point(m.group()), text)
    text = text.replace("\n", _BREAK)
    text = _EDGE_SPACE.sub(lambda m: "".join(_code_point(c) for c in m.group()), text)
    if text.startswith("["):
        text = "\\" + text
    return text


def _code_point(char: str) -> str:
    return f"\\u{ord(char):04x}"


def _unescape_content(text: str) -> str:
    def replace(match):
        token = match.group(1)
        if token is None:
            return "\n"
        if token.startswith("u"):
            return chr(int(token[1:], 16))
        return token

    return _ESCAPE.sub(replace, text)


def parse_markdown(text: str) -> MindMapTree:
    """Parse a Markdown outline into a tree.

    The first content line is the root. Headings nest by level, bullets and
    plain lines by indentation below the nearest heading.

    Raises:
        FormatError: empty input, unterminated front matter, mixed tab/space
            indentation, indentation off the detected unit, or a second
            top-level item.
    """
    if not text or not text.strip():
        raise FormatError("Empty Markdown input")

    entries = _content_lines(text.split("\n"))
    if not entries:
        raise FormatError("Markdown input has no outline content")

    unit = _indent_unit(entries)

    first_no, first_indent, first = entries[0]
    heading = _HEADING.match(first)
    root_heading_level = len(heading.group(1)) if heading else 0
    root_is_bullet = heading is None and _BULLET.match(first) is not None
    root_level = 0 if heading else _level(first_indent, unit, first_no, first)

    root = _make_node(first)
    stack: list[tuple[int, MindMapTree]] = [(0, root)]  # (depth, node)
    heading_base = 0

    for lineno, indent, stripped in entries[1:]:
        heading = _HEADING.match(stripped)
        if heading:
            level = len(heading.group(1))
            depth = level - root_heading_level if root_heading_level else level
            if depth < 1:
                raise FormatError("Heading would create a second root", line=lineno, fragment=stripped)
            heading_base = depth
        else:
            level = _level(indent, unit, lineno, stripped)
            if heading_base:
                depth = heading_base + 1 + level
            elif root_is_bullet:
                depth = level - root_level
            else:
                depth = 1 + level
            if depth < 1:
                raise FormatError("More than one top-level item", line=lineno, fragment=stripped)

        node = _make_node(stripped)

        # Find parent based on depth
        while stack and stack[-1][0] >= depth:
            stack.pop()
        parent = stack[-1][1]
        parent.children.append(node)
        stack.append((depth, node))

    logger.debug("Parsed Markdown outline {!r} with {} nodes", root.content, len(entries))
    return root


def _content_lines(lines: list[str]) -> list[tuple[int, str, str]]:
    """(line number, leading whitespace, stripped text) for every content line."""
    i = 0
    # Skip front matter
    if lines and lines[0].strip() == "---":
        i = 1
        while i < len(lines) and lines[i].strip() != "---":
            i += 1
        if i >= len(lines):
            raise FormatError("Unterminated front matter", line=1, fragment="---")
        i += 1

    entries = []
    for lineno, line in enumerate(lines[i:], start=i + 1):
        line = line.rstrip("\r")
        stripped = line.strip()
        if not stripped or _RULE.match(stripped):
            continue
        indent = line[: len(line) - len(line.lstrip(" \t"))]
        entries.append((lineno, indent, stripped))
    return entries


def _indent_unit(entries: list[tuple[int, str, str]]) -> Optional[int]:
    """Detect the indentation convention.

    Returns None for tabs, otherwise the number of spaces per level.
    """
    convention = None
    widths = []
    for lineno, indent, stripped in entries:
        if not indent:
            continue
        kind = "tab" if "\t" in indent else "space"
        if " " in indent and "\t" in indent:
            raise FormatError("Mixed tabs and spaces in indentation", line=lineno, fragment=stripped)
        if convention is None:
            convention = kind
        elif kind != convention:
            raise FormatError(
                f"Inconsistent indentation: {kind}s after {convention}s",
                line=lineno,
                fragment=stripped,
            )
        widths.append(len(indent))
    if convention == "tab":
        return None
    return min(widths) if widths else len(_INDENT)


def _level(indent: str, unit: Optional[int], lineno: int, stripped: str) -> int:
    if unit is None:
        return len(indent)
    if len(indent) % unit:
        raise FormatError(
            f"Indentation of {len(indent)} spaces is not a multiple of {unit}",
            line=lineno,
            fragment=stripped,
        )
    return len(indent) // unit


def _make_node(stripped: str) -> MindMapTree:
    """Parse one outline line into a childless node."""
    heading = _HEADING.match(stripped)
    if heading:
        text = heading.group(2) or ""
    else:
        bullet = _BULLET.match(stripped)
        text = (bullet.group(1) or "") if bullet else stripped

    link = None
    match = _LINK.match(text)
    if match:
        text = match.group(1)
        link = match.group(2) if match.group(2) is not None else match.group(3)

    node = MindMapTree(id=generate_id(), content=_unescape_content(text))
    if link:
        node.link = link
    return node
