"""Export to D2 diagram source (https://d2lang.com).

Output is consumed by the ``d2`` compiler, so the layout is fixed:

    direction: right

    Root: root
    root: {
      root.Child 1: child1
      root.Child 2: child2 {
        stroke: #ff0000
      }
    }

A node with one child is joined to it directly (``parent.Child: child``);
two or more children are wrapped in a ``parent: { ... }`` container. Ids are
used as D2 keys, so hyphens become underscores.
"""

from __future__ import annotations

from typing import Optional, Union

from loguru import logger

from .errors import UnsupportedImportError
from .formats import Format
from .ids import IdSanitizer
from .models import MindMapTree

_INDENT = "  "


def escape_label(text: str) -> str:
    """Escape quotes; real newlines become the two characters ``\\n``."""
    return text.replace('"', '\\"').replace("\r\n", "\n").replace("\n", "\\n")


def to_d2(tree: MindMapTree) -> str:
    """Serialize a tree as D2 source."""
    ids = IdSanitizer(Format.D2)
    lines = ["direction: right", ""]

    # frames: (node, parent key or None, depth) or (None, None, depth) to close a block
    stack: list[tuple[Optional[MindMapTree], Optional[str], int]] = [(tree, None, 0)]
    while stack:
        node, parent_key, depth = stack.pop()
        if node is None:
            lines.append(f"{_INDENT * depth}}}")
            continue

        key = ids.sanitize(node.id)
        _declare(lines, node, key, parent_key, depth)

        if len(node.children) == 1:
            stack.append((node.children[0], key, depth))
        elif len(node.children) > 1:
            lines.append(f"{_INDENT * depth}{key}: {{")
            stack.append((None, None, depth))
            for child in reversed(node.children):
                stack.append((child, key, depth + 1))

    logger.debug("Serialized tree {!r} to D2 ({} nodes)", tree.id, len(ids))
    return "\n".join(lines)


def _declare(
    lines: list[str], node: MindMapTree, key: str, parent_key: Optional[str], depth: int
) -> None:
    pad = _INDENT * depth
    label = escape_label(node.content)
    head = f"{parent_key}.{label}: {key}" if parent_key else f"{label}: {key}"

    style = node.style
    color = style.color if style else None
    fill = style.background_color if style else None
    description = node.description if isinstance(node.description, str) else None

    if not (color or fill or node.icon or node.link or description):
        lines.append(pad + head)
        return

    attrs = []
    if color:
        attrs.append(f"stroke: {color}")
    if fill:
        attrs.append(f"fill: {fill}")
    if node.icon:
        attrs.append(f"icon: {node.icon}")
    if parent_key is not None:
        if node.link:
            attrs.append(f"link: {node.link}")
        if description:
            attrs.append(f"tooltip: {escape_label(description)}")

    lines.append(f"{pad}{head} {{")
    for attr in attrs:
        lines.append(f"{pad}{_INDENT}{attr}")
    lines.append(f"{pad}}}")


def parse_d2(text: Union[str, bytes, None] = None) -> MindMapTree:
    """D2 is write-only; always raises UnsupportedImportError."""
    raise UnsupportedImportError(Format.D2.label)
