"""JSON codec: lossless, every tree field round-trips."""

from __future__ import annotations

import json
from typing import Any, Optional

from loguru import logger

from .errors import FormatError
from .models import MindMapTree, require_unique_ids


def to_json(tree: MindMapTree, *, indent: Optional[int] = 2) -> str:
    """Serialize a tree as ``{"root": <tree>}``.

    Output matches ``json.dumps(..., indent=indent, ensure_ascii=False)``
    but is written without recursion, so any tree depth serializes.
    """
    text = _dumps({"root": tree.to_dict()}, indent)
    logger.debug("Serialized tree {!r} to JSON ({} chars)", tree.id, len(text))
    return text


def _dumps(value: Any, indent: Optional[int]) -> str:
    if indent is None:
        newline, step, item_sep = "", "", ", "
    else:
        newline, step, item_sep = "\n", " " * indent, ","

    out: list[str] = []
    # frames: ("value", obj, level) or ("text", str, None)
    stack: list[tuple[str, Any, Optional[int]]] = [("value", value, 0)]
    while stack:
        kind, item, level = stack.pop()
        if kind == "text":
            out.append(item)
            continue

        if isinstance(item, dict) and item:
            inner = newline + step * (level + 1)
            frames = []
            for i, (key, child) in enumerate(item.items()):
                sep = item_sep if i else ""
                frames.append(("text", f"{sep}{inner}{_key(key)}: ", None))
                frames.append(("value", child, level + 1))
            frames.append(("text", newline + step * level + "}", None))
            out.append("{")
            stack.extend(reversed(frames))
        elif isinstance(item, (list, tuple)) and item:
            inner = newline + step * (level + 1)
            frames = []
            for i, child in enumerate(item):
                frames.append(("text", (item_sep if i else "") + inner, None))
                frames.append(("value", child, level + 1))
            frames.append(("text", newline + step * level + "]", None))
            out.append("[")
            stack.extend(reversed(frames))
        else:
            out.append(json.dumps(item, ensure_ascii=False))
    return "".join(out)


def _key(key: Any) -> str:
    # same key coercion as json.dumps
    if isinstance(key, str):
        pass
    elif isinstance(key, bool):
        key = "true" if key else "false"
    elif key is None:
        key = "null"
    elif isinstance(key, (int, float)):
        key = json.dumps(key)
    else:
        raise TypeError(f"keys must be str, int, float, bool or None, not {type(key).__name__}")
    return json.dumps(key, ensure_ascii=False)


def parse_json(text: str) -> MindMapTree:
    """Parse a JSON document; accepts ``{"root": ...}`` or a bare tree object.

    Raises:
        FormatError: empty input, invalid JSON, nesting deeper than the
            JSON parser supports, or a malformed tree.
    """
    if not text or not text.strip():
        raise FormatError("Empty JSON input")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        lines = text.splitlines()
        fragment = lines[exc.lineno - 1].strip() if 0 < exc.lineno <= len(lines) else None
        raise FormatError(
            f"Invalid JSON: {exc.msg} at column {exc.colno}",
            line=exc.lineno,
            fragment=fragment,
        ) from exc
    except RecursionError as exc:
        raise FormatError("Invalid JSON: nesting too deep") from exc

    if isinstance(data, dict) and "root" in data and "content" not in data:
        data = data["root"]
    tree = MindMapTree.from_dict(data)
    require_unique_ids(tree)
    logger.debug("Parsed JSON tree {!r} with {} nodes", tree.id, tree.count())
    return tree
