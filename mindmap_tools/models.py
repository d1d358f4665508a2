"""Data models for mind map documents."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .errors import FormatError, StructuralError
from .ids import generate_id

EDGE_STYLES = ("bezier", "linear", "sharp_linear", "sharp_bezier")


@dataclass
class Position:
    """A manual layout hint in canvas coordinates."""
    x: float = 0
    y: float = 0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class NodeStyle:
    """Visual styling of a single node."""
    color: Optional[str] = None
    background_color: Optional[str] = None
    font_size: Optional[int] = None
    font_name: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None

    # (attribute, external key) in serialization order
    FIELDS = (
        ("color", "color"),
        ("background_color", "backgroundColor"),
        ("font_size", "fontSize"),
        ("font_name", "fontName"),
        ("bold", "bold"),
        ("italic", "italic"),
    )

    def is_empty(self) -> bool:
        return all(getattr(self, attr) is None for attr, _ in self.FIELDS)

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in self.FIELDS if getattr(self, attr) is not None}


@dataclass
class EdgeStyle:
    """Styling of the edge joining a node to its parent."""
    color: Optional[str] = None
    width: Optional[float] = None
    style: Optional[str] = None  # one of EDGE_STYLES

    def is_empty(self) -> bool:
        return self.color is None and self.width is None and self.style is None

    def to_dict(self) -> dict:
        out = {}
        if self.color is not None:
            out["color"] = self.color
        if self.width is not None:
            out["width"] = self.width
        if self.style is not None:
            out["style"] = self.style
        return out


@dataclass
class Cloud:
    """A FreeMind cloud drawn around a node's subtree."""
    color: Optional[str] = None

    def to_dict(self) -> dict:
        return {"color": self.color} if self.color is not None else {}


@dataclass
class MindMapTree:
    """A node in a mind map, and through ``children`` the whole subtree below it.

    The node passed around as "the tree" is the root. Ids must be unique
    across the tree; children order is significant.
    """
    # Core
    id: str = ""
    content: str = ""
    children: list[MindMapTree] = field(default_factory=list)

    # Optional presentation
    collapsed: Optional[bool] = None
    position: Optional[Position] = None
    style: Optional[NodeStyle] = None
    icon: Optional[str] = None
    link: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    edge_style: Optional[EdgeStyle] = None

    # Carried for FreeMind round trips
    created: Optional[int] = None  # epoch milliseconds
    modified: Optional[int] = None
    cloud: Optional[Cloud] = None

    def __post_init__(self):
        if not self.id:
            self.id = generate_id()

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def description(self) -> Optional[str]:
        if self.metadata:
            return self.metadata.get("description")
        return None

    @property
    def notes(self) -> Optional[str]:
        if self.metadata:
            return self.metadata.get("notes")
        return None

    def walk(self) -> Iterator[MindMapTree]:
        """Yield this node and all descendants, pre-order."""
        for node, _ in self.walk_with_depth():
            yield node

    def walk_with_depth(self) -> Iterator[tuple[MindMapTree, int]]:
        """Yield ``(node, depth)`` pre-order without recursion."""
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            for child in reversed(node.children):
                stack.append((child, depth + 1))

    def find(self, node_id: str) -> Optional[MindMapTree]:
        """Find the node with the given id."""
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def find_content(self, text: str) -> Optional[MindMapTree]:
        """Find first node with matching content (case-insensitive)."""
        text_lower = text.lower()
        for node in self.walk():
            if node.content.lower() == text_lower:
                return node
        return None

    def add_child(self, content: str, **kwargs) -> MindMapTree:
        """Create and append a new child node."""
        child = MindMapTree(content=content, **kwargs)
        self.children.append(child)
        return child

    def count(self) -> int:
        """Total number of nodes (including self)."""
        return sum(1 for _ in self.walk())

    def max_depth(self) -> int:
        """Depth of the deepest node; a lone root has depth 0."""
        return max(depth for _, depth in self.walk_with_depth())

    def ids(self) -> list[str]:
        return [node.id for node in self.walk()]

    def check_unique_ids(self) -> None:
        """Raise StructuralError if any id is empty or used twice."""
        seen = set()
        for node in self.walk():
            if not node.id:
                raise StructuralError(f"Node {node.content!r} has an empty id")
            if node.id in seen:
                raise StructuralError(f"Duplicate node id: {node.id!r}")
            seen.add(node.id)

    def to_dict(self) -> dict:
        """Plain-data form used by the JSON and YAML codecs."""
        out = _node_fields(self)
        stack = [(self, out)]
        while stack:
            node, target = stack.pop()
            kids = []
            for child in node.children:
                child_dict = _node_fields(child)
                kids.append(child_dict)
                stack.append((child, child_dict))
            target["children"] = kids
        return out

    @classmethod
    def from_dict(cls, data: Any, *, path: str = "root") -> MindMapTree:
        """Build a tree from the plain-data form, validating as it goes.

        Raises:
            FormatError: naming the path of the first offending value.
        """
        root = _node_from_fields(data, path)
        stack = [(root, data, path)]
        while stack:
            node, raw, here = stack.pop()
            kids = raw.get("children")
            if kids is None:
                continue
            if not isinstance(kids, list):
                raise FormatError("'children' must be a list", fragment=f"{here}.children")
            for i, raw_child in enumerate(kids):
                child_path = f"{here}.children[{i}]"
                child = _node_from_fields(raw_child, child_path)
                node.children.append(child)
                stack.append((child, raw_child, child_path))
        return root

    def __str__(self) -> str:
        return self.content

    def __repr__(self) -> str:
        child_count = len(self.children)
        suffix = f" ({child_count} children)" if child_count else ""
        return f"MindMapTree({self.id!r}, {self.content!r}{suffix})"


def _node_fields(node: MindMapTree) -> dict:
    out: dict[str, Any] = {"id": node.id, "content": node.content}
    if node.collapsed is not None:
        out["collapsed"] = node.collapsed
    if node.position is not None:
        out["position"] = node.position.to_dict()
    if node.style is not None:
        out["style"] = node.style.to_dict()
    if node.icon is not None:
        out["icon"] = node.icon
    if node.link is not None:
        out["link"] = node.link
    if node.metadata is not None:
        out["metadata"] = copy.deepcopy(node.metadata)
    if node.edge_style is not None:
        out["edgeStyle"] = node.edge_style.to_dict()
    if node.created is not None:
        out["created"] = node.created
    if node.modified is not None:
        out["modified"] = node.modified
    if node.cloud is not None:
        out["cloud"] = node.cloud.to_dict()
    return out


def _node_from_fields(raw: Any, path: str) -> MindMapTree:
    if not isinstance(raw, dict):
        raise FormatError("Expected a node object", fragment=path)

    node_id = raw.get("id")
    if node_id is None:
        node_id = generate_id()
    elif not isinstance(node_id, str) or not node_id:
        raise FormatError("'id' must be a non-empty string", fragment=f"{path}.id")

    content = raw.get("content", raw.get("label"))
    if content is None:
        raise FormatError("Missing 'content'", fragment=path)
    if not isinstance(content, str):
        raise FormatError("'content' must be a string", fragment=f"{path}.content")

    node = MindMapTree(id=node_id, content=content)
    node.collapsed = _opt(raw, "collapsed", bool, path)
    node.icon = _opt(raw, "icon", str, path)
    node.link = _opt(raw, "link", str, path)
    node.created = _opt(raw, "created", int, path)
    node.modified = _opt(raw, "modified", int, path)

    metadata = _opt(raw, "metadata", dict, path)
    if metadata is not None:
        node.metadata = copy.deepcopy(metadata)
    # hand-written YAML puts notes on the node itself
    notes = _opt(raw, "notes", str, path)
    if notes is not None:
        node.metadata = dict(node.metadata or {})
        node.metadata.setdefault("notes", notes)

    pos = _opt(raw, "position", dict, path)
    if pos is not None:
        node.position = Position(
            x=_require_number(pos, "x", f"{path}.position"),
            y=_require_number(pos, "y", f"{path}.position"),
        )

    style = _opt(raw, "style", dict, path)
    if style is not None:
        here = f"{path}.style"
        node.style = NodeStyle(
            color=_opt(style, "color", str, here),
            background_color=_opt(style, "backgroundColor", str, here),
            font_size=_opt(style, "fontSize", int, here),
            font_name=_opt(style, "fontName", str, here),
            bold=_opt(style, "bold", bool, here),
            italic=_opt(style, "italic", bool, here),
        )

    edge = _opt(raw, "edgeStyle", dict, path)
    if edge is not None:
        here = f"{path}.edgeStyle"
        width = edge.get("width")
        if width is not None and not _is_number(width):
            raise FormatError("'width' must be a number", fragment=f"{here}.width")
        node.edge_style = EdgeStyle(
            color=_opt(edge, "color", str, here),
            width=width,
            style=_opt(edge, "style", str, here),
        )

    cloud = _opt(raw, "cloud", dict, path)
    if cloud is not None:
        node.cloud = Cloud(color=_opt(cloud, "color", str, f"{path}.cloud"))

    return node


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _opt(raw: dict, key: str, kind: type, path: str) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    if kind is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise FormatError(f"'{key}' must be of type {kind.__name__}", fragment=f"{path}.{key}")
    return value


def _require_number(raw: dict, key: str, path: str) -> float:
    value = raw.get(key)
    if not _is_number(value):
        raise FormatError(f"'{key}' must be a number", fragment=f"{path}.{key}")
    return value


def require_unique_ids(tree: MindMapTree) -> None:
    """Reject parsed input that reuses a node id."""
    seen = set()
    for node in tree.walk():
        if node.id in seen:
            raise FormatError("Duplicate node id", fragment=node.id)
        seen.add(node.id)
