"""Projection between the canonical tree and the flat node/edge graph.

The graph is what the layout and rendering layer works on. Projection is
deterministic and never mutates its input; reconstruction only follows tree
edges and ignores cross-links.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from loguru import logger

from .config import DEFAULT_LAYOUT, LayoutConfig
from .errors import StructuralError
from .models import Cloud, EdgeStyle, MindMapTree, NodeStyle, Position


@dataclass
class NodeData:
    """Payload of a graph node."""
    label: str = ""
    collapsed: Optional[bool] = None
    style: Optional[NodeStyle] = None
    icon: Optional[str] = None
    link: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    is_root: bool = False
    created: Optional[int] = None
    modified: Optional[int] = None
    cloud: Optional[Cloud] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"label": self.label, "isRoot": self.is_root}
        if self.collapsed is not None:
            out["collapsed"] = self.collapsed
        if self.style is not None:
            # the renderer reads style fields flat on the data record
            out.update(self.style.to_dict())
        for key in ("icon", "link", "metadata", "created", "modified"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.cloud is not None:
            out["cloud"] = self.cloud.to_dict()
        return out


@dataclass
class GraphNode:
    id: str
    position: Position
    data: NodeData = field(default_factory=NodeData)
    type: str = "mindmap"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_dict(),
            "data": self.data.to_dict(),
        }


@dataclass
class GraphEdge:
    """A connection between two graph nodes.

    ``style`` uses the renderer's keys: ``stroke``, ``strokeWidth``, ``curve``.
    ``data == {"isCrossLink": True}`` marks an edge that is not a tree edge.
    """
    id: str
    source: str
    target: str
    style: Optional[dict[str, Any]] = None
    data: Optional[dict[str, Any]] = None
    type: str = "smoothstep"

    @property
    def is_cross_link(self) -> bool:
        return bool(self.data and self.data.get("isCrossLink") is True)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
        }
        if self.style is not None:
            out["style"] = dict(self.style)
        if self.data is not None:
            out["data"] = dict(self.data)
        return out


@dataclass
class Graph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def edge_id(source: str, target: str) -> str:
    return f"{source}-{target}"


def edge_style_to_graph(style: Optional[EdgeStyle]) -> Optional[dict[str, Any]]:
    """Translate a node's ``edge_style`` into an edge style record, or None."""
    if style is None or style.is_empty():
        return None
    out: dict[str, Any] = {}
    if style.color is not None:
        out["stroke"] = style.color
    if style.width is not None:
        out["strokeWidth"] = style.width
    if style.style is not None:
        out["curve"] = style.style
    return out


def edge_style_from_graph(style: Optional[dict[str, Any]]) -> Optional[EdgeStyle]:
    if not style:
        return None
    result = EdgeStyle(
        color=style.get("stroke"),
        width=style.get("strokeWidth"),
        style=style.get("curve"),
    )
    return None if result.is_empty() else result


def tree_to_graph(tree: MindMapTree, *, layout: LayoutConfig = DEFAULT_LAYOUT) -> Graph:
    """Flatten a tree into graph nodes and tree edges, depth-first.

    Nodes without a manual ``position`` are placed at
    ``(depth * horizontal_spacing, visit_index * vertical_spacing)``.
    Descendants of a collapsed node are left out entirely.
    """
    graph = Graph()
    stack: list[tuple[MindMapTree, Optional[str], int]] = [(tree, None, 0)]

    while stack:
        node, parent_id, depth = stack.pop()
        if node.position is not None:
            position = Position(node.position.x, node.position.y)
        else:
            position = Position(
                depth * layout.horizontal_spacing,
                len(graph.nodes) * layout.vertical_spacing,
            )

        graph.nodes.append(GraphNode(
            id=node.id,
            position=position,
            data=NodeData(
                label=node.content,
                collapsed=node.collapsed,
                style=dataclasses.replace(node.style) if node.style is not None else None,
                icon=node.icon,
                link=node.link,
                metadata=copy.deepcopy(node.metadata),
                is_root=parent_id is None,
                created=node.created,
                modified=node.modified,
                cloud=dataclasses.replace(node.cloud) if node.cloud is not None else None,
            ),
        ))

        if parent_id is not None:
            graph.edges.append(GraphEdge(
                id=edge_id(parent_id, node.id),
                source=parent_id,
                target=node.id,
                style=edge_style_to_graph(node.edge_style),
            ))

        if node.collapsed:
            continue
        for child in reversed(node.children):
            stack.append((child, node.id, depth + 1))

    logger.debug(
        "Projected tree {!r} to {} nodes, {} edges",
        tree.id, len(graph.nodes), len(graph.edges),
    )
    return graph


def graph_to_tree(
    nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]
) -> Optional[MindMapTree]:
    """Rebuild the tree from graph nodes and edges.

    Returns None for an empty node list. Cross-link edges are ignored.
    Children follow the order of their edges in ``edges``.

    Raises:
        StructuralError: no unique root, a node with two tree parents,
            an edge to an unknown node, or nodes unreachable from the root.
    """
    if not nodes:
        return None

    node_map: dict[str, GraphNode] = {}
    for gnode in nodes:
        if gnode.id in node_map:
            raise StructuralError(f"Duplicate graph node id: {gnode.id!r}")
        node_map[gnode.id] = gnode

    children_map: dict[str, list[str]] = {}
    incoming: dict[str, GraphEdge] = {}
    for edge in edges:
        if edge.is_cross_link:
            continue
        for end in (edge.source, edge.target):
            if end not in node_map:
                raise StructuralError(f"Edge {edge.id!r} references unknown node {end!r}")
        if edge.target in incoming:
            raise StructuralError(
                f"Node {edge.target!r} has more than one parent "
                f"({incoming[edge.target].source!r} and {edge.source!r})"
            )
        incoming[edge.target] = edge
        children_map.setdefault(edge.source, []).append(edge.target)

    roots = [gnode.id for gnode in nodes if gnode.id not in incoming]
    if len(roots) != 1:
        if roots:
            raise StructuralError(f"Ambiguous root: {len(roots)} candidates {roots!r}")
        raise StructuralError("No root: every node has an incoming tree edge")

    root_id = roots[0]
    root = _tree_node(node_map[root_id], None)
    built = {root_id: root}
    stack = [root_id]
    while stack:
        parent_id = stack.pop()
        parent = built[parent_id]
        for child_id in children_map.get(parent_id, ()):
            child = _tree_node(node_map[child_id], incoming[child_id])
            parent.children.append(child)
            built[child_id] = child
            stack.append(child_id)

    if len(built) != len(node_map):
        orphans = [nid for nid in node_map if nid not in built]
        raise StructuralError(f"Nodes not reachable from root {root_id!r}: {orphans!r}")

    logger.debug("Rebuilt tree {!r} from {} nodes", root_id, len(built))
    return root


def _tree_node(gnode: GraphNode, incoming: Optional[GraphEdge]) -> MindMapTree:
    data = gnode.data
    return MindMapTree(
        id=gnode.id,
        content=data.label,
        collapsed=data.collapsed,
        position=Position(gnode.position.x, gnode.position.y),
        style=dataclasses.replace(data.style) if data.style is not None else None,
        icon=data.icon,
        link=data.link,
        metadata=copy.deepcopy(data.metadata),
        edge_style=edge_style_from_graph(incoming.style) if incoming is not None else None,
        created=data.created,
        modified=data.modified,
        cloud=dataclasses.replace(data.cloud) if data.cloud is not None else None,
    )
