"""mindmap-tools: the document model and format codecs of a mind-map editor.

A mind map is a rooted tree of ``MindMapTree`` nodes. This package converts
it to and from JSON, YAML, FreeMind, OPML and Markdown, exports it to D2 and
SVG, and projects it to the flat node/edge graph a canvas renders.

Usage:
    import mindmap_tools

    # Parse a FreeMind map
    tree = mindmap_tools.parse_freemind(text)
    print(tree)  # the root's content

    # Walk the tree
    for node, depth in tree.walk_with_depth():
        print("  " * depth + node.content)

    # Convert by format name
    md = mindmap_tools.serialize(tree, "markdown")

    # Project to a graph for rendering, and back
    graph = mindmap_tools.tree_to_graph(tree)
    same = mindmap_tools.graph_to_tree(graph.nodes, graph.edges)

Logging goes through loguru and is disabled for this package until the
application calls ``logger.enable("mindmap_tools")``.
"""

from loguru import logger

__version__ = "0.1.0"

from .config import DEFAULT_LAYOUT, DEFAULT_SVG, LayoutConfig, SvgConfig
from .d2 import parse_d2, to_d2
from .errors import (
    FormatError,
    MindMapError,
    StructuralError,
    UnsupportedFormatError,
    UnsupportedImportError,
)
from .formats import Format
from .freemind import parse_freemind, to_freemind
from .ids import IdGenerator, IdSanitizer, generate_id, sanitize_id
from .json_format import parse_json, to_json
from .markdown import parse_markdown, to_markdown
from .models import Cloud, EdgeStyle, MindMapTree, NodeStyle, Position
from .opml import parse_opml, to_opml
from .projector import Graph, GraphEdge, GraphNode, NodeData, graph_to_tree, tree_to_graph
from .registry import CODECS, Codec, convert, get_codec, parse, serialize
from .svg import parse_svg, to_svg
from .yaml_format import parse_yaml, to_yaml

logger.disable(__name__)

__all__ = [
    "CODECS",
    "Cloud",
    "Codec",
    "DEFAULT_LAYOUT",
    "DEFAULT_SVG",
    "EdgeStyle",
    "Format",
    "FormatError",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "IdGenerator",
    "IdSanitizer",
    "LayoutConfig",
    "MindMapError",
    "MindMapTree",
    "NodeData",
    "NodeStyle",
    "Position",
    "StructuralError",
    "SvgConfig",
    "UnsupportedFormatError",
    "UnsupportedImportError",
    "convert",
    "generate_id",
    "get_codec",
    "graph_to_tree",
    "parse",
    "parse_d2",
    "parse_freemind",
    "parse_json",
    "parse_markdown",
    "parse_opml",
    "parse_svg",
    "parse_yaml",
    "sanitize_id",
    "serialize",
    "to_d2",
    "to_freemind",
    "to_json",
    "to_markdown",
    "to_opml",
    "to_svg",
    "to_yaml",
    "tree_to_graph",
]
