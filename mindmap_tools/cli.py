"""Command-line interface for mindmap-tools."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from . import CODECS, Format, MindMapError, MindMapTree, parse, serialize, tree_to_graph

LOG_LEVEL_ENV = "MINDMAP_TOOLS_LOG_LEVEL"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mindmap-tools",
        description="Convert mind maps between JSON, YAML, FreeMind, OPML, Markdown, D2 and SVG",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log conversion details to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    format_names = [fmt.value for fmt in Format]

    # --- convert ---
    p_convert = sub.add_parser("convert", help="Convert a mind map to another format")
    p_convert.add_argument("file", help="Input file")
    p_convert.add_argument("-o", "--output", help="Output file (default: stdout)")
    p_convert.add_argument("--from", dest="source", choices=format_names, help="Input format (default: from extension)")
    p_convert.add_argument("--to", dest="target", choices=format_names, help="Output format (default: from output extension)")

    # --- info ---
    p_info = sub.add_parser("info", help="Show map summary")
    p_info.add_argument("file", help="Input file")
    p_info.add_argument("--from", dest="source", choices=format_names, help="Input format")

    # --- tree ---
    p_tree = sub.add_parser("tree", help="Print the node tree")
    p_tree.add_argument("file", help="Input file")
    p_tree.add_argument("--from", dest="source", choices=format_names, help="Input format")
    p_tree.add_argument("--depth", type=int, default=99, help="Max depth")

    # --- graph ---
    p_graph = sub.add_parser("graph", help="Print the node/edge projection as JSON")
    p_graph.add_argument("file", help="Input file")
    p_graph.add_argument("--from", dest="source", choices=format_names, help="Input format")

    # --- formats ---
    sub.add_parser("formats", help="List supported formats")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    commands = {
        "convert": cmd_convert,
        "info": cmd_info,
        "tree": cmd_tree,
        "graph": cmd_graph,
        "formats": cmd_formats,
    }
    try:
        commands[args.command](args)
    except (MindMapError, OSError, UnicodeDecodeError) as exc:
        logger.debug("{} failed: {!r}", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format="{level: <8} | {name}:{function} - {message}")
    logger.enable("mindmap_tools")


def _load(path: str, source: Optional[str]) -> MindMapTree:
    fmt = Format.from_name(source) if source else Format.from_path(path)
    text = Path(path).read_text(encoding="utf-8")
    return parse(text, fmt)


def cmd_convert(args):
    tree = _load(args.file, args.source)

    if args.target:
        target = Format.from_name(args.target)
    elif args.output:
        target = Format.from_path(args.output)
    else:
        raise MindMapError("No output format: pass --to or an output file name")

    out = serialize(tree, target)
    if args.output:
        Path(args.output).write_text(out, encoding="utf-8")
        print(f"Converted {args.file} -> {args.output} ({target.label})")
    else:
        print(out)


def cmd_info(args):
    tree = _load(args.file, args.source)
    nodes = list(tree.walk())
    print(f"File: {args.file}")
    print(f"Root: {tree.content}")
    print(f"Nodes: {len(nodes)}")
    print(f"Depth: {tree.max_depth()}")
    print(f"Collapsed: {sum(1 for n in nodes if n.collapsed)}")
    print(f"Links: {sum(1 for n in nodes if n.link)}")


def cmd_tree(args):
    tree = _load(args.file, args.source)

    for node, depth in tree.walk_with_depth():
        if depth > args.depth:
            continue
        marks = []
        if node.collapsed:
            marks.append("+")
        if node.link:
            marks.append(f"-> {node.link}")
        suffix = f" [{' '.join(marks)}]" if marks else ""
        print(f"{'  ' * depth}{node.content}{suffix}")


def cmd_graph(args):
    tree = _load(args.file, args.source)
    graph = tree_to_graph(tree)
    print(json.dumps(graph.to_dict(), indent=2, ensure_ascii=False))


def cmd_formats(args):
    for fmt, codec in CODECS.items():
        mode = "read/write" if codec.can_import else "write-only"
        print(f"{fmt.value:<10} {', '.join(fmt.extensions):<18} {mode}")


if __name__ == "__main__":
    sys.exit(main())
