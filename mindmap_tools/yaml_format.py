"""YAML codec: the same object shape as JSON, written in block style.

PyYAML's representer and composer recurse once per nesting level, so both
directions work on the event stream instead: the parser and emitter are
state machines and handle any depth.
"""

from __future__ import annotations

from typing import Any, Iterator

import yaml
from loguru import logger
from yaml.composer import ComposerError
from yaml.constructor import ConstructorError
from yaml.nodes import ScalarNode
from yaml.representer import SafeRepresenter
from yaml.resolver import Resolver

from .errors import FormatError
from .models import MindMapTree, require_unique_ids

_MAP_TAG = "tag:yaml.org,2002:map"
_SEQ_TAG = "tag:yaml.org,2002:seq"
_MERGE_TAG = "tag:yaml.org,2002:merge"

_END = object()
_NO_KEY = object()
_MERGE = object()


def to_yaml(tree: MindMapTree) -> str:
    text = yaml.emit(
        _events(tree.to_dict()),
        Dumper=yaml.SafeDumper,
        allow_unicode=True,
        width=float("inf"),
    )
    logger.debug("Serialized tree {!r} to YAML ({} chars)", tree.id, len(text))
    return text


def _events(data: Any) -> Iterator[yaml.Event]:
    """Block-style events for plain data, in insertion order."""
    representer = SafeRepresenter()
    resolver = Resolver()

    yield yaml.StreamStartEvent()
    yield yaml.DocumentStartEvent(explicit=False)
    stack: list[Any] = [data]
    while stack:
        item = stack.pop()
        if isinstance(item, tuple) and item and item[0] is _END:
            yield item[1]()
        elif isinstance(item, dict):
            yield yaml.MappingStartEvent(None, None, True, flow_style=False)
            stack.append((_END, yaml.MappingEndEvent))
            for key, value in reversed(list(item.items())):
                stack.append(value)
                stack.append(key)
        elif isinstance(item, (list, tuple)):
            yield yaml.SequenceStartEvent(None, None, True, flow_style=False)
            stack.append((_END, yaml.SequenceEndEvent))
            stack.extend(reversed(item))
        else:
            node = representer.represent_data(item)
            if not isinstance(node, ScalarNode):
                raise TypeError(f"Cannot write {type(item).__name__} to YAML")
            detected = resolver.resolve(ScalarNode, node.value, (True, False))
            default = resolver.resolve(ScalarNode, node.value, (False, True))
            yield yaml.ScalarEvent(
                None, node.tag, (node.tag == detected, node.tag == default), node.value, style=node.style
            )
    yield yaml.DocumentEndEvent(explicit=False)
    yield yaml.StreamEndEvent()


def parse_yaml(text: str) -> MindMapTree:
    """Parse a YAML tree document.

    Hand-written documents may omit ids, use ``label`` for ``content`` and put
    ``notes`` directly on a node.

    Raises:
        FormatError: empty input, YAML syntax errors, or a malformed tree.
    """
    if not text or not text.strip():
        raise FormatError("Empty YAML input")
    try:
        data = _load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        fragment = None
        if line is not None:
            lines = text.splitlines()
            if line <= len(lines):
                fragment = lines[line - 1].strip()
        raise FormatError(f"Invalid YAML: {problem}", line=line, fragment=fragment) from exc

    if not isinstance(data, dict):
        raise FormatError("YAML document must be a mapping", fragment=type(data).__name__)
    if "root" in data and "content" not in data and "label" not in data:
        data = data["root"]
    tree = MindMapTree.from_dict(data)
    require_unique_ids(tree)
    logger.debug("Parsed YAML tree {!r} with {} nodes", tree.id, tree.count())
    return tree


def _load(text: str) -> Any:
    """Build plain data from a single YAML document, like ``yaml.safe_load``."""
    loader = yaml.SafeLoader(text)
    try:
        loader.get_event()  # stream start
        if loader.check_event(yaml.StreamEndEvent):
            return None
        loader.get_event()  # document start

        anchors: dict[str, Any] = {}
        # open collections as [container, pending mapping key]
        stack: list[list[Any]] = []
        result = None
        while True:
            event = loader.get_event()
            if isinstance(event, (yaml.MappingEndEvent, yaml.SequenceEndEvent)):
                done = stack.pop()[0]
                if isinstance(done, dict) and _MERGE in done:
                    _merge(done, event)
                if not stack:
                    result = done
                    break
                continue

            is_collection = False
            if isinstance(event, yaml.AliasEvent):
                if event.anchor not in anchors:
                    raise ComposerError(
                        None, None, f"found undefined alias {event.anchor!r}", event.start_mark
                    )
                value = anchors[event.anchor]
            elif isinstance(event, yaml.ScalarEvent):
                value = _scalar(loader, event)
            else:
                if event.tag not in (None, "!", _MAP_TAG, _SEQ_TAG):
                    raise ConstructorError(
                        None, None, f"could not determine a constructor for the tag {event.tag!r}",
                        event.start_mark,
                    )
                value = [] if isinstance(event, yaml.SequenceStartEvent) else {}
                is_collection = True
            if not isinstance(event, yaml.AliasEvent) and event.anchor is not None:
                anchors[event.anchor] = value

            if stack:
                _attach(stack[-1], value, event)
            if is_collection:
                stack.append([value, _NO_KEY])
            elif not stack:
                result = value
                break

        loader.get_event()  # document end
        if not loader.check_event(yaml.StreamEndEvent):
            event = loader.get_event()
            raise ComposerError(
                "expected a single document in the stream", None,
                "but found another document", event.start_mark,
            )
        return result
    finally:
        loader.dispose()


def _scalar(loader: yaml.SafeLoader, event: yaml.ScalarEvent) -> Any:
    tag = event.tag
    if tag is None or tag == "!":
        tag = loader.resolve(ScalarNode, event.value, event.implicit)
    if tag == _MERGE_TAG:
        return _MERGE
    node = ScalarNode(tag, event.value, event.start_mark, event.end_mark, style=event.style)
    return loader.construct_object(node)


def _attach(frame: list[Any], value: Any, event: yaml.Event) -> None:
    container, key = frame
    if isinstance(container, list):
        container.append(value)
    elif key is _NO_KEY:
        try:
            hash(value)
        except TypeError as exc:
            raise ConstructorError(
                "while constructing a mapping", None, "found unhashable key", event.start_mark
            ) from exc
        frame[1] = value
    else:
        container[key] = value
        frame[1] = _NO_KEY


def _merge(mapping: dict, event: yaml.Event) -> None:
    """Apply a ``<<`` merge key; explicit keys win, earlier sources first."""
    merged = mapping.pop(_MERGE)
    sources = merged if isinstance(merged, list) else [merged]
    for source in sources:
        if not isinstance(source, dict):
            raise ConstructorError(
                "while constructing a mapping", None,
                "expected a mapping or list of mappings for merging", event.start_mark,
            )
        for key, value in source.items():
            mapping.setdefault(key, value)
