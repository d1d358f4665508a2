"""Format dispatch: one codec record per ``Format`` member."""

from __future__ import annotations

from typing import Callable, NamedTuple, Union

from loguru import logger

from .d2 import parse_d2, to_d2
from .formats import Format
from .freemind import parse_freemind, to_freemind
from .json_format import parse_json, to_json
from .markdown import parse_markdown, to_markdown
from .models import MindMapTree
from .opml import parse_opml, to_opml
from .svg import parse_svg, to_svg
from .yaml_format import parse_yaml, to_yaml


class Codec(NamedTuple):
    """Conversion functions for one format.

    For write-only formats ``parse`` raises UnsupportedImportError.
    """
    format: Format
    parse: Callable[[str], MindMapTree]
    serialize: Callable[[MindMapTree], str]
    can_import: bool = True


CODECS: dict[Format, Codec] = {
    Format.JSON: Codec(Format.JSON, parse_json, to_json),
    Format.FREEMIND: Codec(Format.FREEMIND, parse_freemind, to_freemind),
    Format.OPML: Codec(Format.OPML, parse_opml, to_opml),
    Format.MARKDOWN: Codec(Format.MARKDOWN, parse_markdown, to_markdown),
    Format.YAML: Codec(Format.YAML, parse_yaml, to_yaml),
    Format.D2: Codec(Format.D2, parse_d2, to_d2, can_import=False),
    Format.SVG: Codec(Format.SVG, parse_svg, to_svg, can_import=False),
}


def get_codec(fmt: Union[Format, str]) -> Codec:
    """Look up the codec for a Format or format name."""
    return CODECS[Format.from_name(fmt)]


def parse(text: str, fmt: Union[Format, str]) -> MindMapTree:
    codec = get_codec(fmt)
    logger.debug("Parsing {} input", codec.format.label)
    return codec.parse(text)


def serialize(tree: MindMapTree, fmt: Union[Format, str]) -> str:
    codec = get_codec(fmt)
    logger.debug("Serializing tree {!r} as {}", tree.id, codec.format.label)
    return codec.serialize(tree)


def convert(text: str, source: Union[Format, str], target: Union[Format, str]) -> str:
    """Parse ``text`` as ``source`` and serialize it as ``target``."""
    return serialize(parse(text, source), target)


def importable_formats() -> list[Format]:
    return [fmt for fmt, codec in CODECS.items() if codec.can_import]
