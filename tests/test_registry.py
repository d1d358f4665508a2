"""Tests for format lookup, codec dispatch and cross-format conversion."""

import pytest

from mindmap_tools import (
    CODECS,
    Format,
    MindMapTree,
    UnsupportedFormatError,
    UnsupportedImportError,
    convert,
    get_codec,
    parse,
    serialize,
)
from mindmap_tools.registry import importable_formats


def make_tree():
    root = MindMapTree(id="root", content="Root")
    for name in ("X", "Y", "Z"):
        child = root.add_child(name, id=name.lower())
        child.add_child(f"{name}1", id=f"{name.lower()}1")
    return root


def contents(tree):
    return [node.content for node in tree.walk()]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("json", Format.JSON),
        ("FreeMind", Format.FREEMIND),
        ("mm", Format.FREEMIND),
        (".opml", Format.OPML),
        ("md", Format.MARKDOWN),
        ("markdown", Format.MARKDOWN),
        ("yml", Format.YAML),
        ("d2", Format.D2),
        (Format.SVG, Format.SVG),
    ],
)
def test_format_from_name(name, expected):
    assert Format.from_name(name) is expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("map.json", Format.JSON),
        ("dir/map.MM", Format.FREEMIND),
        ("notes.markdown", Format.MARKDOWN),
        ("tree.yaml", Format.YAML),
        ("out.svg", Format.SVG),
    ],
)
def test_format_from_path(path, expected):
    assert Format.from_path(path) is expected


def test_unknown_format():
    with pytest.raises(UnsupportedFormatError):
        Format.from_name("docx")
    with pytest.raises(UnsupportedFormatError):
        Format.from_path("README")
    with pytest.raises(UnsupportedFormatError):
        get_codec("pdf")


def test_every_format_has_a_codec():
    assert set(CODECS) == set(Format)
    assert get_codec("yaml").format is Format.YAML


def test_write_only_formats():
    assert importable_formats() == [Format.JSON, Format.FREEMIND, Format.OPML, Format.MARKDOWN, Format.YAML]
    for fmt in (Format.D2, Format.SVG):
        assert CODECS[fmt].can_import is False
        with pytest.raises(UnsupportedImportError):
            parse("anything", fmt)


@pytest.mark.parametrize("fmt", [Format.JSON, Format.YAML, Format.FREEMIND, Format.OPML, Format.MARKDOWN])
def test_order_survives_every_readable_format(fmt):
    tree = make_tree()
    parsed = parse(serialize(tree, fmt), fmt)
    assert contents(parsed) == ["Root", "X", "X1", "Y", "Y1", "Z", "Z1"]


@pytest.mark.parametrize("fmt", [Format.D2, Format.SVG])
def test_order_in_write_only_output(fmt):
    text = serialize(make_tree(), fmt)
    assert text.index("X") < text.index("Y") < text.index("Z")


def test_lossless_formats_keep_ids():
    tree = make_tree()
    for fmt in (Format.JSON, Format.YAML, Format.FREEMIND):
        assert parse(serialize(tree, fmt), fmt).ids() == tree.ids()


def test_convert_chain():
    tree = make_tree()
    md = convert(serialize(tree, "json"), "json", "markdown")
    assert md.startswith("# Root\n- X\n  - X1\n")
    opml = convert(md, "md", "opml")
    assert contents(parse(opml, "opml")) == contents(tree)
