"""The closed set of external file formats."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

from .errors import UnsupportedFormatError


class Format(Enum):
    """Supported external formats, keyed by short name."""
    JSON = "json"
    FREEMIND = "freemind"
    OPML = "opml"
    MARKDOWN = "markdown"
    YAML = "yaml"
    D2 = "d2"
    SVG = "svg"

    @property
    def extensions(self) -> tuple[str, ...]:
        return _EXTENSIONS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_name(cls, name: Union[str, Format]) -> Format:
        """Resolve a format name (``"yaml"``) or extension (``"yml"``, ``".mm"``)."""
        if isinstance(name, Format):
            return name
        key = name.strip().lower().lstrip(".")
        for fmt in cls:
            if key == fmt.value or f".{key}" in fmt.extensions:
                return fmt
        raise UnsupportedFormatError(f"Unknown format: {name!r}")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Format:
        """Pick the format from a file name's extension."""
        suffix = Path(path).suffix.lower()
        for fmt in cls:
            if suffix in fmt.extensions:
                return fmt
        raise UnsupportedFormatError(f"Cannot infer format from file name: {str(path)!r}")


_EXTENSIONS = {
    Format.JSON: (".json",),
    Format.FREEMIND: (".mm",),
    Format.OPML: (".opml",),
    Format.MARKDOWN: (".md", ".markdown"),
    Format.YAML: (".yaml", ".yml"),
    Format.D2: (".d2",),
    Format.SVG: (".svg",),
}

_LABELS = {
    Format.JSON: "JSON",
    Format.FREEMIND: "FreeMind",
    Format.OPML: "OPML",
    Format.MARKDOWN: "Markdown",
    Format.YAML: "YAML",
    Format.D2: "D2",
    Format.SVG: "SVG",
}
