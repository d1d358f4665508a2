"""Exception types raised by the tree model, projector and codecs."""

from __future__ import annotations

from typing import Optional


class MindMapError(Exception):
    """Base class for every error raised by mindmap-tools."""


class FormatError(MindMapError, ValueError):
    """Input text does not conform to the grammar of its format.

    ``line`` is 1-based when known. ``fragment`` is the offending piece of
    input (a line, an element, a key path), trimmed for display.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        fragment: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.fragment = fragment
        super().__init__(self._render())

    def _render(self) -> str:
        text = self.message
        if self.line is not None:
            text = f"{text} (line {self.line})"
        if self.fragment:
            frag = self.fragment if len(self.fragment) <= 60 else self.fragment[:57] + "..."
            text = f"{text}: {frag!r}"
        return text


class UnsupportedImportError(MindMapError):
    """Import was attempted on a write-only format (D2, SVG)."""

    SUPPORTED = ("JSON", "FreeMind", "OPML", "Markdown")

    def __init__(self, format_name: str):
        self.format_name = format_name
        alternatives = ", ".join(self.SUPPORTED[:-1]) + f", or {self.SUPPORTED[-1]}"
        super().__init__(
            f"{format_name} import is not supported. "
            f"Please use {alternatives} formats for importing."
        )


class StructuralError(MindMapError):
    """A graph or tree violates the single-root / unique-id invariants."""


class UnsupportedFormatError(MindMapError, ValueError):
    """A format name or file extension is not known to the registry."""
