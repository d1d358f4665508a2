"""Layout and rendering settings, passed to functions as keyword options."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing of the default positions assigned by ``tree_to_graph``."""
    horizontal_spacing: float = 250
    vertical_spacing: float = 100


@dataclass(frozen=True)
class SvgConfig:
    """Box sizes, spacing and colours for ``to_svg``."""
    node_width: int = 120
    node_height: int = 40
    horizontal_spacing: int = 80
    vertical_spacing: int = 60
    edge_color: str = "#666666"
    edge_width: float = 2
    font_size: int = 14
    font_family: str = "Arial, sans-serif"
    text_color: str = "#333333"
    node_fill: str = "#ffffff"
    cloud_color: str = "#e0e0e0"
    padding: int = 20


DEFAULT_LAYOUT = LayoutConfig()
DEFAULT_SVG = SvgConfig()
