"""
RU: Прямой векторный кодировщик: матрица модулей -> SVG без логотипа.
EN: Direct vector encoder producing SVG markup from the module matrix.

Layout rules:
    - margin defined: coordinates are pixels; the document carries explicit
      width/height of size + 2*margin and a matching viewBox.
    - margin None: coordinates are module units with a quiet zone of
      DEFAULT_QUIET_ZONE_MODULES; the document carries only a viewBox and
      scales to whatever size the consumer picks.

Dark modules are merged into horizontal runs and emitted as one <path>.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, List, Optional

from ..enums import ErrorCorrectionLevel
from .symbol import ModuleMatrix, build_matrix, css_rgb, parse_color

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_QUIET_ZONE_MODULES",
    "SvgLayout",
    "VectorSymbol",
    "encode_svg",
    "format_number",
    "layout_for",
    "render_svg_document",
]

DEFAULT_QUIET_ZONE_MODULES: Final[int] = 4

SVG_NS: Final[str] = "http://www.w3.org/2000/svg"
XLINK_NS: Final[str] = "http://www.w3.org/1999/xlink"


@dataclass(frozen=True)
class SvgLayout:
    """Geometry of a symbol inside its SVG coordinate system."""

    total: float
    offset: float
    module: float
    symbol: float
    pixel_width: int
    pixel_height: int
    explicit_dimensions: bool


@dataclass(frozen=True)
class VectorSymbol:
    markup: str
    width: int
    height: int


def format_number(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text or "0"


def layout_for(modules: int, size: int, margin: Optional[int]) -> SvgLayout:
    if margin is None:
        total = modules + 2 * DEFAULT_QUIET_ZONE_MODULES
        return SvgLayout(
            total=float(total),
            offset=float(DEFAULT_QUIET_ZONE_MODULES),
            module=1.0,
            symbol=float(modules),
            pixel_width=size,
            pixel_height=size,
            explicit_dimensions=False,
        )
    total_px = size + 2 * margin
    return SvgLayout(
        total=float(total_px),
        offset=float(margin),
        module=size / modules,
        symbol=float(size),
        pixel_width=total_px,
        pixel_height=total_px,
        explicit_dimensions=True,
    )


def _module_path(matrix: ModuleMatrix, layout: SvgLayout) -> str:
    parts: List[str] = []
    m = layout.module
    for y, row in enumerate(matrix):
        x = 0
        n = len(row)
        while x < n:
            if not row[x]:
                x += 1
                continue
            start = x
            while x < n and row[x]:
                x += 1
            run = x - start
            left = format_number(layout.offset + start * m)
            top = format_number(layout.offset + y * m)
            span = format_number(run * m)
            parts.append(f"M{left},{top}h{span}v{format_number(m)}h-{span}z")
    return "".join(parts)


def render_svg_document(
    matrix: ModuleMatrix,
    layout: SvgLayout,
    background: str,
    foreground: str,
    overlay: str = "",
) -> str:
    """Serialize the symbol; `overlay` is extra markup drawn on top (e.g. a logo)."""
    total = format_number(layout.total)
    dims = (
        f' width="{layout.pixel_width}" height="{layout.pixel_height}"'
        if layout.explicit_dimensions
        else ""
    )
    return (
        f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" version="1.1"{dims}'
        f' viewBox="0 0 {total} {total}" shape-rendering="crispEdges">'
        f'<rect x="0" y="0" width="{total}" height="{total}" fill="{background}"/>'
        f'<path fill="{foreground}" d="{_module_path(matrix, layout)}"/>'
        f"{overlay}</svg>"
    )


def encode_svg(
    text: str,
    size: int,
    margin: Optional[int],
    background_color: str,
    foreground_color: str,
    error_correction: ErrorCorrectionLevel,
) -> VectorSymbol:
    """
    Encode text as logo-free SVG markup.

    Raises:
        InvalidColorError: for an unparseable color.
        PayloadTooLargeError: if the text does not fit.

    Example:
        >>> sym = encode_svg("hello", 200, 20, "#FFFFFF", "#000000", ErrorCorrectionLevel.MEDIUM)
        >>> sym.width
        240
    """
    background = css_rgb(parse_color(background_color))
    foreground = css_rgb(parse_color(foreground_color))
    matrix = build_matrix(text, error_correction)
    layout = layout_for(len(matrix), size, margin)
    markup = render_svg_document(matrix, layout, background, foreground)
    logger.debug("Vector symbol encoded: %d chars of markup", len(markup))
    return VectorSymbol(markup=markup, width=layout.pixel_width, height=layout.pixel_height)
