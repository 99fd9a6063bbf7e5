"""
engine

Движок рендеринга QR-кодов: кодирование символа, SVG, встраивание логотипа
и растеризация.

- Прямой векторный кодировщик (без логотипа) на основе qrcode.
- Композитинг логотипа (путь к файлу или байты) через Pillow.
- Растеризация SVG в PNG через CairoSVG, JPEG/WebP через Pillow.

Public API:
    - RenderingEngine: кодирование SVG с логотипом и растеризация (class)
    - VectorSymbol: SVG-разметка и размеры в пикселях
    - encode_svg: прямой векторный кодировщик
    - rasterize: SVG -> PNG/JPEG/WebP

Примеры:
    >>> engine = RenderingEngine()
    >>> sym = engine.encode_vector("hello", 200, 20, "#FFFFFF", "#000000",
    ...                            ErrorCorrectionLevel.HIGH, logo="logo.png")
    >>> png = engine.rasterize(sym.markup, RasterFormat.PNG, sym.width, sym.height)

Зависимости:
    qrcode, Pillow, cairosvg
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..config import DEFAULT_LOGO_SIZE_RATIO, DEFAULT_QUALITY
from ..enums import ErrorCorrectionLevel, RasterFormat
from .compositing import load_logo, logo_overlay
from .raster import rasterize
from .symbol import build_matrix, css_rgb, parse_color
from .vector import VectorSymbol, encode_svg, layout_for, render_svg_document

logger = logging.getLogger(__name__)

__all__ = [
    "RenderingEngine",
    "VectorSymbol",
    "encode_svg",
    "rasterize",
]

EngineLogo = Union[str, bytes, bytearray, memoryview]


class RenderingEngine:
    """
    Rendering engine used by the path selector for logo compositing and
    rasterization.

    The engine performs no logo-existence degradation: a missing path is
    reported by the logo resolver before the engine is called, so any path
    reaching `encode_vector` that cannot be opened is a `LogoDecodeError`.
    """

    def encode_vector(
        self,
        text: str,
        size: int,
        margin: Optional[int],
        background_color: str,
        foreground_color: str,
        error_correction: ErrorCorrectionLevel,
        logo: Optional[EngineLogo] = None,
        logo_size_ratio: float = DEFAULT_LOGO_SIZE_RATIO,
    ) -> VectorSymbol:
        """
        Encode text as SVG, compositing a logo into the center when given.

        Args:
            text: Payload.
            size: Symbol edge in pixels.
            margin: Quiet zone in pixels, or None for a viewBox-only document.
            background_color: Light module color.
            foreground_color: Dark module color.
            error_correction: QR error-correction level.
            logo: File path or raw image bytes.
            logo_size_ratio: Fraction of the symbol edge covered by the logo.

        Raises:
            InvalidColorError, LogoDecodeError, PayloadTooLargeError
        """
        if logo is None:
            return encode_svg(
                text, size, margin, background_color, foreground_color, error_correction
            )

        background = css_rgb(parse_color(background_color))
        foreground = css_rgb(parse_color(foreground_color))
        source = logo if isinstance(logo, str) else bytes(logo)
        image = load_logo(source)
        matrix = build_matrix(text, error_correction)
        layout = layout_for(len(matrix), size, margin)
        overlay = logo_overlay(image, layout, logo_size_ratio, size)
        markup = render_svg_document(matrix, layout, background, foreground, overlay)
        logger.info(
            "QR symbol with logo encoded: %d chars, ratio %.2f", len(text), logo_size_ratio
        )
        return VectorSymbol(
            markup=markup, width=layout.pixel_width, height=layout.pixel_height
        )

    def rasterize(
        self,
        markup: str,
        fmt: RasterFormat,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: int = DEFAULT_QUALITY,
    ) -> bytes:
        """Rasterize SVG markup; see `qrbit.engine.raster.rasterize`."""
        return rasterize(markup, fmt, width, height, quality)
