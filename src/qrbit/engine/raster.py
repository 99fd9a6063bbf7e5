"""
RU: Растеризация SVG (CairoSVG) и перекодирование в JPEG/WebP (Pillow).
EN: SVG rasterization and raster transcoding.

PNG comes straight out of CairoSVG. JPEG and WebP are transcoded from that
PNG with Pillow, so every raster format shares one pixel layout.

Requirements: cairosvg (+ system Cairo library), Pillow
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Final, Optional

from PIL import Image

from ..config import DEFAULT_QUALITY
from ..enums import RasterFormat
from ..exceptions import InvalidParameterError, MalformedVectorError, RasterBackendError

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_RASTER_EDGE",
    "rasterize",
    "validate_quality",
]

# Максимальные размеры для предотвращения исчерпания памяти
MAX_RASTER_EDGE: Final[int] = 10000


def _load_cairosvg() -> Any:
    try:
        import cairosvg
    except OSError as e:
        if "cairo" in str(e).lower():
            raise RasterBackendError(
                "Raster output requires the Cairo library. "
                "On macOS: brew install cairo. "
                "On Ubuntu/Debian: apt-get install libcairo2-dev. "
                "On Alpine: apk add cairo-dev."
            ) from e
        raise
    return cairosvg


def validate_quality(quality: int) -> int:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidParameterError(
            f"quality must be an integer, got {type(quality).__name__}"
        )
    if not 1 <= quality <= 100:
        raise InvalidParameterError(
            f"quality must be between 1 and 100, got {quality}",
            context={"quality": quality},
        )
    return quality


def _validate_edge(name: str, value: Optional[int]) -> None:
    if value is None:
        return
    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    if value > MAX_RASTER_EDGE:
        raise InvalidParameterError(
            f"{name} {value} exceeds maximum {MAX_RASTER_EDGE}px"
        )


def _svg_to_png(markup: str, width: Optional[int], height: Optional[int]) -> bytes:
    cairosvg = _load_cairosvg()
    try:
        png = cairosvg.svg2png(
            bytestring=markup.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
    except OSError as e:
        logger.error("Cairo backend failed during rasterization: %r", e)
        raise RasterBackendError(
            f"Raster backend failed: {e}", context={"markup_length": len(markup)}
        ) from e
    except Exception as e:
        logger.error("SVG rasterization failed: %r", e)
        raise MalformedVectorError(
            f"SVG markup could not be rasterized: {e}",
            context={"markup_length": len(markup)},
        ) from e
    if not png:
        raise MalformedVectorError("SVG markup produced no raster output")
    return png


def _transcode(png: bytes, fmt: RasterFormat, quality: int) -> bytes:
    with Image.open(BytesIO(png)) as src:
        src.load()
        buf = BytesIO()
        if fmt is RasterFormat.JPEG:
            img = src.convert("RGBA")
            flat = Image.new("RGB", img.size, (255, 255, 255))
            flat.paste(img, mask=img.getchannel("A"))
            flat.save(buf, format=fmt.pil_format, quality=quality)
        else:
            # lossless WebP: quality is accepted upstream but not used
            src.convert("RGBA").save(buf, format=fmt.pil_format, lossless=True)
    return buf.getvalue()


def rasterize(
    markup: str,
    fmt: RasterFormat,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """
    Rasterize SVG markup into PNG, JPEG or WebP bytes.

    Args:
        markup: SVG document.
        fmt: Target raster format.
        width: Output width in pixels; None keeps the document's own width.
        height: Output height in pixels; None keeps the document's own height.
        quality: 1-100; used by JPEG, ignored by PNG and lossless WebP.

    Raises:
        MalformedVectorError: if the markup cannot be parsed or rendered.
        InvalidParameterError: for out-of-range quality or dimensions.
        RasterBackendError: if the Cairo library is missing.

    Example:
        >>> jpg = rasterize(svg, RasterFormat.JPEG, 240, 240, quality=80)
    """
    fmt = RasterFormat(fmt)
    validate_quality(quality)
    _validate_edge("width", width)
    _validate_edge("height", height)
    if not isinstance(markup, str) or not markup.strip():
        raise MalformedVectorError("SVG markup is empty")

    png = _svg_to_png(markup, width, height)
    if fmt is RasterFormat.PNG:
        data = png
    else:
        data = _transcode(png, fmt, quality)
    logger.debug("Output rendered as %s (%d bytes)", fmt.pil_format, len(data))
    return data
