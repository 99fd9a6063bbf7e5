"""
RU: Декодирование логотипа и встраивание его в центр SVG-символа.
EN: Logo decoding and embedding into the center of the SVG symbol.

The logo is decoded with Pillow, resized to its pixel footprint and embedded
as a PNG data URI, so the markup is self-contained and rasterizes identically
everywhere.
"""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from typing import Final, Union

from PIL import Image, UnidentifiedImageError

from ..exceptions import LogoDecodeError
from .vector import SvgLayout, format_number

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_LOGO_PIXELS",
    "load_logo",
    "logo_overlay",
]

MIN_LOGO_PIXELS: Final[int] = 1


def load_logo(source: Union[str, bytes]) -> Image.Image:
    """
    Decode a logo from a file path or raw bytes into an RGBA image.

    Raises:
        LogoDecodeError: if the data is not a decodable image.
    """
    origin = "path" if isinstance(source, str) else "buffer"
    try:
        handle = source if isinstance(source, str) else BytesIO(source)
        with Image.open(handle) as img:
            img.load()
            logo = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.error("Logo could not be decoded from %s: %r", origin, e)
        raise LogoDecodeError(
            f"Logo image could not be decoded: {e}", context={"source": origin}
        ) from e
    logger.debug("Logo decoded from %s: %dx%d", origin, logo.width, logo.height)
    return logo


def logo_overlay(
    logo: Image.Image, layout: SvgLayout, ratio: float, pixel_size: int
) -> str:
    """
    Build the <image> element for a logo centered on the symbol.

    Args:
        logo: Decoded RGBA logo.
        layout: Geometry of the symbol in SVG units.
        ratio: Fraction of the symbol edge the logo occupies.
        pixel_size: Symbol edge in output pixels, used for resampling.
    """
    edge_units = layout.symbol * ratio
    position = (layout.total - edge_units) / 2
    edge_px = max(MIN_LOGO_PIXELS, int(pixel_size * ratio))
    resized = logo.resize((edge_px, edge_px), resample=Image.Resampling.LANCZOS)
    buf = BytesIO()
    resized.save(buf, format="PNG")
    href = "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
    return (
        f'<image x="{format_number(position)}" y="{format_number(position)}"'
        f' width="{format_number(edge_units)}" height="{format_number(edge_units)}"'
        f' preserveAspectRatio="none" xlink:href="{href}"/>'
    )
