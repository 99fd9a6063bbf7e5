"""
RU: Выбор пути рендеринга для каждого запрошенного формата.
EN: Render path selection.

Decision table:

    | target  | logo | strategy                                          |
    |---------|------|---------------------------------------------------|
    | SVG     | no   | direct vector encoder (local, fast path)          |
    | SVG     | yes  | rendering engine composites the logo into the SVG |
    | raster  | any  | SVG from the row above, rasterized by the engine  |

Raster output is always derived from the SVG, so an exported SVG file and
its raster derivatives share one pixel layout. Errors raised by the encoder
or the engine propagate unchanged.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Union

from .config import DEFAULT_QUALITY
from .engine import RenderingEngine, VectorSymbol, encode_svg
from .engine.raster import validate_quality
from .enums import ErrorCorrectionLevel, RasterFormat
from .logo import BufferLogo, PathLogo
from .models import SVG_MEDIA_TYPE, RenderPathTag, RenderResult
from .request import RequestSnapshot

logger = logging.getLogger(__name__)

__all__ = [
    "RenderStrategy",
    "RenderPathSelector",
    "VectorEncoder",
]

VectorEncoder = Callable[
    [str, int, Optional[int], str, str, ErrorCorrectionLevel], VectorSymbol
]


class RenderStrategy(str, Enum):
    DIRECT_VECTOR = "direct-vector"
    ENGINE_VECTOR = "engine-vector"
    RASTER_CONVERSION = "raster-conversion"


class RenderPathSelector:
    """
    Chooses and runs the cheapest correct strategy for a target format.

    Args:
        engine: Rendering engine used for logo compositing and rasterization.
        vector_encoder: Logo-free SVG encoder for the fast path.
    """

    def __init__(
        self,
        engine: Optional[RenderingEngine] = None,
        vector_encoder: VectorEncoder = encode_svg,
    ) -> None:
        self.engine = engine if engine is not None else RenderingEngine()
        self.vector_encoder = vector_encoder

    # --- strategy / tags ---

    @staticmethod
    def strategy_for(
        snapshot: RequestSnapshot, target: Union[str, RasterFormat]
    ) -> RenderStrategy:
        if target != "svg":
            return RenderStrategy.RASTER_CONVERSION
        if snapshot.has_logo:
            return RenderStrategy.ENGINE_VECTOR
        return RenderStrategy.DIRECT_VECTOR

    @staticmethod
    def svg_tag(snapshot: RequestSnapshot) -> str:
        return RenderPathTag.svg(snapshot.has_logo)

    @staticmethod
    def raster_tag(fmt: RasterFormat, quality: int = DEFAULT_QUALITY) -> str:
        fmt = RasterFormat(fmt)
        validate_quality(quality)
        return RenderPathTag.raster(fmt, quality)

    # --- rendering ---

    def render_vector(self, snapshot: RequestSnapshot) -> RenderResult:
        """Produce SVG markup for the snapshot."""
        strategy = self.strategy_for(snapshot, "svg")
        logger.debug("SVG strategy: %s", strategy.value)
        if strategy is RenderStrategy.DIRECT_VECTOR:
            symbol = self.vector_encoder(
                snapshot.text,
                snapshot.size,
                snapshot.margin,
                snapshot.background_color,
                snapshot.foreground_color,
                snapshot.error_correction,
            )
        else:
            logo = snapshot.logo
            source: Union[str, bytes, None] = None
            if isinstance(logo, PathLogo):
                source = logo.path
            elif isinstance(logo, BufferLogo):
                source = logo.data
            symbol = self.engine.encode_vector(
                snapshot.text,
                snapshot.size,
                snapshot.margin,
                snapshot.background_color,
                snapshot.foreground_color,
                snapshot.error_correction,
                logo=source,
                logo_size_ratio=snapshot.logo_size_ratio,
            )
        return RenderResult(
            payload=symbol.markup,
            width=symbol.width,
            height=symbol.height,
            media_type=SVG_MEDIA_TYPE,
            path_tag=self.svg_tag(snapshot),
        )

    def render_raster(
        self,
        snapshot: RequestSnapshot,
        vector: RenderResult,
        fmt: RasterFormat,
        quality: int = DEFAULT_QUALITY,
    ) -> RenderResult:
        """Rasterize previously produced SVG markup for the snapshot."""
        fmt = RasterFormat(fmt)
        tag = self.raster_tag(fmt, quality)
        if not isinstance(vector.payload, str):
            raise TypeError("raster conversion needs SVG markup as input")
        logger.debug(
            "Raster strategy: %s -> %s", vector.path_tag, tag
        )
        data = self.engine.rasterize(
            vector.payload, fmt, snapshot.width, snapshot.height, quality
        )
        return RenderResult(
            payload=data,
            width=snapshot.width,
            height=snapshot.height,
            media_type=fmt.media_type,
            path_tag=tag,
        )
