# RU: Модели результатов рендеринга, уведомлений и тегов пути рендеринга.
# EN: Render result, notice and render-path tag models.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final, Optional, Tuple, Union

from .enums import RasterFormat

logger = logging.getLogger(__name__)

__all__ = [
    "SVG_MEDIA_TYPE",
    "Notice",
    "RenderPathTag",
    "RenderResult",
    "RenderOutcome",
    "RenderBundle",
]

SVG_MEDIA_TYPE: Final[str] = "image/svg+xml"


@dataclass(frozen=True)
class Notice:
    """Non-fatal notification produced during a render call."""

    level: str
    code: str
    message: str

    @property
    def levelno(self) -> int:
        value = logging.getLevelName(self.level)
        return value if isinstance(value, int) else logging.WARNING


class RenderPathTag:
    """
    Discriminators for the strategy and format that produced a result.

    The same request yields different bytes through different paths, so the
    tag is part of every cache fingerprint.
    """

    VECTOR_SVG: Final[str] = "vector-svg"
    ENGINE_SVG: Final[str] = "engine-svg"

    @staticmethod
    def svg(has_logo: bool) -> str:
        return RenderPathTag.ENGINE_SVG if has_logo else RenderPathTag.VECTOR_SVG

    @staticmethod
    def raster(fmt: RasterFormat, quality: Optional[int] = None) -> str:
        tag = f"raster-{fmt.value}"
        if fmt.accepts_quality and quality is not None:
            tag = f"{tag}:{quality}"
        return tag


@dataclass(frozen=True)
class RenderResult:
    """
    Output of one render path.

    Attributes:
        payload: SVG text for vector output, encoded bytes for raster output.
        width: Resolved width in pixels.
        height: Resolved height in pixels.
        media_type: MIME type of the payload.
        path_tag: Render path that produced the payload.
    """

    payload: Union[str, bytes]
    width: int
    height: int
    media_type: str
    path_tag: str

    @property
    def is_vector(self) -> bool:
        return isinstance(self.payload, str)

    def to_bytes(self) -> bytes:
        if isinstance(self.payload, str):
            return self.payload.encode("utf-8")
        return self.payload

    def __repr__(self) -> str:
        return (
            f"RenderResult({self.path_tag}, {self.width}x{self.height}, "
            f"{len(self.payload)} {'chars' if self.is_vector else 'bytes'})"
        )


@dataclass(frozen=True)
class RenderOutcome:
    """Render result plus the non-fatal notices raised while producing it."""

    result: RenderResult
    notices: Tuple[Notice, ...] = ()
    cache_hit: bool = False

    @property
    def payload(self) -> Union[str, bytes]:
        return self.result.payload


@dataclass(frozen=True)
class RenderBundle:
    """All representations of one request, rendered from one snapshot."""

    svg: RenderOutcome
    png: RenderOutcome
    jpeg: RenderOutcome
    webp: RenderOutcome
    width: int
    height: int
    notices: Tuple[Notice, ...] = field(default=())
