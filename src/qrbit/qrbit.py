# RU: Объектный фасад над конвейером рендеринга и удобные функции верхнего уровня.
# EN: Object-oriented façade over the render pipeline plus module-level helpers.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from .cache import CacheStore, MemoryCacheStore
from .config import DEFAULT_QUALITY, RenderDefaults
from .engine import RenderingEngine
from .engine.raster import validate_quality
from .enums import ErrorCorrectionLevel, RasterFormat
from .logo import LogoInput
from .models import RenderBundle
from .pipeline import Notifier, PathArg, QrPipeline
from .request import CachePolicy, RenderRequest
from .selector import RenderPathSelector

logger = logging.getLogger(__name__)

__all__ = [
    "QrBit",
    "generate_qr",
    "generate_svg",
    "generate_png",
]


class QrBit:
    """
    QR code with settable options and async output methods.

    Args:
        text: Payload to encode.
        cache: ``True`` (default) gives this instance its own in-memory store,
            ``False`` disables caching, a store instance is used as-is and may
            be shared between instances.
        notifier: Optional callback for non-fatal notices (missing logo).
        quality: Default JPEG/WebP quality for output methods called without one.
        **options: Any other RenderRequest field (size, margin, logo, ...).

    Examples:
        >>> qr = QrBit("https://example.com", logo="logo.png", size=300)
        >>> svg = await qr.to_svg()
        >>> jpg = await qr.to_jpg(quality=80)
        >>> await qr.to_png_file("out/qr.png")
    """

    def __init__(
        self,
        text: str,
        *,
        cache: CachePolicy = True,
        notifier: Optional[Notifier] = None,
        engine: Optional[RenderingEngine] = None,
        quality: int = DEFAULT_QUALITY,
        **options: Any,
    ) -> None:
        self._request = RenderRequest(text, **options)
        self._quality = validate_quality(quality)
        self._cache: Optional[CacheStore]
        if cache is True:
            self._cache = MemoryCacheStore()
        elif cache is False:
            self._cache = None
        else:
            self._cache = cache
        self._request.cache = self._cache if self._cache is not None else False
        self._pipeline = QrPipeline(
            selector=RenderPathSelector(engine),
            cache=self._cache if self._cache is not None else False,
            notifier=notifier,
        )

    @classmethod
    def from_config(
        cls, text: str, config: Dict[str, Any], **options: Any
    ) -> "QrBit":
        """Build an instance whose defaults come from loaded configuration."""
        defaults = RenderDefaults.from_config(config)
        fields: Dict[str, Any] = {
            "size": defaults.size,
            "margin": defaults.margin,
            "logo_size_ratio": defaults.logo_size_ratio,
            "background_color": defaults.background_color,
            "foreground_color": defaults.foreground_color,
            "error_correction": defaults.error_correction,
            "cache": MemoryCacheStore(defaults.cache_max_entries),
            "quality": defaults.quality,
        }
        fields.update(options)
        return cls(text, **fields)

    # --- properties ---

    @property
    def request(self) -> RenderRequest:
        return self._request

    @property
    def cache(self) -> Optional[CacheStore]:
        return self._cache

    @property
    def quality(self) -> int:
        """Default JPEG/WebP quality used when an output method gets none."""
        return self._quality

    @quality.setter
    def quality(self, value: int) -> None:
        self._quality = validate_quality(value)

    @property
    def text(self) -> str:
        return self._request.text

    @text.setter
    def text(self, value: str) -> None:
        self._request.text = value

    @property
    def size(self) -> int:
        return self._request.size

    @size.setter
    def size(self, value: int) -> None:
        self._request.size = value

    @property
    def margin(self) -> Optional[int]:
        return self._request.margin

    @margin.setter
    def margin(self, value: Optional[int]) -> None:
        self._request.margin = value

    @property
    def logo(self) -> LogoInput:
        return self._request.logo

    @logo.setter
    def logo(self, value: LogoInput) -> None:
        self._request.logo = value

    @property
    def logo_size_ratio(self) -> float:
        return self._request.logo_size_ratio

    @logo_size_ratio.setter
    def logo_size_ratio(self, value: float) -> None:
        self._request.logo_size_ratio = value

    @property
    def background_color(self) -> str:
        return self._request.background_color

    @background_color.setter
    def background_color(self, value: str) -> None:
        self._request.background_color = value

    @property
    def foreground_color(self) -> str:
        return self._request.foreground_color

    @foreground_color.setter
    def foreground_color(self, value: str) -> None:
        self._request.foreground_color = value

    @property
    def error_correction(self) -> Union[ErrorCorrectionLevel, str]:
        return self._request.error_correction

    @error_correction.setter
    def error_correction(self, value: Union[ErrorCorrectionLevel, str]) -> None:
        self._request.error_correction = value

    # --- chainable setters ---

    def set_size(self, size: int) -> "QrBit":
        self._request.set_size(size)
        return self

    def set_margin(self, margin: Optional[int]) -> "QrBit":
        self._request.set_margin(margin)
        return self

    def set_logo(self, logo: LogoInput, size_ratio: Optional[float] = None) -> "QrBit":
        self._request.set_logo(logo, size_ratio)
        return self

    def set_colors(self, background: str, foreground: str) -> "QrBit":
        self._request.set_colors(background, foreground)
        return self

    def _quality_or_default(self, quality: Optional[int]) -> int:
        return self._quality if quality is None else quality

    def generate_cache_key(self, path_tag: str) -> str:
        """Fingerprint of the current options along `path_tag` (e.g. "raster-jpeg:90")."""
        return self._pipeline.fingerprint_for(self._request, path_tag)

    # --- outputs ---

    async def to_svg(self, *, cache: Optional[bool] = None) -> str:
        outcome = await self._pipeline.render_svg(self._request, cache=cache)
        return str(outcome.payload)

    async def to_png(self, *, cache: Optional[bool] = None) -> bytes:
        outcome = await self._pipeline.render_png(self._request, cache=cache)
        return bytes(outcome.payload)  # type: ignore[arg-type]

    async def to_jpg(
        self, quality: Optional[int] = None, *, cache: Optional[bool] = None
    ) -> bytes:
        outcome = await self._pipeline.render_jpeg(
            self._request, self._quality_or_default(quality), cache=cache
        )
        return bytes(outcome.payload)  # type: ignore[arg-type]

    async def to_webp(
        self, quality: Optional[int] = None, *, cache: Optional[bool] = None
    ) -> bytes:
        outcome = await self._pipeline.render_webp(
            self._request, self._quality_or_default(quality), cache=cache
        )
        return bytes(outcome.payload)  # type: ignore[arg-type]

    async def generate(
        self, quality: Optional[int] = None, *, cache: Optional[bool] = None
    ) -> RenderBundle:
        return await self._pipeline.render_all(
            self._request, self._quality_or_default(quality), cache=cache
        )

    async def to_svg_file(self, path: PathArg, *, cache: Optional[bool] = None) -> None:
        await self._pipeline.write_svg(self._request, path, cache=cache)

    async def to_png_file(self, path: PathArg, *, cache: Optional[bool] = None) -> None:
        await self._pipeline.write_png(self._request, path, cache=cache)

    async def to_jpg_file(
        self,
        path: PathArg,
        quality: Optional[int] = None,
        *,
        cache: Optional[bool] = None,
    ) -> None:
        await self._pipeline.write_jpeg(
            self._request, path, self._quality_or_default(quality), cache=cache
        )

    async def to_webp_file(
        self,
        path: PathArg,
        quality: Optional[int] = None,
        *,
        cache: Optional[bool] = None,
    ) -> None:
        await self._pipeline.write_webp(
            self._request, path, self._quality_or_default(quality), cache=cache
        )

    # --- static conversion helpers ---

    @staticmethod
    def convert_svg_to_png(
        svg: str, width: Optional[int] = None, height: Optional[int] = None
    ) -> bytes:
        return RenderingEngine().rasterize(svg, RasterFormat.PNG, width, height)

    @staticmethod
    def convert_svg_to_jpeg(
        svg: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: int = DEFAULT_QUALITY,
    ) -> bytes:
        return RenderingEngine().rasterize(svg, RasterFormat.JPEG, width, height, quality)

    @staticmethod
    def convert_svg_to_webp(
        svg: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: int = DEFAULT_QUALITY,
    ) -> bytes:
        return RenderingEngine().rasterize(svg, RasterFormat.WEBP, width, height, quality)

    def __repr__(self) -> str:
        shown = self.text[:16] + ("..." if len(self.text) > 16 else "")
        return f"QrBit({shown!r}, size={self.size}, margin={self.margin})"


async def generate_qr(text: str, **options: Any) -> RenderBundle:
    """Render every representation of `text` (no caching)."""
    return await QrBit(text, cache=False, **options).generate()


async def generate_svg(text: str, **options: Any) -> str:
    return await QrBit(text, cache=False, **options).to_svg()


async def generate_png(text: str, **options: Any) -> bytes:
    return await QrBit(text, cache=False, **options).to_png()
