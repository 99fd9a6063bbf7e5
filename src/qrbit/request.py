# RU: Модель запроса рендеринга: изменяемые поля между вызовами, неизменяемый снимок на время вызова.
# EN: Render request model: settable between calls, frozen into a snapshot for each call.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from .config import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FOREGROUND_COLOR,
    DEFAULT_LOGO_SIZE_RATIO,
    DEFAULT_MARGIN,
    DEFAULT_SIZE,
)
from .enums import ErrorCorrectionLevel
from .logo import LogoInput, LogoRef, NoLogo, classify

if TYPE_CHECKING:
    from .cache import CacheStore

logger = logging.getLogger(__name__)

__all__ = [
    "CachePolicy",
    "RenderRequest",
    "RequestSnapshot",
]

CachePolicy = Union[bool, "CacheStore"]


@dataclass
class RenderRequest:
    """
    All inputs that affect rendering, plus the cache policy.

    No validation happens here: invalid colors are reported by the rendering
    engine, unreachable logo paths by the logo resolver.

    Examples:
        >>> req = RenderRequest("https://example.com", margin=None)
        >>> req.set_size(300).set_colors("#FFFFFF", "navy")
        >>> req.text = "changed"  # next call gets a new fingerprint
    """

    text: str
    size: int = DEFAULT_SIZE
    margin: Optional[int] = DEFAULT_MARGIN
    logo: LogoInput = None
    logo_size_ratio: float = DEFAULT_LOGO_SIZE_RATIO
    background_color: str = DEFAULT_BACKGROUND_COLOR
    foreground_color: str = DEFAULT_FOREGROUND_COLOR
    error_correction: Union[ErrorCorrectionLevel, str] = ErrorCorrectionLevel.MEDIUM
    cache: CachePolicy = field(default=True, compare=False)

    def set_size(self, size: int) -> "RenderRequest":
        self.size = size
        return self

    def set_margin(self, margin: Optional[int]) -> "RenderRequest":
        self.margin = margin
        return self

    def set_logo(
        self, logo: LogoInput, size_ratio: Optional[float] = None
    ) -> "RenderRequest":
        self.logo = logo
        if size_ratio is not None:
            self.logo_size_ratio = size_ratio
        return self

    def set_colors(self, background: str, foreground: str) -> "RenderRequest":
        self.background_color = background
        self.foreground_color = foreground
        return self

    @property
    def cache_enabled(self) -> bool:
        return self.cache is not False

    def snapshot(self) -> "RequestSnapshot":
        """Freeze the current field values for one render call."""
        return RequestSnapshot(
            text=self.text,
            size=self.size,
            margin=self.margin,
            logo=classify(self.logo),
            logo_size_ratio=self.logo_size_ratio,
            background_color=self.background_color,
            foreground_color=self.foreground_color,
            error_correction=ErrorCorrectionLevel.parse(self.error_correction),
        )


@dataclass(frozen=True)
class RequestSnapshot:
    """Immutable view of the output-affecting fields of a RenderRequest."""

    text: str
    size: int
    margin: Optional[int]
    logo: LogoRef
    logo_size_ratio: float
    background_color: str
    foreground_color: str
    error_correction: ErrorCorrectionLevel

    @property
    def has_logo(self) -> bool:
        return not isinstance(self.logo, NoLogo)

    @property
    def width(self) -> int:
        """Outer edge in pixels: symbol plus margin on each side, when defined."""
        if self.margin is None:
            return self.size
        return self.size + 2 * self.margin

    @property
    def height(self) -> int:
        return self.width
