"""
Исключения пакета qrbit.

Иерархия типизированных исключений для конвейера рендеринга QR-кодов.
Движок рендеринга переводит ошибки сторонних библиотек (qrcode, Pillow,
CairoSVG) в эти типы, а конвейер пропускает их к вызывающему коду без
изменений.

Example:
    >>> from qrbit.exceptions import RenderEngineError
    >>> try:
    ...     await pipeline.render_png(request)
    ... except RenderEngineError as e:
    ...     logger.error(f"Render failed: {e}")
    ...     print(e.context)

Иерархия:
    QrBitError (базовое)
    ├── ConfigurationError
    ├── InvalidParameterError
    └── RenderEngineError
        ├── InvalidColorError
        ├── LogoDecodeError
        ├── MalformedVectorError
        ├── PayloadTooLargeError
        └── RasterBackendError
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
    "QrBitError",
    "ConfigurationError",
    "InvalidParameterError",
    "RenderEngineError",
    "InvalidColorError",
    "LogoDecodeError",
    "MalformedVectorError",
    "PayloadTooLargeError",
    "RasterBackendError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class QrBitError(Exception):
    """
    Базовое исключение для всех ошибок qrbit.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        context: Дополнительный контекст для отладки (опционально)

    Example:
        >>> raise QrBitError(
        ...     "Operation failed",
        ...     context={"operation": "rasterize", "format": "png"}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        return f"{self.message} ({details})"


class ConfigurationError(QrBitError):
    """Invalid value in loaded configuration."""


class InvalidParameterError(QrBitError, ValueError):
    """Invalid call parameter (e.g. JPEG quality outside 1-100)."""


# ==============================================================================
# RENDERING ENGINE ERRORS
# ==============================================================================


class RenderEngineError(QrBitError):
    """
    Базовая ошибка движка рендеринга.

    Конвейер никогда не перехватывает эти исключения: они доходят до
    вызывающего кода в исходном виде.
    """


class InvalidColorError(RenderEngineError):
    """Color string is neither a hex triplet nor a known color name."""

    def __init__(self, color: str) -> None:
        super().__init__(
            f"Invalid color specification: {color!r}", context={"color": color}
        )
        self.color = color


class LogoDecodeError(RenderEngineError):
    """Logo bytes or file could not be decoded as an image."""


class MalformedVectorError(RenderEngineError):
    """SVG markup fed into rasterization could not be parsed."""


class PayloadTooLargeError(RenderEngineError):
    """Text does not fit in any QR version at the requested error correction."""


class RasterBackendError(RenderEngineError):
    """Raster backend (Cairo) is not available on this system."""
