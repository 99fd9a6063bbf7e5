"""
qrbit/enums.py

(Краткое RU: Перечисления уровней коррекции ошибок и растровых форматов.)

EN: Domain enums for the QR rendering pipeline.

- Error-correction levels map 1:1 onto qrcode constants.
- Raster formats carry their Pillow format name, media type and lossiness.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, Literal, Union

from qrcode.constants import (
    ERROR_CORRECT_H,
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
)

_logger: Final[logging.Logger] = logging.getLogger(__name__)

__all__ = [
    "ErrorCorrectionLevel",
    "RasterFormat",
]


class ErrorCorrectionLevel(str, Enum):
    """QR error-correction level.

    Higher levels tolerate a larger logo but produce denser symbols.
    """

    LOW = "low"
    MEDIUM = "medium"
    QUARTILE = "quartile"
    HIGH = "high"

    @property
    def qrcode_constant(self) -> int:
        return _QRCODE_CONSTANTS[self]

    @property
    def recovery_percent(self) -> int:
        """Approximate share of codewords that can be restored."""
        return _RECOVERY_PERCENT[self]

    @classmethod
    def parse(cls, value: Union["ErrorCorrectionLevel", str]) -> "ErrorCorrectionLevel":
        """Accept enum members, names, values and the one-letter codes L/M/Q/H."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _LETTER_CODES:
                return _LETTER_CODES[key]
            for member in cls:
                if key in (member.value, member.name.lower()):
                    return member
        _logger.error("Unknown error correction level: %r", value)
        raise ValueError(f"Unknown error correction level: {value!r}")

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names = {
            "low": {"ru": "Низкий (~7%)", "en": "Low (~7%)"},
            "medium": {"ru": "Средний (~15%)", "en": "Medium (~15%)"},
            "quartile": {"ru": "Квартиль (~25%)", "en": "Quartile (~25%)"},
            "high": {"ru": "Высокий (~30%)", "en": "High (~30%)"},
        }
        return names[self.value].get(lang, self.value)


_QRCODE_CONSTANTS: Final[dict[ErrorCorrectionLevel, int]] = {
    ErrorCorrectionLevel.LOW: ERROR_CORRECT_L,
    ErrorCorrectionLevel.MEDIUM: ERROR_CORRECT_M,
    ErrorCorrectionLevel.QUARTILE: ERROR_CORRECT_Q,
    ErrorCorrectionLevel.HIGH: ERROR_CORRECT_H,
}

_RECOVERY_PERCENT: Final[dict[ErrorCorrectionLevel, int]] = {
    ErrorCorrectionLevel.LOW: 7,
    ErrorCorrectionLevel.MEDIUM: 15,
    ErrorCorrectionLevel.QUARTILE: 25,
    ErrorCorrectionLevel.HIGH: 30,
}

_LETTER_CODES: Final[dict[str, ErrorCorrectionLevel]] = {
    "l": ErrorCorrectionLevel.LOW,
    "m": ErrorCorrectionLevel.MEDIUM,
    "q": ErrorCorrectionLevel.QUARTILE,
    "h": ErrorCorrectionLevel.HIGH,
}


class RasterFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def is_lossy(self) -> bool:
        """WebP is encoded losslessly, so only JPEG consumes quality."""
        return self is RasterFormat.JPEG

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def media_type(self) -> str:
        return f"image/{self.value}"

    @property
    def accepts_quality(self) -> bool:
        return self is not RasterFormat.PNG

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        return self.value.upper()
