"""
RU: Построение матрицы модулей QR-кода и разбор цветов.
EN: QR module matrix construction and color parsing.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import qrcode
from PIL import ImageColor
from qrcode.exceptions import DataOverflowError

from ..enums import ErrorCorrectionLevel
from ..exceptions import InvalidColorError, PayloadTooLargeError

logger = logging.getLogger(__name__)

__all__ = [
    "ModuleMatrix",
    "build_matrix",
    "parse_color",
    "css_rgb",
]

ModuleMatrix = List[List[bool]]


def build_matrix(text: str, error_correction: ErrorCorrectionLevel) -> ModuleMatrix:
    """
    Encode text into a square matrix of dark (True) / light (False) modules.

    The matrix has no quiet zone; callers add their own margin.

    Raises:
        PayloadTooLargeError: if the text does not fit in QR version 40.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=error_correction.qrcode_constant,
        box_size=1,
        border=0,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except DataOverflowError as e:
        logger.error(
            "Payload of %d chars does not fit at level %s", len(text), error_correction.name
        )
        raise PayloadTooLargeError(
            "Text is too long to encode as a QR symbol",
            context={"length": len(text), "error_correction": error_correction.value},
        ) from e
    matrix: ModuleMatrix = [[bool(cell) for cell in row] for row in qr.get_matrix()]
    logger.debug(
        "QR version %s, %dx%d modules", qr.version, len(matrix), len(matrix)
    )
    return matrix


def parse_color(color: str) -> Tuple[int, int, int]:
    """
    Parse a hex (#RGB, #RRGGBB) or named CSS color into an RGB triple.

    Raises:
        InvalidColorError: for anything Pillow cannot interpret.

    Example:
        >>> parse_color("#FF0000")
        (255, 0, 0)
        >>> parse_color("navy")
        (0, 0, 128)
    """
    if not isinstance(color, str) or not color.strip():
        raise InvalidColorError(str(color))
    try:
        rgb = ImageColor.getrgb(color.strip())
    except ValueError as e:
        logger.error("Invalid color: %r", color)
        raise InvalidColorError(color) from e
    return rgb[0], rgb[1], rgb[2]


def css_rgb(rgb: Tuple[int, int, int]) -> str:
    return f"rgb({rgb[0]},{rgb[1]},{rgb[2]})"
