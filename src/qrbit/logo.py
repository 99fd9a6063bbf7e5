"""
RU: Распознавание ссылки на логотип (нет / путь к файлу / байты изображения)
и неблокирующая проверка существования файла.

EN: Logo reference classification.

A logo reference is resolved once into a tagged union
(`NoLogo | PathLogo | BufferLogo`) so that downstream code never re-inspects
raw user input. A `PathLogo` that does not exist on disk degrades into
`NoLogo` plus a warning notice; rendering continues without the logo.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from typing import Final, Optional, Tuple, Union

from .models import Notice

logger = logging.getLogger(__name__)

__all__ = [
    "LOGO_MISSING_CODE",
    "LOGO_MISSING_TEMPLATE",
    "NoLogo",
    "PathLogo",
    "BufferLogo",
    "LogoRef",
    "LogoInput",
    "classify",
    "logo_exists",
    "resolve",
    "identity",
]

LOGO_MISSING_CODE: Final[str] = "logo-missing"
LOGO_MISSING_TEMPLATE: Final[str] = "Logo file not found: {path}. Proceeding without logo."


@dataclass(frozen=True)
class NoLogo:
    """No logo requested."""


@dataclass(frozen=True)
class PathLogo:
    path: str


@dataclass(frozen=True)
class BufferLogo:
    data: bytes

    def __repr__(self) -> str:
        return f"BufferLogo(<{len(self.data)} bytes>)"


LogoRef = Union[NoLogo, PathLogo, BufferLogo]
LogoInput = Union[
    None, str, os.PathLike, bytes, bytearray, memoryview, NoLogo, PathLogo, BufferLogo
]

NO_LOGO: Final[NoLogo] = NoLogo()


def classify(logo: LogoInput) -> LogoRef:
    """
    Classify a raw logo reference.

    Buffers are recognized structurally (bytes, bytearray, memoryview);
    strings and path-like objects are paths. An empty string means no logo.

    Raises:
        TypeError: for any other type.

    Example:
        >>> classify("logo.png")
        PathLogo(path='logo.png')
        >>> classify(None)
        NoLogo()
    """
    if logo is None:
        return NO_LOGO
    if isinstance(logo, (NoLogo, PathLogo, BufferLogo)):
        return logo
    if isinstance(logo, (bytes, bytearray, memoryview)):
        data = bytes(logo)
        return BufferLogo(data) if data else NO_LOGO
    if isinstance(logo, (str, os.PathLike)):
        path = os.fspath(logo)
        return PathLogo(path) if path else NO_LOGO
    logger.error("Unsupported logo reference type: %r", type(logo))
    raise TypeError(
        f"logo must be a file path or image bytes, got {type(logo).__name__}"
    )


def logo_exists(path: str) -> bool:
    """Non-throwing existence check; any I/O error counts as missing."""
    try:
        return os.path.isfile(path)
    except (OSError, ValueError):
        return False


def resolve(ref: LogoRef) -> Tuple[LogoRef, Optional[Notice]]:
    """
    Verify a path logo and degrade it when the file is missing.

    Returns:
        The effective logo reference and, when the file is missing,
        a warning notice carrying the fixed message template.
    """
    if isinstance(ref, PathLogo) and not logo_exists(ref.path):
        notice = Notice(
            level="WARNING",
            code=LOGO_MISSING_CODE,
            message=LOGO_MISSING_TEMPLATE.format(path=ref.path),
        )
        return NO_LOGO, notice
    return ref, None


def identity(ref: LogoRef) -> Optional[str]:
    """Fingerprint component of a logo: None, the path, or a content hash."""
    if isinstance(ref, PathLogo):
        return f"path:{ref.path}"
    if isinstance(ref, BufferLogo):
        return "sha256:" + hashlib.sha256(ref.data).hexdigest()
    return None
