"""
RU: Детерминированный ключ кэша для пары (снимок запроса, тег пути рендеринга).
EN: Deterministic cache fingerprint for a (request snapshot, render path tag) pair.

The fingerprint is the SHA-256 of a canonical JSON document (sorted keys,
compact separators, UTF-8). It never depends on object identity or memory
addresses, so it is stable across processes. Buffer logos contribute a
content hash, path logos their path string. The cache flag and any injected
store are not part of the document.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Final

from .logo import identity
from .request import RequestSnapshot

logger = logging.getLogger(__name__)

__all__ = [
    "FINGERPRINT_VERSION",
    "fingerprint",
    "fingerprint_document",
]

# Bump when the document layout changes so old entries never alias new ones.
FINGERPRINT_VERSION: Final[int] = 1


def fingerprint_document(snapshot: RequestSnapshot, path_tag: str) -> Dict[str, Any]:
    """Return the canonical mapping that is hashed into the fingerprint."""
    return {
        "v": FINGERPRINT_VERSION,
        "path": path_tag,
        "text": snapshot.text,
        "size": snapshot.size,
        "margin": snapshot.margin,
        "logo": identity(snapshot.logo),
        "logo_size_ratio": float(snapshot.logo_size_ratio),
        "background_color": snapshot.background_color,
        "foreground_color": snapshot.foreground_color,
        "error_correction": snapshot.error_correction.value,
    }


def fingerprint(snapshot: RequestSnapshot, path_tag: str) -> str:
    """
    Hash a request snapshot and render path tag into a cache key.

    Example:
        >>> key = fingerprint(RenderRequest("hello").snapshot(), "raster-jpeg:90")
        >>> len(key)
        64
    """
    document = fingerprint_document(snapshot, path_tag)
    canonical = json.dumps(
        document, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    logger.debug("Fingerprint %s for path %s", digest[:12], path_tag)
    return digest
