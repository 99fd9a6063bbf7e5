"""Общие фикстуры тестов qrbit."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image


def make_logo(size: int = 32, color: tuple[int, int, int, int] = (255, 0, 0, 255)) -> Image.Image:
    return Image.new("RGBA", (size, size), color)


@pytest.fixture
def logo_bytes() -> bytes:
    buf = BytesIO()
    make_logo().save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def logo_path(tmp_path: Path, logo_bytes: bytes) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(logo_bytes)
    return path


@pytest.fixture
def missing_logo_path(tmp_path: Path) -> Path:
    return tmp_path / "does-not-exist.png"
