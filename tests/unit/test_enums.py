"""Тесты перечислений уровней коррекции и растровых форматов."""

import pytest
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L

from qrbit.enums import ErrorCorrectionLevel, RasterFormat


class TestErrorCorrectionLevel:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("H", ErrorCorrectionLevel.HIGH),
            ("high", ErrorCorrectionLevel.HIGH),
            ("QUARTILE", ErrorCorrectionLevel.QUARTILE),
            (" m ", ErrorCorrectionLevel.MEDIUM),
            (ErrorCorrectionLevel.LOW, ErrorCorrectionLevel.LOW),
        ],
    )
    def test_parse(self, raw: str, expected: ErrorCorrectionLevel) -> None:
        assert ErrorCorrectionLevel.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["x", "", 3, None])
    def test_parse_rejects_unknown(self, raw: object) -> None:
        with pytest.raises(ValueError):
            ErrorCorrectionLevel.parse(raw)  # type: ignore[arg-type]

    def test_qrcode_constants(self) -> None:
        assert ErrorCorrectionLevel.LOW.qrcode_constant == ERROR_CORRECT_L
        assert ErrorCorrectionLevel.HIGH.qrcode_constant == ERROR_CORRECT_H

    def test_recovery_grows_with_level(self) -> None:
        values = [level.recovery_percent for level in ErrorCorrectionLevel]
        assert values == sorted(values)

    def test_localized_name(self) -> None:
        assert ErrorCorrectionLevel.HIGH.localized_name("en") == "High (~30%)"
        assert "Высокий" in ErrorCorrectionLevel.HIGH.localized_name()


class TestRasterFormat:
    def test_media_types(self) -> None:
        assert RasterFormat.PNG.media_type == "image/png"
        assert RasterFormat.JPEG.media_type == "image/jpeg"
        assert RasterFormat.WEBP.media_type == "image/webp"

    def test_quality_handling(self) -> None:
        assert not RasterFormat.PNG.accepts_quality
        assert RasterFormat.JPEG.accepts_quality and RasterFormat.JPEG.is_lossy
        assert RasterFormat.WEBP.accepts_quality and not RasterFormat.WEBP.is_lossy

    def test_string_value_lookup(self) -> None:
        assert RasterFormat("webp") is RasterFormat.WEBP
        assert RasterFormat.JPEG.pil_format == "JPEG"
