"""Тесты выбора пути рендеринга."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from qrbit.engine import RenderingEngine, VectorSymbol
from qrbit.enums import ErrorCorrectionLevel, RasterFormat
from qrbit.exceptions import InvalidColorError, InvalidParameterError
from qrbit.models import SVG_MEDIA_TYPE, RenderResult
from qrbit.request import RenderRequest
from qrbit.selector import RenderPathSelector, RenderStrategy

FAKE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="240" height="240"/>'


@pytest.fixture
def engine() -> Mock:
    mock = Mock(spec=RenderingEngine)
    mock.encode_vector.return_value = VectorSymbol(markup=FAKE_SVG, width=240, height=240)
    mock.rasterize.return_value = b"raster-bytes"
    return mock


@pytest.fixture
def encoder() -> Mock:
    return Mock(return_value=VectorSymbol(markup=FAKE_SVG, width=240, height=240))


@pytest.fixture
def selector(engine: Mock, encoder: Mock) -> RenderPathSelector:
    return RenderPathSelector(engine=engine, vector_encoder=encoder)


def test_strategy_table(logo_path: Path) -> None:
    plain = RenderRequest("x").snapshot()
    with_logo = RenderRequest("x", logo=str(logo_path)).snapshot()
    assert RenderPathSelector.strategy_for(plain, "svg") is RenderStrategy.DIRECT_VECTOR
    assert RenderPathSelector.strategy_for(with_logo, "svg") is RenderStrategy.ENGINE_VECTOR
    for fmt in RasterFormat:
        assert RenderPathSelector.strategy_for(plain, fmt) is RenderStrategy.RASTER_CONVERSION
        assert RenderPathSelector.strategy_for(with_logo, fmt) is RenderStrategy.RASTER_CONVERSION


def test_no_logo_uses_direct_encoder(
    selector: RenderPathSelector, engine: Mock, encoder: Mock
) -> None:
    result = selector.render_vector(RenderRequest("x", margin=None).snapshot())
    encoder.assert_called_once_with("x", 200, None, "#FFFFFF", "#000000", ErrorCorrectionLevel.MEDIUM)
    engine.encode_vector.assert_not_called()
    assert result.path_tag == "vector-svg"
    assert result.media_type == SVG_MEDIA_TYPE
    assert result.payload == FAKE_SVG


def test_path_logo_goes_through_engine(
    selector: RenderPathSelector, engine: Mock, encoder: Mock, logo_path: Path
) -> None:
    snapshot = RenderRequest("x", logo=logo_path, logo_size_ratio=0.3).snapshot()
    result = selector.render_vector(snapshot)
    encoder.assert_not_called()
    kwargs = engine.encode_vector.call_args.kwargs
    assert kwargs["logo"] == str(logo_path)
    assert kwargs["logo_size_ratio"] == 0.3
    assert result.path_tag == "engine-svg"


def test_buffer_logo_goes_through_engine(
    selector: RenderPathSelector, engine: Mock, logo_bytes: bytes
) -> None:
    selector.render_vector(RenderRequest("x", logo=logo_bytes).snapshot())
    assert engine.encode_vector.call_args.kwargs["logo"] == logo_bytes


def test_raster_derives_from_vector(selector: RenderPathSelector, engine: Mock) -> None:
    snapshot = RenderRequest("x").snapshot()
    vector = selector.render_vector(snapshot)
    result = selector.render_raster(snapshot, vector, RasterFormat.JPEG, 60)
    engine.rasterize.assert_called_once_with(FAKE_SVG, RasterFormat.JPEG, 240, 240, 60)
    assert result.payload == b"raster-bytes"
    assert result.media_type == "image/jpeg"
    assert result.path_tag == "raster-jpeg:60"
    assert (result.width, result.height) == (240, 240)


def test_raster_needs_markup(selector: RenderPathSelector) -> None:
    snapshot = RenderRequest("x").snapshot()
    bogus = RenderResult(b"png", 1, 1, "image/png", "raster-png")
    with pytest.raises(TypeError):
        selector.render_raster(snapshot, bogus, RasterFormat.PNG)


def test_raster_tags() -> None:
    assert RenderPathSelector.raster_tag(RasterFormat.PNG) == "raster-png"
    assert RenderPathSelector.raster_tag(RasterFormat.PNG, 50) == "raster-png"
    assert RenderPathSelector.raster_tag(RasterFormat.JPEG) == "raster-jpeg:90"
    assert RenderPathSelector.raster_tag("webp", 70) == "raster-webp:70"  # type: ignore[arg-type]
    with pytest.raises(InvalidParameterError):
        RenderPathSelector.raster_tag(RasterFormat.JPEG, 0)


def test_engine_errors_propagate(selector: RenderPathSelector, encoder: Mock) -> None:
    encoder.side_effect = InvalidColorError("bogus")
    with pytest.raises(InvalidColorError):
        selector.render_vector(RenderRequest("x", foreground_color="bogus").snapshot())


def test_default_selector_renders_real_svg() -> None:
    result = RenderPathSelector().render_vector(RenderRequest("hello").snapshot())
    assert isinstance(result.payload, str)
    assert result.payload.startswith("<svg")
    assert (result.width, result.height) == (240, 240)
