"""Тесты конфигурации по умолчанию и загрузки JSON."""

import json
import logging
from pathlib import Path

import pytest

from qrbit.config import (
    DEFAULT_CONFIG,
    DEFAULT_MARGIN,
    DEFAULT_SIZE,
    RenderDefaults,
    load_config,
)
from qrbit.enums import ErrorCorrectionLevel
from qrbit.exceptions import ConfigurationError


def test_documented_defaults() -> None:
    defaults = RenderDefaults()
    assert defaults.size == DEFAULT_SIZE == 200
    assert defaults.margin == DEFAULT_MARGIN == 20
    assert defaults.logo_size_ratio == 0.2
    assert defaults.background_color == "#FFFFFF"
    assert defaults.foreground_color == "#000000"
    assert defaults.quality == 90


def test_missing_file_returns_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="qrbit"):
        config = load_config(tmp_path / "absent.json")
    assert config == DEFAULT_CONFIG
    assert "not found" in caplog.text


def test_env_var_selects_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"size": 320}), encoding="utf-8")
    monkeypatch.setenv("QRBIT_CONFIG", str(path))
    assert load_config()["size"] == 320


def test_user_values_merge_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "qrbit.json"
    path.write_text(json.dumps({"margin": None, "error_correction": "H"}), encoding="utf-8")
    config = load_config(path)
    assert config["margin"] is None
    assert config["error_correction"] == "H"
    assert config["size"] == DEFAULT_SIZE


@pytest.mark.parametrize("content", ["{broken json", "[1, 2, 3]"])
def test_bad_file_falls_back_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, content: str
) -> None:
    path = tmp_path / "qrbit.json"
    path.write_text(content, encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="qrbit"):
        config = load_config(path)
    assert config == DEFAULT_CONFIG
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_from_config_parses_level() -> None:
    defaults = RenderDefaults.from_config({"error_correction": "q", "unknown": 1})
    assert defaults.error_correction is ErrorCorrectionLevel.QUARTILE


@pytest.mark.parametrize(
    "override",
    [
        {"size": 0},
        {"margin": -1},
        {"logo_size_ratio": 1.5},
        {"quality": 101},
        {"cache_max_entries": 0},
        {"error_correction": "extreme"},
    ],
)
def test_from_config_rejects_bad_values(override: dict) -> None:
    with pytest.raises(ConfigurationError):
        RenderDefaults.from_config(override)


def test_defaults_are_frozen() -> None:
    defaults = RenderDefaults()
    with pytest.raises(AttributeError):
        defaults.size = 10  # type: ignore[misc]
