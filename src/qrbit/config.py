# -*- coding: utf-8 -*-
"""
RU: Конфигурация параметров рендеринга по умолчанию и загрузка config JSON.
EN: Rendering defaults and JSON configuration loading.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Final, Optional

from .enums import ErrorCorrectionLevel
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SIZE",
    "DEFAULT_MARGIN",
    "DEFAULT_LOGO_SIZE_RATIO",
    "DEFAULT_BACKGROUND_COLOR",
    "DEFAULT_FOREGROUND_COLOR",
    "DEFAULT_QUALITY",
    "DEFAULT_CACHE_MAX_ENTRIES",
    "DEFAULT_CONFIG",
    "RenderDefaults",
    "load_config",
]

DEFAULT_SIZE: Final[int] = 200
DEFAULT_MARGIN: Final[int] = 20
DEFAULT_LOGO_SIZE_RATIO: Final[float] = 0.2
DEFAULT_BACKGROUND_COLOR: Final[str] = "#FFFFFF"
DEFAULT_FOREGROUND_COLOR: Final[str] = "#000000"
DEFAULT_QUALITY: Final[int] = 90
DEFAULT_CACHE_MAX_ENTRIES: Final[int] = 1024

CONFIG_ENV_VAR: Final[str] = "QRBIT_CONFIG"
DEFAULT_CONFIG_FILENAME: Final[str] = "qrbit.json"

# Значения конфигурации по умолчанию
DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "size": DEFAULT_SIZE,
    "margin": DEFAULT_MARGIN,
    "logo_size_ratio": DEFAULT_LOGO_SIZE_RATIO,
    "background_color": DEFAULT_BACKGROUND_COLOR,
    "foreground_color": DEFAULT_FOREGROUND_COLOR,
    "error_correction": ErrorCorrectionLevel.MEDIUM.value,
    "quality": DEFAULT_QUALITY,
    "cache_max_entries": DEFAULT_CACHE_MAX_ENTRIES,
}


@dataclass(frozen=True)
class RenderDefaults:
    """
    Validated rendering defaults.

    Attributes:
        size: Symbol edge length in pixels.
        margin: Quiet zone in pixels, or None to let the encoder choose.
        logo_size_ratio: Fraction of the symbol a logo may cover.
        background_color: Light module color.
        foreground_color: Dark module color.
        error_correction: QR error-correction level.
        quality: Default JPEG/WebP quality.
        cache_max_entries: Capacity of the default in-process cache.

    Examples:
        >>> defaults = RenderDefaults.from_config(load_config())
        >>> defaults.size
        200
    """

    size: int = DEFAULT_SIZE
    margin: Optional[int] = DEFAULT_MARGIN
    logo_size_ratio: float = DEFAULT_LOGO_SIZE_RATIO
    background_color: str = DEFAULT_BACKGROUND_COLOR
    foreground_color: str = DEFAULT_FOREGROUND_COLOR
    error_correction: ErrorCorrectionLevel = ErrorCorrectionLevel.MEDIUM
    quality: int = DEFAULT_QUALITY
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not isinstance(self.size, int) or self.size <= 0:
            raise ConfigurationError("size must be a positive integer")
        if self.margin is not None and (
            not isinstance(self.margin, int) or self.margin < 0
        ):
            raise ConfigurationError("margin must be a non-negative integer or null")
        if not 0.0 < float(self.logo_size_ratio) < 1.0:
            raise ConfigurationError("logo_size_ratio must be between 0 and 1")
        if not 1 <= self.quality <= 100:
            raise ConfigurationError("quality must be between 1 and 100")
        if self.cache_max_entries < 1:
            raise ConfigurationError("cache_max_entries must be >= 1")

    @staticmethod
    def from_config(config: Dict[str, Any]) -> "RenderDefaults":
        """
        Build defaults from a configuration mapping.

        Unknown keys are ignored; missing keys fall back to DEFAULT_CONFIG.

        Raises:
            ConfigurationError: if a value is out of range or of the wrong type.
        """
        merged = {**DEFAULT_CONFIG, **config}
        try:
            level = ErrorCorrectionLevel.parse(merged["error_correction"])
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return RenderDefaults(
            size=merged["size"],
            margin=merged["margin"],
            logo_size_ratio=merged["logo_size_ratio"],
            background_color=str(merged["background_color"]),
            foreground_color=str(merged["foreground_color"]),
            error_correction=level,
            quality=merged["quality"],
            cache_max_entries=merged["cache_max_entries"],
        )


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить конфигурацию из JSON-файла или использовать значения по умолчанию.

    Путь определяется так: явный аргумент, затем переменная окружения
    QRBIT_CONFIG, затем ./qrbit.json. Если файл отсутствует или содержит
    недопустимый JSON, возвращается конфигурация по умолчанию с записью
    предупреждения в лог.

    Аргументы:
        config_path: Опциональный путь к файлу конфигурации.

    Возвращает:
        Словарь со всеми ключами DEFAULT_CONFIG; пользовательские значения
        переопределяют значения по умолчанию.

    Пример:
        >>> config = load_config()
        >>> config["size"]
        200
    """
    if config_path is None:
        config_path = Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILENAME))

    config = dict(DEFAULT_CONFIG)

    if not config_path.exists():
        logger.info(
            "Config file %s not found, using defaults", config_path
        )
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            raise ValueError(
                f"config must be a JSON object, got {type(user_config).__name__}"
            )

        config.update(user_config)
        logger.info("Config loaded from %s", config_path)
        logger.debug("Config: %s", config)

    except json.JSONDecodeError as e:
        logger.warning(
            "Failed to parse %s: invalid JSON at line %d, column %d. Using defaults.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning("Failed to read %s: %s. Using defaults.", config_path, e)
    except ValueError as e:
        logger.warning("Invalid config format: %s. Using defaults.", e)

    return config
