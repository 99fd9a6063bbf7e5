"""
Пакет qrbit
===========

Асинхронный конвейер рендеринга QR-кодов с кэшированием результатов.

Этот пакет предоставляет:
    - Прямой векторный кодировщик SVG для кодов без логотипа
    - Встраивание логотипа (путь к файлу или байты) через движок рендеринга
    - Растровый вывод PNG/JPEG/WebP, всегда получаемый из SVG
    - Мягкую деградацию при отсутствии файла логотипа (предупреждение, не ошибка)
    - Кэш результатов по детерминированному отпечатку запроса
    - Запись результатов в файлы с созданием вложенных каталогов

Пример базового использования:
    >>> from qrbit import QrBit, get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> qr = QrBit("https://example.com", logo="logo.png", size=300)
    >>> svg = await qr.to_svg()
    >>> jpg = await qr.to_jpg(quality=80)
    >>> await qr.to_webp_file("out/codes/qr.webp")
    >>> logger.info(f"Сгенерировано {len(jpg)} байт JPEG")

Пример работы с конвейером напрямую:
    >>> from qrbit import QrPipeline, RenderRequest
    >>>
    >>> pipeline = QrPipeline(notifier=lambda n: print(n.message))
    >>> outcome = await pipeline.render_png(RenderRequest("hello", logo="gone.png"))
    Logo file not found: gone.png. Proceeding without logo.
    >>> outcome.cache_hit
    False

Управление конфигурацией:
    >>> import os
    >>> os.environ['QRBIT_LOG_LEVEL'] = 'DEBUG'
    >>> os.environ['QRBIT_CONFIG'] = '/etc/qrbit.json'
    >>>
    >>> from qrbit import QrBit, load_config
    >>>
    >>> qr = QrBit.from_config("hello", load_config())

Версия: 0.1.0
Лицензия: MIT
Python: 3.10+
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Dict

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "qrbit Development Team"
__description__ = "Async QR code rendering pipeline with result caching"
__license__ = "MIT"
__python_requires__ = ">=3.10"

# Компоненты семантической версии
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# =============================================================================
# ПРОВЕРКА ВЕРСИИ PYTHON
# =============================================================================

if sys.version_info < (3, 10):
    raise RuntimeError(
        f"qrbit требует Python 3.10 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

LOG_LEVEL_ENV_VAR = "QRBIT_LOG_LEVEL"
LOG_FILE_ENV_VAR = "QRBIT_LOG_FILE"

_LOG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    Настраивает логгер "qrbit" с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком, если задана переменная
      окружения QRBIT_LOG_FILE

    Уровень задаётся переменной окружения QRBIT_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR, CRITICAL), по умолчанию INFO.

    Логгер продолжает передавать записи родительским логгерам, чтобы
    приложение могло подключить свои обработчики.

    Функция идемпотентна - повторные вызовы не имеют эффекта.
    """
    log_level_str = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    package_logger = logging.getLogger("qrbit")
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # Консольный обработчик (stderr) - WARNING и выше
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = os.environ.get(LOG_FILE_ENV_VAR)
    if not log_file:
        return

    try:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=10 * 1024 * 1024,  # 10 МБ
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    except OSError as e:
        package_logger.warning(
            "Failed to initialize file logging at %s: %s. Using console only.",
            log_file,
            e,
        )


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён пакета.

    Логгеры именуются как 'qrbit.<module_name>' и наследуют
    обработчики логгера пакета.

    Аргументы:
        module_name: Имя модуля, обычно `__name__`.

    Пример:
        >>> logger = get_logger(__name__)
        >>> logger.info("Rendering batch of %d codes", 12)
    """
    if module_name == "qrbit" or module_name.startswith("qrbit."):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger("qrbit.main")
    return logging.getLogger(f"qrbit.{module_name.lstrip('.')}")


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить доступность библиотек рендеринга.

    Не выбрасывает исключений; возвращает словарь состояний. Для cairosvg
    отсутствие системной библиотеки Cairo (OSError при импорте) также
    считается недоступностью.

    Пример:
        >>> deps = check_dependencies()
        >>> if not deps["cairosvg"]:
        ...     print("Растровый вывод недоступен")
    """
    dependencies: Dict[str, bool] = {}

    try:
        import qrcode  # noqa: F401

        dependencies["qrcode"] = True
    except ImportError:
        dependencies["qrcode"] = False

    try:
        import PIL  # noqa: F401

        dependencies["pillow"] = True
    except ImportError:
        dependencies["pillow"] = False

    try:
        import cairosvg  # noqa: F401

        dependencies["cairosvg"] = True
    except (ImportError, OSError):
        dependencies["cairosvg"] = False

    try:
        import cachetools  # noqa: F401

        dependencies["cachetools"] = True
    except ImportError:
        dependencies["cachetools"] = False

    return dependencies


_setup_logging()

# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

# Импорты после настройки логирования
from .cache import CacheStore, MemoryCacheStore  # noqa: E402
from .config import RenderDefaults, load_config  # noqa: E402
from .enums import ErrorCorrectionLevel, RasterFormat  # noqa: E402
from .exceptions import (  # noqa: E402
    ConfigurationError,
    InvalidColorError,
    InvalidParameterError,
    LogoDecodeError,
    MalformedVectorError,
    PayloadTooLargeError,
    QrBitError,
    RasterBackendError,
    RenderEngineError,
)
from .models import Notice, RenderBundle, RenderOutcome, RenderResult  # noqa: E402
from .pipeline import QrPipeline  # noqa: E402
from .qrbit import QrBit, generate_png, generate_qr, generate_svg  # noqa: E402
from .request import RenderRequest  # noqa: E402

__all__ = [
    # Метаданные
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    # Утилиты
    "get_logger",
    "load_config",
    "check_dependencies",
    # Фасад
    "QrBit",
    "generate_qr",
    "generate_svg",
    "generate_png",
    # Конвейер
    "QrPipeline",
    "RenderRequest",
    "RenderDefaults",
    "CacheStore",
    "MemoryCacheStore",
    # Модели
    "ErrorCorrectionLevel",
    "RasterFormat",
    "Notice",
    "RenderResult",
    "RenderOutcome",
    "RenderBundle",
    # Исключения
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
