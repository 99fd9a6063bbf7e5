"""
Модульные тесты для qrbit/__init__.py
Тестирует метаданные пакета, логирование, проверку зависимостей и публичный API.
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Iterator

import pytest

import qrbit


@pytest.fixture
def fresh_package_logger() -> Iterator[logging.Logger]:
    """Временно убрать обработчики логгера пакета, затем восстановить."""
    package_logger = logging.getLogger("qrbit")
    saved_handlers = package_logger.handlers[:]
    saved_level = package_logger.level
    for handler in saved_handlers:
        package_logger.removeHandler(handler)
    try:
        yield package_logger
    finally:
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            package_logger.addHandler(handler)
        package_logger.setLevel(saved_level)


class TestVersionMetadata:
    """Тестирование метаданных версии и констант."""

    def test_version_format(self) -> None:
        assert re.match(r"^\d+\.\d+\.\d+$", qrbit.__version__)

    def test_version_components(self) -> None:
        expected = f"{qrbit.VERSION_MAJOR}.{qrbit.VERSION_MINOR}.{qrbit.VERSION_PATCH}"
        assert qrbit.__version__ == expected

    def test_metadata_attributes(self) -> None:
        for value in (
            qrbit.__author__,
            qrbit.__description__,
            qrbit.__license__,
            qrbit.__python_requires__,
        ):
            assert isinstance(value, str) and value


class TestPublicAPI:
    """Тестирование экспортов публичного API."""

    def test_all_exports_exist(self) -> None:
        for name in qrbit.__all__:
            assert hasattr(qrbit, name), f"Имя '{name}' из __all__ не существует в модуле"

    def test_no_duplicate_exports(self) -> None:
        assert len(qrbit.__all__) == len(set(qrbit.__all__))

    def test_utilities_exported(self) -> None:
        assert "get_logger" in qrbit.__all__
        assert "load_config" in qrbit.__all__
        assert "check_dependencies" in qrbit.__all__

    def test_core_types_exported(self) -> None:
        for name in ("QrBit", "QrPipeline", "RenderRequest", "MemoryCacheStore"):
            assert name in qrbit.__all__

    def test_engine_errors_share_base(self) -> None:
        assert issubclass(qrbit.InvalidColorError, qrbit.RenderEngineError)
        assert issubclass(qrbit.RenderEngineError, qrbit.QrBitError)


class TestLogging:
    """Тестирование конфигурации логирования."""

    def test_get_logger_name_format(self) -> None:
        assert qrbit.get_logger("test_module").name == "qrbit.test_module"

    def test_get_logger_with_qualified_name(self) -> None:
        assert qrbit.get_logger("qrbit.pipeline").name == "qrbit.pipeline"

    def test_get_logger_with_main(self) -> None:
        assert qrbit.get_logger("__main__").name == "qrbit.main"

    def test_get_logger_strips_leading_dots(self) -> None:
        assert qrbit.get_logger(".engine.raster").name == "qrbit.engine.raster"

    def test_package_logger_has_console_handler(self) -> None:
        package_logger = logging.getLogger("qrbit")
        assert any(
            isinstance(h, logging.StreamHandler) for h in package_logger.handlers
        )

    def test_package_logger_propagates(self) -> None:
        assert logging.getLogger("qrbit").propagate is True

    def test_log_level_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, fresh_package_logger: logging.Logger
    ) -> None:
        monkeypatch.setenv("QRBIT_LOG_LEVEL", "DEBUG")
        monkeypatch.delenv("QRBIT_LOG_FILE", raising=False)
        qrbit._setup_logging()
        assert fresh_package_logger.level == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(
        self, monkeypatch: pytest.MonkeyPatch, fresh_package_logger: logging.Logger
    ) -> None:
        monkeypatch.setenv("QRBIT_LOG_LEVEL", "CHATTY")
        monkeypatch.delenv("QRBIT_LOG_FILE", raising=False)
        qrbit._setup_logging()
        assert fresh_package_logger.level == logging.INFO

    def test_file_handler_from_environment(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        fresh_package_logger: logging.Logger,
    ) -> None:
        log_file = tmp_path / "logs" / "qrbit.log"
        monkeypatch.setenv("QRBIT_LOG_FILE", str(log_file))
        qrbit._setup_logging()
        assert any(
            isinstance(h, logging.handlers.RotatingFileHandler)
            for h in fresh_package_logger.handlers
        )
        assert log_file.parent.is_dir()

    def test_setup_is_idempotent(
        self, monkeypatch: pytest.MonkeyPatch, fresh_package_logger: logging.Logger
    ) -> None:
        monkeypatch.delenv("QRBIT_LOG_FILE", raising=False)
        qrbit._setup_logging()
        qrbit._setup_logging()
        assert len(fresh_package_logger.handlers) == 1


class TestDependencyCheck:
    """Тестирование проверки зависимостей."""

    def test_check_dependencies_keys(self) -> None:
        deps = qrbit.check_dependencies()
        assert set(deps) == {"qrcode", "pillow", "cairosvg", "cachetools"}
        assert all(isinstance(v, bool) for v in deps.values())

    def test_required_libraries_available(self) -> None:
        deps = qrbit.check_dependencies()
        assert deps["qrcode"] and deps["pillow"] and deps["cachetools"]

    def test_check_dependencies_idempotent(self) -> None:
        assert qrbit.check_dependencies() == qrbit.check_dependencies()


class TestDocumentation:
    """Тестирование наличия документации."""

    def test_module_has_docstring(self) -> None:
        assert qrbit.__doc__ is not None
        assert len(qrbit.__doc__) > 100

    def test_get_logger_has_docstring(self) -> None:
        assert qrbit.get_logger.__doc__ is not None
        assert "Аргументы:" in qrbit.get_logger.__doc__
        assert "Пример:" in qrbit.get_logger.__doc__

    def test_load_config_has_docstring(self) -> None:
        assert qrbit.load_config.__doc__ is not None
        assert "Возвращает:" in qrbit.load_config.__doc__
