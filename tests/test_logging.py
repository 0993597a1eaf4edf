"""Tests for logging configuration."""

import logging

import pytest

from svcinstall.logging import ComponentFormatter, configure_logging, resolve_log_level


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLogLevel:
    """Tests for resolve_log_level."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("SVCINSTALL_LOG_LEVEL", raising=False)
        assert resolve_log_level() == "WARNING"

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("SVCINSTALL_LOG_LEVEL", "debug")
        assert resolve_log_level() == "DEBUG"

    def test_argument_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("SVCINSTALL_LOG_LEVEL", "DEBUG")
        assert resolve_log_level("error") == "ERROR"

    def test_invalid_falls_back(self):
        assert resolve_log_level("LOUD") == "WARNING"


class TestComponentFormatter:
    """Tests for ComponentFormatter."""

    def _format(self, logger_name: str) -> str:
        formatter = ComponentFormatter("%(component)s | %(message)s")
        record = logging.LogRecord(logger_name, logging.INFO, __file__, 1, "hello", None, None)
        return formatter.format(record)

    def test_package_logger(self):
        assert self._format("svcinstall.service.backends.systemd") == "service | hello"

    def test_foreign_logger(self):
        assert self._format("asyncio") == "asyncio | hello"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_and_single_handler(self, restore_root_logger):
        configure_logging("DEBUG")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0], logging.StreamHandler)

    def test_rich_handler(self, restore_root_logger):
        from rich.logging import RichHandler

        configure_logging("INFO", use_rich=True)

        assert isinstance(restore_root_logger.handlers[0], RichHandler)
        assert isinstance(restore_root_logger.handlers[0].formatter, ComponentFormatter)
        assert restore_root_logger.handlers[0].console.stderr is True
