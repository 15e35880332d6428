"""Tests for mythforge/utils/logging_config.py."""

import logging

import pytest

from mythforge.utils import logging_config
from mythforge.utils.logging_config import ContextFilter, _context_filter, log_context, setup_logging


@pytest.fixture
def preserve_root_logger():
    """Restore the root logger's handlers and level after a test."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in original_handlers:
            handler.close()
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="Test message",
        args=(),
        exc_info=None,
    )


class TestContextFilter:
    """Tests for ContextFilter class."""

    def test_filter_with_correlation_id(self):
        """Test filter adds correlation ID when set."""
        filter_instance = ContextFilter()
        filter_instance.correlation_id = "attempt-1"
        record = _record()

        assert filter_instance.filter(record) is True
        assert record.correlation_id == "attempt-1"  # type: ignore[attr-defined]

    def test_filter_without_correlation_id(self):
        """Test filter uses dash when no correlation ID set."""
        record = _record()

        assert ContextFilter().filter(record) is True
        assert record.correlation_id == "-"  # type: ignore[attr-defined]


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_console_only(self, preserve_root_logger):
        """Test setup_logging without a file installs one filtered console handler."""
        setup_logging(level="DEBUG", log_file=None)

        assert preserve_root_logger.level == logging.DEBUG
        assert len(preserve_root_logger.handlers) == 1
        handler = preserve_root_logger.handlers[0]
        assert any(isinstance(f, ContextFilter) for f in handler.filters)

    def test_with_file(self, tmp_path, preserve_root_logger):
        """Test setup_logging writes to the given log file."""
        log_file = tmp_path / "nested" / "run.log"
        setup_logging(level="INFO", log_file=str(log_file))
        logging.getLogger("mythforge.test").info("hello from the tide")

        for handler in preserve_root_logger.handlers:
            handler.flush()
        assert log_file.exists()
        assert "hello from the tide" in log_file.read_text(encoding="utf-8")

    def test_default_file(self, tmp_path, monkeypatch, preserve_root_logger):
        """Test setup_logging uses the default log file when log_file='default'."""
        default_log = tmp_path / "default.log"
        monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", default_log)

        setup_logging(level="INFO", log_file="default")

        assert default_log.exists()

    def test_removes_existing_handlers(self, preserve_root_logger):
        """Test setup_logging replaces handlers instead of stacking them."""
        dummy_handler = logging.StreamHandler()
        preserve_root_logger.addHandler(dummy_handler)

        setup_logging(level="INFO", log_file=None)

        assert dummy_handler not in preserve_root_logger.handlers

    def test_quiets_third_party_loggers(self, preserve_root_logger):
        """Test pydantic logging is raised to WARNING."""
        setup_logging(level="DEBUG", log_file=None)
        assert logging.getLogger("pydantic").level == logging.WARNING

    def test_invalid_level_raises_value_error(self):
        """setup_logging should raise ValueError for invalid level names."""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(level="LOUD", log_file=None)


class TestLogContext:
    """Tests for log_context context manager."""

    def test_with_provided_id(self):
        """Test log_context with provided correlation ID."""
        original_id = _context_filter.correlation_id

        with log_context("attempt-2") as ctx_id:
            assert ctx_id == "attempt-2"
            assert _context_filter.correlation_id == "attempt-2"

        assert _context_filter.correlation_id == original_id

    def test_generates_id(self):
        """Test log_context generates a short UUID when not provided."""
        with log_context() as ctx_id:
            assert len(ctx_id) == 8
            assert _context_filter.correlation_id == ctx_id

    def test_restores_on_exception(self):
        """Test log_context restores the previous ID on exception."""
        original_id = _context_filter.correlation_id

        with pytest.raises(ValueError):
            with log_context("failing"):
                raise ValueError("Test error")

        assert _context_filter.correlation_id == original_id
