"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, and file logging options.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from abg_site.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler():
    return next(
        (h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler),
        None,
    )


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("debug", logging.DEBUG),  # Test lowercase
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        """Test setup_logging configures correct log level."""
        setup_logging(log_level=log_level, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.level == expected_level

    def test_root_logger_captures_everything(self):
        setup_logging(log_level="ERROR", enable_file=False)
        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different log formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        """Test setup_logging configures correct format."""
        setup_logging(log_format=log_format, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.formatter._fmt == expected_format
        assert console_handler.formatter.datefmt == "%Y-%m-%d %H:%M:%S"


class TestSetupLoggingFileHandling:
    """Test setup_logging file logging functionality."""

    def test_no_file_handler_when_disabled(self):
        setup_logging(enable_file=False)
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_file_handler_writes_to_log_dir(self, tmp_path: Path):
        with (
            patch("abg_site.core.logging_config.ENABLE_FILE_LOGGING", True),
            patch("abg_site.core.logging_config.LOG_FILE_DIR", str(tmp_path)),
        ):
            setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        try:
            assert len(file_handlers) == 1
            assert Path(file_handlers[0].baseFilename) == tmp_path / "abg_site.log"
        finally:
            # Leave the root logger without a handle on tmp_path
            setup_logging(enable_file=False)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(logging.getLogger().handlers) == 1


class TestModuleLogLevels:
    def test_module_levels_applied(self):
        setup_logging(enable_file=False)
        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == logging.getLevelName(level)

    def test_third_party_noise_reduced(self):
        assert MODULE_LOG_LEVELS["sqlalchemy.engine"] == "WARNING"
        assert MODULE_LOG_LEVELS["httpx"] == "WARNING"


class TestGetLogger:
    def test_returns_named_logger(self):
        logger = get_logger("abg_site.server.services.attendance")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "abg_site.server.services.attendance"

    def test_same_name_same_instance(self):
        assert get_logger("abg_site.test") is get_logger("abg_site.test")
