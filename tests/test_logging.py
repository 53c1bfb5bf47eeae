"""
Tests for logging setup and the error hierarchy.

Run with: pytest tests/test_logging.py -v
"""

import json
import logging

import pytest

from ledclock.core.errors import (
    ErrorSeverity,
    HardwareError,
    InvalidDimensionError,
    LEDClockError,
)
from ledclock.core.logging import JSONFormatter, SimpleFormatter, log_error, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg="hello %s", args=("world",), **extra):
    record = logging.LogRecord("ledclock.apps.runner", logging.WARNING, __file__, 10, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_formatter(self):
        data = json.loads(JSONFormatter().format(make_record(app="letter")))
        assert data["level"] == "WARNING"
        assert data["logger"] == "ledclock.apps.runner"
        assert data["message"] == "hello world"
        assert data["app"] == "letter"
        assert data["location"]["line"] == 10
        assert data["timestamp"].endswith("+00:00")

    def test_simple_formatter_without_colors(self):
        line = SimpleFormatter(use_colors=False).format(make_record())
        assert "WARNING" in line
        assert "[runner] hello world" in line
        assert "\033[" not in line


class TestSetupLogging:
    def test_file_handler_writes_json(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "ledclock.log"
        setup_logging(level="DEBUG", log_file=log_file)

        logging.getLogger("ledclock.test").debug("to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "to file"
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("PIL").level == logging.INFO


class TestLogError:
    def test_logs_at_error_severity(self, caplog):
        logger = logging.getLogger("ledclock.test")
        with caplog.at_level(logging.DEBUG, logger="ledclock.test"):
            log_error(logger, HardwareError("No panel"), "Startup")
            log_error(logger, InvalidDimensionError(0, 1))

        critical, warning = caplog.records
        assert critical.levelno == logging.CRITICAL
        assert critical.getMessage() == "Startup: No panel"
        assert critical.error["error_type"] == "HardwareError"
        assert warning.levelno == logging.WARNING
        assert warning.getMessage().startswith("Rectangle dimensions must be positive")

    def test_error_nested_in_json(self, caplog):
        logger = logging.getLogger("ledclock.test")
        with caplog.at_level(logging.INFO, logger="ledclock.test"):
            log_error(logger, LEDClockError("Oops", details={"n": 1}))

        data = json.loads(JSONFormatter().format(caplog.records[0]))
        assert data["error"]["details"] == {"n": 1}
        assert data["error"]["severity"] == "error"


class TestErrors:
    def test_str_includes_details(self):
        error = LEDClockError("Failed", details={"path": "/tmp/x"})
        assert str(error) == "Failed (path=/tmp/x)"

    def test_to_dict(self):
        error = HardwareError("No panel")
        assert error.to_dict() == {
            "error_type": "HardwareError",
            "message": "No panel",
            "severity": "critical",
            "details": {},
        }

    def test_invalid_dimension(self):
        error = InvalidDimensionError(0, 32)
        assert (error.width, error.height) == (0, 32)
        assert error.severity == ErrorSeverity.WARNING
        assert str(error) == "Rectangle dimensions must be positive (width=0, height=32)"
