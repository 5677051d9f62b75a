"""Tests for standard logging integration and debug output."""

import logging
from io import StringIO

import pytest
from rich.console import Console


@pytest.fixture(autouse=True)
def reset_shapeguard_logger():
    """Keep handlers and levels from leaking between tests."""
    logger = logging.getLogger("shapeguard")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestLoggingConfiguration:
    """Tests for logging configuration."""

    def test_get_logger_returns_logger(self):
        """get_logger returns a Python logger."""
        from shapeguard.utils.logging_config import get_logger

        logger = get_logger("test")
        assert isinstance(logger, logging.Logger)

    def test_logger_name_prefix(self):
        """Logger names are prefixed with 'shapeguard'."""
        from shapeguard.utils.logging_config import get_logger

        assert get_logger("validator").name == "shapeguard.validator"

    def test_get_root_logger(self):
        """Empty name returns root shapeguard logger."""
        from shapeguard.utils.logging_config import get_logger

        assert get_logger().name == "shapeguard"

    def test_configure_logging_sets_level(self):
        """configure_logging sets the log level."""
        from shapeguard.utils.logging_config import configure_logging, get_logger

        configure_logging(level=logging.DEBUG)
        assert get_logger().isEnabledFor(logging.DEBUG)

    def test_configure_logging_string_level(self):
        """configure_logging accepts level names."""
        from shapeguard.utils.logging_config import configure_logging, get_logger

        configure_logging(level="error")
        assert get_logger().level == logging.ERROR

    def test_configure_logging_unknown_level(self):
        from shapeguard.utils.logging_config import configure_logging

        with pytest.raises(ValueError):
            configure_logging(level="loud")

    def test_dotted_module_name(self):
        """Full module names under shapeguard are not prefixed twice."""
        from shapeguard.utils.logging_config import get_logger

        assert get_logger("shapeguard.batch").name == "shapeguard.batch"

    def test_default_handler_added_once(self):
        """Repeated configuration reuses the default stream handler."""
        from shapeguard.utils.logging_config import configure_logging

        logger = configure_logging(level="INFO")
        count = len(logger.handlers)
        configure_logging(level="DEBUG", format="%(message)s")

        assert len(logger.handlers) == count
        assert logger.level == logging.DEBUG

    def test_configure_logging_custom_handler(self):
        """Custom handlers receive shapeguard records."""
        from shapeguard.utils.logging_config import configure_logging, get_logger

        stream = StringIO()
        handler = logging.StreamHandler(stream)
        configure_logging(level=logging.INFO, handler=handler)

        get_logger("test").info("hello")
        assert "hello" in stream.getvalue()

    def test_validator_logs_failures_at_debug(self):
        """Failed validations are logged at DEBUG with their codes."""
        from shapeguard.schema import define
        from shapeguard.utils.logging_config import configure_logging
        from shapeguard.validator import validate

        stream = StringIO()
        configure_logging(level=logging.DEBUG, handler=logging.StreamHandler(stream))

        validate(define([("name", "string")]), {})
        assert "Validation failed with 1 error(s): required" in stream.getvalue()


class TestDebugRendering:
    """Tests for rich debug output."""

    def _capture(self):
        return Console(file=StringIO(), width=120, force_terminal=False, color_system=None)

    def test_log_errors_renders_table(self):
        from shapeguard.errors import ValidationError
        from shapeguard.utils.logger import log_errors

        console = self._capture()
        errors = [
            ValidationError(("user", "age"), "gt", "must be greater than 0"),
            ValidationError((), "strict", "unexpected fields: ['x']"),
        ]
        log_errors(errors, title="User", target=console)
        output = console.file.getvalue()

        assert "User - Validation failed: 2 error(s)" in output
        assert "user.age" in output
        assert "(root)" in output
        assert "must be greater than 0" in output

    def test_log_success(self):
        from shapeguard.utils.logger import log_success

        console = self._capture()
        log_success("Validated 2 field(s)", target=console)

        assert "[OK] Validated 2 field(s)" in console.file.getvalue()
