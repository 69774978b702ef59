"""Tests for logging configuration module."""

import json
import logging
from io import StringIO

import pytest

from src.logging_config import (
    REQUEST_ID_CTX,
    CustomJsonFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def json_logger():
    """Provide a logger writing JSON records to an in-memory stream."""
    logger = logging.getLogger("test_json_logger")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(message)s"))
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    logger.propagate = True


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize(
        "level, expected",
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("WARNING", logging.WARNING)],
    )
    def test_configure_logging_sets_log_level(self, level: str, expected: int) -> None:
        """Log level should be set on root logger."""
        configure_logging(level)
        assert logging.getLogger().level == expected

    def test_unknown_level_falls_back_to_info(self) -> None:
        """Unknown level names should fall back to INFO."""
        configure_logging("LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_replaces_handlers(self) -> None:
        """Repeated configuration should leave exactly one handler."""
        logging.getLogger().addHandler(logging.StreamHandler())
        configure_logging("INFO")
        configure_logging("INFO")
        assert len(logging.getLogger().handlers) == 1

    def test_configure_logging_json_output_true(self) -> None:
        """JSON output should use CustomJsonFormatter."""
        configure_logging("INFO", json_output=True)
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, CustomJsonFormatter)

    def test_configure_logging_json_output_false(self) -> None:
        """Non-JSON output should use a plain Formatter."""
        configure_logging("INFO", json_output=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, CustomJsonFormatter)

    def test_noisy_loggers_quietened(self) -> None:
        """Access logs should be raised to WARNING."""
        configure_logging("DEBUG")
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestCustomJsonFormatter:
    """Tests for CustomJsonFormatter class."""

    def test_json_formatter_standard_fields(self, json_logger) -> None:
        """JSON output should carry message, level, logger and timestamp."""
        logger, stream = json_logger
        logger.info("Heatmap computed")

        data = json.loads(stream.getvalue())
        assert data["message"] == "Heatmap computed"
        assert data["level"] == "INFO"
        assert data["logger"] == "test_json_logger"
        assert "timestamp" in data
        assert "location" not in data

    def test_json_formatter_includes_extra(self, json_logger) -> None:
        """Extra fields should appear in the JSON record."""
        logger, stream = json_logger
        logger.info("Heatmap computed", extra={"angle": "40", "markers": 12})

        data = json.loads(stream.getvalue())
        assert data["angle"] == "40"
        assert data["markers"] == 12

    def test_json_formatter_includes_location_for_warnings(self, json_logger) -> None:
        """JSON output should include location for WARNING and above."""
        logger, stream = json_logger
        logger.warning("Skipping malformed hold layout entry")

        data = json.loads(stream.getvalue())
        assert "location" in data
        assert "function" in data

    def test_json_formatter_includes_request_id(self, json_logger) -> None:
        """Records logged during a request should carry its id."""
        logger, stream = json_logger
        token = REQUEST_ID_CTX.set("req-42")
        try:
            logger.info("Heatmap computed")
        finally:
            REQUEST_ID_CTX.reset(token)

        data = json.loads(stream.getvalue())
        assert data["request_id"] == "req-42"

    def test_json_formatter_omits_request_id_outside_request(self, json_logger) -> None:
        """Records logged outside a request should have no request id."""
        logger, stream = json_logger
        logger.info("Board data loaded")

        data = json.loads(stream.getvalue())
        assert "request_id" not in data


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self) -> None:
        """Logger should have the specified name."""
        logger = get_logger("src.heatmap.pipeline")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "src.heatmap.pipeline"

    def test_get_logger_same_name_returns_same_logger(self) -> None:
        """Same name should return the same logger instance."""
        assert get_logger("same_name") is get_logger("same_name")
