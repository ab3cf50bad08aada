"""Tests for logging setup."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from game_catalog.config import LoggingConfig
from game_catalog.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.NOTSET)


class TestSetupLogging:
    """Tests for setup_logging() and get_logger()."""

    def test_json_events_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON output carries the bound context and leaves stdout empty."""
        logger = get_logger("catalog.test", component="engine")
        setup_logging(LoggingConfig(level="INFO", format="json", include_timestamp=False))

        logger.info("Applied listing page", page=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event == {
            "component": "engine",
            "event": "Applied listing page",
            "level": "info",
            "page": 2,
        }

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events below the configured level are dropped."""
        setup_logging(LoggingConfig(level="WARNING", format="json"))

        get_logger("catalog.test").info("Fetching listing page")

        assert capsys.readouterr().err == ""

    @pytest.mark.parametrize(
        ("level", "http_level"),
        [("DEBUG", logging.DEBUG), ("INFO", logging.WARNING), ("ERROR", logging.WARNING)],
    )
    def test_http_loggers_quieted(self, level: str, http_level: int) -> None:
        """Test httpx request logs only appear at DEBUG."""
        setup_logging(LoggingConfig(level=level))  # type: ignore[arg-type]

        assert logging.getLogger("httpx").level == http_level
        assert logging.getLogger("httpcore").level == http_level
