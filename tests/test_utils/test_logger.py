from __future__ import annotations

import io
import os
import logging
from typing import Generator
from unittest.mock import patch

import pytest

import depbump.utils.logger as logger_module
from depbump.utils.logger import (
    ColoredFormatter,
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the depbump logger and the configured flag around a test."""
    root_logger = logging.getLogger("depbump")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    logger_module._logging_configured = False

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    logger_module._logging_configured = False


def _record(level: int = logging.INFO, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord(
        name="depbump.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_defaults(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        assert formatter.use_color is True
        assert formatter._fmt == "%(levelname)s: %(message)s"

    def test_format_without_color(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record(logging.WARNING, "careful")) == "WARNING: careful"

    def test_format_with_color(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            result = formatter.format(_record(logging.ERROR, "boom"))

        assert result.startswith(ColoredFormatter.COLORS["ERROR"])
        assert ColoredFormatter.RESET in result
        assert result.endswith("boom")

    def test_levelname_restored_after_format(self) -> None:
        """Test a shared record is left untouched for other handlers."""
        formatter = ColoredFormatter("%(levelname)s", use_color=True)
        record = _record(logging.INFO)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            formatter.format(record)

        assert record.levelname == "INFO"

    def test_no_color_env_disables_color(self) -> None:
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            assert ColoredFormatter._should_use_color() is False

    def test_ci_env_disables_color(self) -> None:
        with patch.dict(os.environ, {"CI": "true"}, clear=True):
            assert ColoredFormatter._should_use_color() is False

    def test_non_tty_disables_color(self) -> None:
        with patch.dict(os.environ, {}, clear=True), patch(
            "depbump.utils.logger.sys.stderr"
        ) as mock_stderr:
            mock_stderr.isatty.return_value = False
            assert ColoredFormatter._should_use_color() is False

    def test_tty_enables_color(self) -> None:
        with patch.dict(os.environ, {}, clear=True), patch(
            "depbump.utils.logger.sys.stderr"
        ) as mock_stderr:
            mock_stderr.isatty.return_value = True
            assert ColoredFormatter._should_use_color() is True


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_installs_single_handler(self, clean_logger_state: None) -> None:
        stream = io.StringIO()

        setup_logging(level=logging.DEBUG, stream=stream)
        setup_logging(level=logging.DEBUG, stream=stream)

        root_logger = logging.getLogger("depbump")
        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.DEBUG
        assert root_logger.propagate is False
        assert is_logging_configured() is True

    def test_messages_reach_stream(self, clean_logger_state: None) -> None:
        stream = io.StringIO()

        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            setup_logging(level=logging.INFO, stream=stream)
            get_logger("resolver").info("dependencies: 3 checked")

        assert "dependencies: 3 checked" in stream.getvalue()
        assert "INFO" in stream.getvalue()

    def test_level_filters_messages(self, clean_logger_state: None) -> None:
        stream = io.StringIO()

        setup_logging(level=logging.WARNING, stream=stream)
        get_logger("cache").info("hidden")
        get_logger("cache").warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_verbose_format_includes_logger_name(
        self, clean_logger_state: None
    ) -> None:
        stream = io.StringIO()

        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            setup_logging(level=logging.DEBUG, verbose=True, stream=stream)
            get_logger("registry").debug("fetching")

        assert "depbump.registry" in stream.getvalue()


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger naming."""

    def test_root_logger(self) -> None:
        assert get_logger().name == "depbump"
        assert get_logger("depbump").name == "depbump"

    def test_relative_name_is_prefixed(self) -> None:
        assert get_logger("resolver").name == "depbump.resolver"

    def test_prefixed_name_kept(self) -> None:
        assert get_logger("depbump.cache").name == "depbump.cache"

    def test_unconfigured_logger_is_silent(self, clean_logger_state: None) -> None:
        logger = get_logger("silent-test")

        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


@pytest.mark.unit
class TestDisableLogging:
    """Tests for disable_logging."""

    def test_disable_after_setup(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(stream=stream)

        disable_logging()
        get_logger("resolver").warning("nobody hears this")

        assert is_logging_configured() is False
        assert stream.getvalue() == ""
        root_logger = logging.getLogger("depbump")
        assert all(isinstance(h, logging.NullHandler) for h in root_logger.handlers)
