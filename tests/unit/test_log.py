"""Unit tests for the logging helpers."""

import logging
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from feishu_mcp.log import TRACE, LoggerLevel, LoggerProxy, select_logging_sink


def test_trace_level_is_registered() -> None:
    """TRACE should be a named stdlib level below DEBUG."""
    assert TRACE < logging.DEBUG
    assert logging.getLevelName(TRACE) == "TRACE"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("info", LoggerLevel.INFO),
        ("WARNING", LoggerLevel.WARN),
        ("warn", LoggerLevel.WARN),
        ("critical", LoggerLevel.FATAL),
        ("verbose", LoggerLevel.TRACE),
        (" debug ", LoggerLevel.DEBUG),
    ],
)
def test_level_from_name(name: str, expected: LoggerLevel) -> None:
    """Level names and common aliases should map to ordinal levels."""
    assert LoggerLevel.from_name(name) is expected


def test_level_from_unknown_name_raises() -> None:
    """Unknown names should raise a ValueError."""
    with pytest.raises(ValueError, match="Unknown log level"):
        LoggerLevel.from_name("chatty")


def test_proxy_filters_by_level() -> None:
    """Calls above the configured level should be dropped."""
    target = MagicMock(spec=["error", "warning", "info", "debug", "log"])
    proxy = LoggerProxy(target, LoggerLevel.WARN)

    proxy.error("e")
    proxy.warning("w")
    proxy.info("i")
    proxy.debug("d")

    target.error.assert_called_once_with("e")
    target.warning.assert_called_once_with("w")
    target.info.assert_not_called()
    target.debug.assert_not_called()


def test_proxy_trace_falls_back_to_log() -> None:
    """Loggers without a trace method should receive log(TRACE, ...)."""
    target = MagicMock(spec=logging.Logger)
    proxy = LoggerProxy(target, LoggerLevel.TRACE)

    proxy.trace("Sending %s", "GET")

    target.log.assert_called_once_with(TRACE, "Sending %s", "GET")


def test_proxy_log_routes_stdlib_levels() -> None:
    """log(level, ...) should dispatch to the matching proxy method."""
    target = MagicMock(spec=["error", "warning", "info", "debug", "log"])
    proxy = LoggerProxy(target, LoggerLevel.INFO)

    proxy.log(logging.INFO, "hello")
    proxy.log(logging.ERROR, "boom")
    proxy.log(TRACE, "hidden")

    target.info.assert_called_once_with("hello")
    target.error.assert_called_once_with("boom")
    target.log.assert_not_called()


def test_proxy_with_stdlib_logger_writes_records(caplog: pytest.LogCaptureFixture) -> None:
    """A wrapped logging.Logger should emit real records."""
    proxy = LoggerProxy(logging.getLogger("feishu_mcp.test"), LoggerLevel.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="feishu_mcp.test"):
        proxy.debug("value=%s", 3)
    assert "value=3" in caplog.text


@pytest.mark.asyncio
async def test_proxy_schedules_async_sinks() -> None:
    """Coroutine-returning loggers should be awaited on the running loop."""
    ctx = MagicMock()
    ctx.info = AsyncMock()
    proxy = LoggerProxy(ctx, LoggerLevel.INFO)

    proxy.info("via context")
    for task in list(proxy._pending):  # type: ignore[reportPrivateUsage]
        await task

    ctx.info.assert_awaited_once_with("via context")


def test_select_logging_sink_by_transport() -> None:
    """stdio logs to stderr; network transports log to stdout."""
    assert select_logging_sink("stdio").stream is sys.stderr
    assert select_logging_sink("sse").stream is sys.stdout
    assert select_logging_sink("sse").name == "stdout"


def test_logging_sink_configure_installs_handler() -> None:
    """configure should call basicConfig with the sink stream and force."""
    sink = select_logging_sink("stdio")
    with patch("feishu_mcp.log.logging.basicConfig") as basic_config:
        sink.configure(logging.DEBUG)
    kwargs = basic_config.call_args.kwargs
    assert kwargs["stream"] is sys.stderr
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["force"] is True
