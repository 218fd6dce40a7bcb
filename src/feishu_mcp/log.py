"""Logging helpers for the FeiShu MCP server.

Provides:
- ``TRACE``: a log level below ``DEBUG`` registered with ``logging``
- ``LoggerLevel``: ordinal levels (``fatal < error < warn < info < debug < trace``)
- ``LoggerProxy``: level-filtering decorator around any logger-like object
- ``LoggingSink``: output strategy chosen once per server transport mode
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol, TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


class Logger(Protocol):
    """Subset of the ``logging.Logger`` interface the client core calls."""

    def debug(self, msg: object, *args: object, **kwargs: Any) -> object: ...
    def info(self, msg: object, *args: object, **kwargs: Any) -> object: ...
    def warning(self, msg: object, *args: object, **kwargs: Any) -> object: ...
    def error(self, msg: object, *args: object, **kwargs: Any) -> object: ...
    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> object: ...


class LoggerLevel(IntEnum):
    """Ordinal log levels; a proxy emits a call when its level is >= the call's."""

    FATAL = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    @classmethod
    def from_name(cls, name: str) -> LoggerLevel:
        """Map a level name (``"info"``, ``"WARNING"``, ...) to a ``LoggerLevel``."""
        normalized = name.strip().upper()
        aliases = {"WARNING": "WARN", "CRITICAL": "FATAL", "VERBOSE": "TRACE"}
        normalized = aliases.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            msg = f"Unknown log level: {name!r}"
            raise ValueError(msg) from exc

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS: dict[LoggerLevel, int] = {
    LoggerLevel.FATAL: logging.CRITICAL,
    LoggerLevel.ERROR: logging.ERROR,
    LoggerLevel.WARN: logging.WARNING,
    LoggerLevel.INFO: logging.INFO,
    LoggerLevel.DEBUG: logging.DEBUG,
    LoggerLevel.TRACE: TRACE,
}


class LoggerProxy:
    """Forward log calls to ``logger`` only when allowed by ``level``.

    The wrapped logger may be a ``logging.Logger`` or any object exposing
    ``error``/``warning``/``info``/``debug`` methods, either synchronous or
    coroutine functions (e.g. a FastMCP ``Context``). Coroutines are scheduled on
    the running loop so that callers never need to await a log call.
    """

    def __init__(self, logger: Any, level: LoggerLevel = LoggerLevel.INFO) -> None:
        self.logger = logger
        self.level = level
        self._pending: set[asyncio.Task[Any]] = set()

    def _enabled(self, level: LoggerLevel) -> bool:
        return self.level >= level

    def _dispatch(self, result: object) -> None:
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_await(result))
            return
        task = loop.create_task(_await(result))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _emit(self, level: LoggerLevel, method: str, msg: object, *args: object, **kwargs: Any) -> None:
        if not self._enabled(level):
            return
        target: Callable[..., object] | None = getattr(self.logger, method, None)
        if target is None:
            log = getattr(self.logger, "log", None)
            if log is None:
                return
            self._dispatch(log(level.stdlib_level, msg, *args, **kwargs))
            return
        self._dispatch(target(msg, *args, **kwargs))

    def error(self, msg: object, *args: object, **kwargs: Any) -> None:
        self._emit(LoggerLevel.ERROR, "error", msg, *args, **kwargs)

    def exception(self, msg: object, *args: object, **kwargs: Any) -> None:
        if isinstance(self.logger, logging.Logger):
            kwargs.setdefault("exc_info", True)
        self._emit(LoggerLevel.ERROR, "error", msg, *args, **kwargs)

    def warning(self, msg: object, *args: object, **kwargs: Any) -> None:
        self._emit(LoggerLevel.WARN, "warning", msg, *args, **kwargs)

    warn = warning

    def info(self, msg: object, *args: object, **kwargs: Any) -> None:
        self._emit(LoggerLevel.INFO, "info", msg, *args, **kwargs)

    def debug(self, msg: object, *args: object, **kwargs: Any) -> None:
        self._emit(LoggerLevel.DEBUG, "debug", msg, *args, **kwargs)

    def trace(self, msg: object, *args: object, **kwargs: Any) -> None:
        # logging.Logger has no ``trace`` method; _emit falls back to ``log(TRACE, ...)``.
        self._emit(LoggerLevel.TRACE, "trace", msg, *args, **kwargs)

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        if level <= TRACE:
            self.trace(msg, *args, **kwargs)
        elif level <= logging.DEBUG:
            self.debug(msg, *args, **kwargs)
        elif level <= logging.INFO:
            self.info(msg, *args, **kwargs)
        elif level <= logging.WARNING:
            self.warning(msg, *args, **kwargs)
        else:
            self.error(msg, *args, **kwargs)


async def _await(awaitable: Any) -> None:
    await awaitable


@dataclass(frozen=True, slots=True)
class LoggingSink:
    """Where log records go for a given server transport mode."""

    name: str
    stream: TextIO

    def configure(self, level: str | int = "INFO") -> None:
        """Install this sink as the root logging handler."""
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=self.stream, force=True)


def select_logging_sink(transport: str) -> LoggingSink:
    """Return the sink for ``transport``.

    In stdio mode stdout carries MCP frames, so logs must go to stderr.
    """
    if transport == "stdio":
        return LoggingSink(name="stderr", stream=sys.stderr)
    return LoggingSink(name="stdout", stream=sys.stdout)


__all__ = [
    "LOG_FORMAT",
    "TRACE",
    "Logger",
    "LoggerLevel",
    "LoggerProxy",
    "LoggingSink",
    "select_logging_sink",
]
