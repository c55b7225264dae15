"""Logging setup for :mod:`docnav`.

Pages are rendered inside an editor host, so diagnostics go to stderr through
Rich and, when ``log_dir`` is configured, to a JSON lines file rotated at
midnight with gzip-compressed archives.
"""

from __future__ import annotations

import gzip
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import shutil
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

LOG_FILENAME = "docnav.log"
ARCHIVE_DAYS = 7

_timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)


def parse_level(level: str) -> int:
    """Return the numeric level for a level name such as ``"info"``.

    Raises:
        ValueError: If the name is not a standard logging level.
    """

    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unsupported log level: {level!r}")
    return value


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    # Records from plain ``logging`` users get the same keys as ours.
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            _timestamper,
        ],
    )


def _stderr_handler(level: int, console: Console | None) -> logging.Handler:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        enable_link_path=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False)))
    return handler


def _compress(source: str, dest: str) -> None:
    with open(source, "rb") as plain, gzip.open(dest, "wb") as packed:
        shutil.copyfileobj(plain, packed)
    Path(source).unlink(missing_ok=True)


def _file_handler(directory: Path, level: int) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / LOG_FILENAME,
        when="midnight",
        utc=True,
        backupCount=ARCHIVE_DAYS,
        encoding="utf-8",
        delay=True,
    )
    handler.suffix = "%Y-%m-%d"
    handler.namer = lambda name: name + ".gz"
    handler.rotator = _compress
    handler.setLevel(level)
    handler.setFormatter(
        _formatter(structlog.processors.JSONRenderer(sort_keys=True))
    )
    return handler


def configure_logging(
    *,
    level: str = "WARNING",
    log_dir: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Route structlog events through stdlib handlers.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Level name applied to the root logger, any case.
        log_dir: Directory receiving ``docnav.log``; no file is written
            when ``None``.
        console: Rich console for the stderr handler, used by tests.

    Raises:
        ValueError: If ``level`` is not a standard level name.
    """

    numeric = parse_level(level)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            _timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = [_stderr_handler(numeric, console)]
    if log_dir is not None:
        directory = Path(log_dir).expanduser().resolve(strict=False)
        handlers.append(_file_handler(directory, numeric))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(numeric)
    logging.captureWarnings(True)


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structlog logger with ``initial_context`` bound.

    Example:
        >>> logger = get_logger(__name__, component="pages")
        >>> isinstance(logger, structlog.stdlib.BoundLogger)
        True
    """

    return structlog.get_logger(name).bind(**initial_context)


__all__ = [
    "ARCHIVE_DAYS",
    "LOG_FILENAME",
    "Logger",
    "configure_logging",
    "get_logger",
    "parse_level",
]
