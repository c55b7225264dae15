"""Tests for :mod:`docnav.core.logging`."""

from __future__ import annotations

import gzip
import io
import json
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest
from rich.console import Console
from rich.logging import RichHandler

from docnav.core.logging import (
    LOG_FILENAME,
    configure_logging,
    get_logger,
    parse_level,
)


def _console() -> Console:
    return Console(file=io.StringIO(), width=120, record=True)


def _handlers(kind: type) -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, kind)]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), (" Info ", logging.INFO), ("ERROR", logging.ERROR)],
)
def test_parse_level(name: str, expected: int) -> None:
    assert parse_level(name) == expected


def test_parse_level_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unsupported log level"):
        parse_level("chatty")


def test_log_dir_adds_json_file_handler(tmp_path: Path) -> None:
    configure_logging(level="debug", log_dir=tmp_path / "logs", console=_console())

    assert len(_handlers(RichHandler)) == 1
    (file_handler,) = _handlers(TimedRotatingFileHandler)
    log_file = Path(file_handler.baseFilename)
    assert log_file == tmp_path / "logs" / LOG_FILENAME

    get_logger(__name__, component="pages").info("page-rendered", page="godoc://fmt")
    file_handler.flush()

    payload = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert payload["event"] == "page-rendered"
    assert payload["component"] == "pages"
    assert payload["page"] == "godoc://fmt"
    assert payload["level"] == "info"


def test_stderr_only_without_log_dir() -> None:
    configure_logging(level="info", console=_console())

    assert logging.getLogger().level == logging.INFO
    assert _handlers(RichHandler)
    assert not _handlers(TimedRotatingFileHandler)


def test_console_output_respects_level() -> None:
    console = _console()
    configure_logging(level="warning", console=console)

    logger = get_logger("quiet")
    logger.info("hidden-event")
    logger.warning("shown-event", page="godoc://io")

    output = console.export_text()
    assert "shown-event" in output
    assert "hidden-event" not in output


def test_unknown_level_leaves_no_log_dir(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        configure_logging(level="invalid", log_dir=tmp_path / "logs")

    assert not (tmp_path / "logs").exists()


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging(level="info", console=_console())
    configure_logging(level="debug", console=_console())

    assert len(_handlers(RichHandler)) == 1


def test_rollover_archives_with_gzip(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    configure_logging(level="warning", log_dir=log_dir, console=_console())
    (file_handler,) = _handlers(TimedRotatingFileHandler)

    get_logger("rotate", task="rotation").warning("pre-rotation")
    file_handler.flush()
    file_handler.doRollover()

    archives = sorted(log_dir.glob(f"{LOG_FILENAME}.*.gz"))
    assert archives
    with gzip.open(archives[-1], "rt", encoding="utf-8") as handle:
        archived = handle.read()
    assert "pre-rotation" in archived
    assert "rotation" in archived
