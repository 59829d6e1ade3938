# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

LOG_FILE_NAME = "taskboard.log"

# HTTP transport loggers: request lines at INFO would interleave with the REPL output.
NOISY_LOGGERS = ("httpx", "httpcore")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the dashboard console readable.

    taskboard logs pass, except record-client chatter below INFO (every
    request is logged at DEBUG and that belongs in the file only).
    Captured Python warnings and third-party loggers reach the console
    only at ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("taskboard.records."):
            return record.levelno >= logging.INFO

        if name == "taskboard" or name.startswith("taskboard."):
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> Path:
    """
    Configure the root logger once, before the first log line.

    Console: stderr, filtered by _ConsoleNoiseFilter.
    File: `<log_dir>/taskboard.log`, everything from `file_level` up.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    # Re-running setup must not duplicate output.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
