# src/taskmaster/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that report every pass; the console only shows their warnings.
PERIODIC_LOGGERS: tuple[str, ...] = ("taskmaster.tasks.task_scheduler",)


def resolve_level(level: int | str | None, default: int = logging.INFO) -> int:
    """Accept a numeric level or a name such as "debug"; unknown names fall back to default."""
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console gate: our own loggers pass (periodic ones at WARNING+),
    everything else (third-party, py.warnings) only at ERROR+.
    """

    def __init__(self, periodic: Iterable[str] = PERIODIC_LOGGERS) -> None:
        super().__init__()
        self._periodic = tuple(periodic)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("taskmaster."):
            return record.levelno >= logging.ERROR
        if name.startswith(self._periodic):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmaster",
    app_name: str = "taskmaster",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Install a filtered console handler and a full file handler on the root logger.

    Replaces existing root handlers, so calling it twice does not duplicate
    output. Returns the log file path (<log_dir>/<app_name>.log).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name or 'taskmaster'}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(resolve_level(file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
