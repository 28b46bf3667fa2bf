# src/taskmaster/cli/bootstrap.py

"""
Process bootstrap.

Loads settings once, makes sure the local data directory exists, routes
logging into it, then builds AppState through the composition root.
Host applications call bootstrap(); the CLI entry point does the same.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.clock import Clock
from ..core.ports import TaskStoreLike
from ..core.state import AppState, create_initial_state
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> Path:
    data_dir = Path(getattr(settings, "data_dir", ".local/taskmaster"))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def bootstrap(
    *,
    settings=None,
    clock: Clock | None = None,
    task_store: TaskStoreLike | None = None,
) -> AppState:
    if settings is None:
        settings = get_settings()

    data_dir = _ensure_local_dirs(settings)
    app_name = getattr(settings, "app_name", "taskmaster")
    log_file = setup_logging(
        log_dir=data_dir,
        app_name=app_name,
        console_level=getattr(settings, "log_level", "INFO"),
    )
    logger.info("Starting %s (log=%s)", app_name, log_file)

    # Reuse the same settings object for the rest of the wiring.
    return create_initial_state(settings=settings, clock=clock, task_store=task_store)
