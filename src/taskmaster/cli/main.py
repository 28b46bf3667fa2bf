# src/taskmaster/cli/main.py

"""
CLI entrypoint.

Bootstraps logging and AppState, then runs the recurrence sweeper until
interrupted (Ctrl+C).
"""

from __future__ import annotations

import asyncio
import logging

from ..tasks.task_api import get_statistics, run_sweeper
from .bootstrap import bootstrap

logger = logging.getLogger(__name__)


async def _serve(state) -> None:
    sweeper = asyncio.create_task(run_sweeper(state))
    try:
        await sweeper
    finally:
        sweeper.cancel()


def main() -> None:
    state = bootstrap()
    logger.info("Sweeper every %.0fs; %s", state.settings.sweep_interval_seconds, get_statistics(state).summary())

    try:
        asyncio.run(_serve(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")


if __name__ == "__main__":
    main()
