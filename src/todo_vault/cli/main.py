# src/todo_vault/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from rich.console import Console

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _handle_signal(signum, _frame) -> None:
    logger.info("Signal %s received, shutting down...", signum)
    raise KeyboardInterrupt


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s... log=%s", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (AttributeError, ValueError):
        # Some platforms may not support SIGTERM.
        pass

    run_console_loop(state, Console())
    logger.info("Bye.")


if __name__ == "__main__":
    main()
