# src/todo_vault/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "todovault.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Store layers log every mutation; on the terminal only their problems matter.
QUIET_PREFIXES = ("todo_vault.tasks.", "todo_vault.core.", "todo_vault.users.")


class DashboardConsoleFilter(logging.Filter):
    """
    Decide which records may reach stderr while the dashboard is on screen.

    App loggers under a quiet prefix pass at WARNING+, other app loggers pass
    as-is, everything else (third-party, py.warnings) only at ERROR+.
    """

    def __init__(
        self,
        app_prefix: str = "todo_vault.",
        quiet_prefixes: tuple[str, ...] = QUIET_PREFIXES,
    ) -> None:
        super().__init__()
        self.app_prefix = app_prefix
        self.quiet_prefixes = quiet_prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(self.app_prefix):
            return record.levelno >= logging.ERROR
        if record.name.startswith(self.quiet_prefixes):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/todovault",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backups: int = 3,
) -> Path:
    """
    Route logs to a filtered stderr handler and a rotating file in `log_dir`.

    Replaces whatever handlers the root logger had, so calling it twice does
    not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(DashboardConsoleFilter())

    to_file = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
    )
    to_file.setLevel(file_level)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    for handler in (console, to_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(min(console_level, file_level))

    logging.captureWarnings(True)
    return log_file
