# src/todo_vault/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from the environment outside this module.
- Everything downstream receives settings by injection.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import CompletionPolicy

ENV_PREFIX = "TODOVAULT"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    users_path: Path
    tasks_dir: Path

    # ---- Behaviour ----
    completion_policy: CompletionPolicy
    history_limit: int
    password_min_length: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-vault").strip() or "todo-vault"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todovault"))
        users_path = _env_path(_k("USERS_PATH"), data_dir / "users.json")
        tasks_dir = _env_path(_k("TASKS_DIR"), data_dir / "users")

        completion_policy = CompletionPolicy.parse(os.getenv(_k("COMPLETION_POLICY")))
        history_limit = max(1, _env_int(_k("HISTORY_LIMIT"), 10))
        password_min_length = max(1, _env_int(_k("PASSWORD_MIN_LENGTH"), 6))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            users_path=users_path,
            tasks_dir=tasks_dir,
            completion_policy=completion_policy,
            history_limit=history_limit,
            password_min_length=password_min_length,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings; .env is loaded on first use (real env vars win)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
