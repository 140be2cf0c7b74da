# src/todo_vault/core/jsonio.py

"""
Whole-file JSON persistence.

Files are always rewritten in full: write to a sibling .tmp file, then os.replace
it over the target so a crash never leaves a half-written file behind.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from .errors import PersistenceError

logger = logging.getLogger(__name__)


def ensure_json_list(path: Path) -> None:
    """Create `path` holding an empty list if it does not exist yet."""
    if path.exists():
        return
    write_json_atomic(path, [])
    logger.info("Created data file %s", path)


def read_json_list(path: Path) -> list[dict[str, Any]]:
    """Load a JSON list of objects. Missing file -> []."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError) as e:
        logger.exception("Failed to read %s", path)
        raise PersistenceError(f"Failed to read {path}: {e}") from e
    if not isinstance(data, list):
        raise PersistenceError(f"{path} does not contain a JSON list")
    return [item for item in data if isinstance(item, dict)]


def write_json_atomic(path: Path, data: Any, *, private: bool = False) -> None:
    """Pretty-print `data` to `path` (temp file + os.replace)."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
    except OSError as e:
        logger.exception("Failed to write %s", path)
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise PersistenceError(f"Failed to save {path.name}: {e}") from e

    if private:
        with contextlib.suppress(OSError):
            # Best-effort: credentials file, keep it private on disk.
            os.chmod(path, 0o600)
