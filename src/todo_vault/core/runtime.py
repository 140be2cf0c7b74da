# src/todo_vault/core/runtime.py

"""Default Clock / IdGenerator implementations wired in by bootstrap."""

from __future__ import annotations

import secrets
import time
from datetime import UTC, datetime


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)


class RandomIdGenerator:
    """
    Ids are "<prefix>_<epoch ms>_<8 hex chars>".

    The millisecond part keeps ids roughly ordered; the random suffix makes two ids
    created in the same millisecond distinct.
    """

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{time.time_ns() // 1_000_000}_{secrets.token_hex(4)}"
