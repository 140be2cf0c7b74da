# src/todo_vault/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


def parse_ts(raw: Any) -> datetime | None:
    """ISO-8601 string -> aware datetime (naive values are treated as UTC)."""
    if not raw or not isinstance(raw, str):
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def format_ts(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


class ActionKind(StrEnum):
    CREATE = "CREATE"
    COMPLETE = "COMPLETE"
    UNCOMPLETE = "UNCOMPLETE"  # toggle policy only
    REMOVE = "REMOVE"


class CompletionPolicy(StrEnum):
    """
    How complete_task treats an already completed task.

    - ONE_WAY: refuse with AlreadyCompletedError
    - TOGGLE: flip back to pending (recorded as UNCOMPLETE)
    """

    ONE_WAY = "one_way"
    TOGGLE = "toggle"

    @classmethod
    def parse(cls, raw: str | None, default: CompletionPolicy | None = None) -> CompletionPolicy:
        fallback = default or cls.ONE_WAY
        if not raw:
            return fallback
        key = raw.strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            return fallback


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    completed_at: datetime | None = None
    seq: int = 0

    def copy(self) -> Task:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": format_ts(self.created_at),
            "completedAt": format_ts(self.completed_at),
            "seq": self.seq,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        completed = bool(raw.get("completed", False))
        completed_at = parse_ts(raw.get("completedAt")) if completed else None
        if completed and completed_at is None:
            raise ValueError("completed task without a valid completedAt")
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            completed=completed,
            created_at=parse_ts(raw.get("createdAt")) or datetime.fromtimestamp(0, UTC),
            completed_at=completed_at,
            seq=int(raw.get("seq") or 0),
        )


@dataclass(slots=True)
class HistoryEntry:
    """
    One recorded mutation.

    payload shape by action:
      CREATE / REMOVE        -> {"task": Task}
      COMPLETE / UNCOMPLETE  -> {"before": Task, "after": Task}
    """

    id: str
    action: ActionKind
    details: str
    timestamp: datetime
    payload: dict[str, Task] = field(default_factory=dict)

    @property
    def task(self) -> Task:
        return self.payload["task"]

    @property
    def before(self) -> Task:
        return self.payload["before"]

    @property
    def after(self) -> Task:
        return self.payload["after"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": self.action.value,
            "details": self.details,
            "timestamp": format_ts(self.timestamp),
            "payload": {k: t.to_dict() for k, t in self.payload.items()},
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> HistoryEntry:
        if not raw.get("action"):
            raise ValueError("history record without an action")
        payload_raw = raw.get("payload") or {}
        payload: dict[str, Task] = {}
        if isinstance(payload_raw, dict):
            for key, value in payload_raw.items():
                if isinstance(value, dict) and "id" in value:
                    payload[str(key)] = Task.from_dict(value)
        return cls(
            id=str(raw.get("id") or ""),
            action=ActionKind(str(raw["action"]).upper()),
            details=str(raw.get("details") or ""),
            timestamp=parse_ts(raw.get("timestamp")) or datetime.fromtimestamp(0, UTC),
            payload=payload,
        )
