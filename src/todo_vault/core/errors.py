# src/todo_vault/core/errors.py

"""
Error hierarchy shared by stores and the CLI.

Everything derives from TodoVaultError so connectors can turn domain failures
into a user-facing message with a single except clause.
"""

from __future__ import annotations


class TodoVaultError(Exception):
    """Base class for all expected (recoverable) failures."""


class ValidationError(TodoVaultError):
    """Input rejected before any state was touched (e.g. empty title)."""


class NotFoundError(TodoVaultError):
    """Unknown task id."""


class OutOfRangeError(NotFoundError):
    """Position outside [1, count]."""

    def __init__(self, position: int, total: int) -> None:
        self.position = position
        self.total = total
        super().__init__(f"Task number {position} not found. You have {total} tasks.")


class AlreadyCompletedError(TodoVaultError):
    """Raised by the one-way completion policy."""


class NothingToUndoError(TodoVaultError):
    def __init__(self) -> None:
        super().__init__("Nothing to undo")


class NothingToRedoError(TodoVaultError):
    def __init__(self) -> None:
        super().__init__("Nothing to redo")


class PersistenceError(TodoVaultError):
    """Reading or writing a data file failed."""


class AuthError(TodoVaultError):
    pass


class RegistrationError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    def __init__(self) -> None:
        super().__init__("Invalid username/email or password.")
