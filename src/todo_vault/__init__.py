"""todo-vault: console to-do lists with per-user history and undo/redo."""

__version__ = "0.1.0"
