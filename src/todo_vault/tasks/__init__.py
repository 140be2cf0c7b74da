"""
Task subsystem.

Components:
- task_models.py: data structures (Task, HistoryEntry, ActionKind, CompletionPolicy)
- history_log.py: append-only mutation log persisted as JSON
- undo.py: undo/redo stacks over history entries
- task_store.py: per-user task collection; every mutation is persisted and recorded
"""
