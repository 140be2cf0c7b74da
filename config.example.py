# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODOVAULT_APP_NAME": "App display name (default: todo-vault).",
    "TODOVAULT_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Paths (gitignored)
    "TODOVAULT_DATA_DIR": "Local data directory (default: .local/todovault).",
    "TODOVAULT_USERS_PATH": "Accounts JSON path (default: <data_dir>/users.json).",
    "TODOVAULT_TASKS_DIR": "Per-user tasks_<user>.json / history_<user>.json (default: <data_dir>/users).",
    # Behaviour
    "TODOVAULT_COMPLETION_POLICY": (
        "one_way (default): completing a completed task is an error; "
        "toggle: completing it again marks it pending."
    ),
    "TODOVAULT_HISTORY_LIMIT": "Entries shown by /history without an argument (default: 10).",
    "TODOVAULT_PASSWORD_MIN_LENGTH": "Minimum password length at registration (default: 6).",
}
