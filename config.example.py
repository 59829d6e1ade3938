# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored); see .env.example.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBOARD_APP_NAME": "App display name (default: taskboard).",
    "TASKBOARD_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKBOARD_DATA_DIR": "Local data directory for logs and the offline store (default: .local/taskboard).",
    "TASKBOARD_LOCAL_STORE_PATH": "Offline record store JSON path (default: <data_dir>/records.json).",
    "TASKBOARD_SEED_DEMO_DATA": "Seed a new offline store with demo categories/tasks (true/false, default: true).",
    # Remote record API (offline mode when base URL or key is empty)
    "TASKBOARD_API_BASE_URL": "Record API base URL, e.g. https://records.example.com/api/v1.",
    "TASKBOARD_API_KEY": "Record API key (sent as a bearer token).",
    "TASKBOARD_PROJECT_ID": "Optional project id (sent as X-Project-Id).",
    "TASKBOARD_API_CONNECT_TIMEOUT_SECONDS": "Connect timeout in seconds (default: 5).",
    "TASKBOARD_API_READ_TIMEOUT_SECONDS": "Read timeout in seconds (default: 15).",
    # Quick-add defaults
    "TASKBOARD_DEFAULT_CATEGORY": "Category (name or id) for new tasks outside a category view (default: personal).",
    "TASKBOARD_DEFAULT_PRIORITY": "Priority for new tasks: low | medium | high (default: medium).",
}
