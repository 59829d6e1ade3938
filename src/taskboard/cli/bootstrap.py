# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the record backend (remote API, or the local JSON store when no API
  is configured),
- wires services and the dashboard into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.ports import Notifier, RecordClient
from ..core.state import AppState
from ..records.client import HttpRecordClient
from ..records.errors import RecordConfigError
from ..records.local import LocalRecordClient, demo_records

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.local_store_path.parent.mkdir(parents=True, exist_ok=True)


def create_record_client(settings) -> tuple[RecordClient, bool]:
    """Return (client, offline)."""
    try:
        return HttpRecordClient(settings), False
    except RecordConfigError as e:
        # Fallback for demos / local runs without a hosted backend.
        logger.info("Remote record API not configured (%s); using local store.", e)

    seed = demo_records() if getattr(settings, "seed_demo_data", True) else None
    return LocalRecordClient(settings.local_store_path, seed=seed), True


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    records, offline = create_record_client(settings)
    return AppState.build(
        settings=settings,
        records=records,
        notifier=notifier or ConsoleNotifier(),
        offline=offline,
    )
