# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.records.local import LocalRecordClient, demo_records

from .fakes import RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        local_store_path=tmp_path / "records.json",
        seed_demo_data=True,
        api_base_url="",
        api_key=None,
        project_id="",
        api_connect_timeout=1.0,
        api_read_timeout=1.0,
        default_category="personal",
        default_priority="medium",
    )


@pytest.fixture()
def records(settings: SimpleNamespace) -> LocalRecordClient:
    """Real offline store seeded with the demo data (4 categories, 7 tasks)."""
    return LocalRecordClient(settings.local_store_path, seed=demo_records())


@pytest.fixture()
def empty_records(tmp_path: Path) -> LocalRecordClient:
    return LocalRecordClient(tmp_path / "empty.json")


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, records: LocalRecordClient, notifier: RecordingNotifier) -> AppState:
    """
    AppState wired with a recording notifier.

    NOTE: We keep the real local record store here because its behaviour is
    part of what we want to test.
    """
    return AppState.build(settings=settings, records=records, notifier=notifier, offline=True)
