# backend/tests/conftest.py
"""
Pytest configuration for the hospital notification log tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import app.*` works correctly in tests.
- Removes notification environment variables so that tests never
  write to a real storage directory by accident.
- Provides shared store / templater fixtures backed by in-memory storage.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _clear_notification_env_vars() -> None:
    for name in (
        "HOSPITAL_NOTIFICATIONS_STORAGE_DIR",
        "HOSPITAL_NOTIFICATIONS_STORAGE_KEY",
        "HOSPITAL_NOTIFICATIONS_DEFAULT_OPERATOR",
    ):
        os.environ.pop(name, None)


_ensure_project_root_in_sys_path()
_clear_notification_env_vars()

from app.notifications.config import get_notification_config  # noqa: E402
from app.notifications.storage import InMemoryKeyValueStorage  # noqa: E402
from app.notifications.store import NotificationStore  # noqa: E402
from app.notifications.templater import NotificationTemplater  # noqa: E402


class FakeClock:
    """呼び出しごとに 1秒ずつ進む固定クロック。"""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture(autouse=True)
def _reset_notification_config():
    get_notification_config.cache_clear()
    yield
    get_notification_config.cache_clear()


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(storage: InMemoryKeyValueStorage, clock: FakeClock) -> NotificationStore:
    return NotificationStore(storage, clock=clock)


@pytest.fixture
def templater(store: NotificationStore) -> NotificationTemplater:
    return NotificationTemplater(store)
