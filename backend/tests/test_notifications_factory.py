# backend/tests/test_notifications_factory.py

import logging
from pathlib import Path

from app.notifications.config import NotificationConfig
from app.notifications.factory import build_storage, create_notification_system
from app.notifications.storage import FileKeyValueStorage, InMemoryKeyValueStorage


def test_build_storage_selects_implementation(tmp_path: Path) -> None:
    assert isinstance(build_storage(NotificationConfig()), InMemoryKeyValueStorage)
    assert isinstance(build_storage(NotificationConfig(storage_dir=tmp_path)), FileKeyValueStorage)


def test_create_notification_system_wires_components(caplog) -> None:
    config = NotificationConfig(default_operator="Registrar")

    with caplog.at_level(logging.INFO, logger="app.notifications.factory"):
        system = create_notification_system(config)

    record = system.templater.send_payment_notification("CREATE", {"patientName": "Zhang"}).data

    assert record.operator_name == "Registrar"
    assert system.store.get_unread_count().data == 1
    assert system.templater.backend is system.store
    assert any("Notification system initialized" in r.getMessage() for r in caplog.records)


def test_systems_do_not_share_state() -> None:
    first = create_notification_system(NotificationConfig())
    second = create_notification_system(NotificationConfig())

    first.debug.add_test()

    assert first.store.get_unread_count().data == 1
    assert second.store.get_unread_count().data == 0


def test_create_notification_system_reads_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOSPITAL_NOTIFICATIONS_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("HOSPITAL_NOTIFICATIONS_STORAGE_KEY", "ward_c")

    system = create_notification_system()
    system.templater.send_doctor_notification("DELETE", {"name": "Li"})

    assert (tmp_path / "ward_c.json").exists()
