# backend/app/notifications/debug.py

"""
動作確認用のデバッグコンソール。

REPL やテストから通知の一覧・クリア・テスト通知の追加・未読件数の確認を
ワンライナーで行えるようにする。
"""

from __future__ import annotations

from typing import List

from .schemas import NotificationOperation, OperationResult
from .store import NotificationBackend
from .templater import NotificationTemplater

TEST_PATIENT = {"name": "Test Patient", "id": "test123"}


class NotificationDebugConsole:
    def __init__(self, templater: NotificationTemplater, backend: NotificationBackend) -> None:
        self._templater = templater
        self._backend = backend

    def view_all(self) -> OperationResult:
        return self._backend.list_notifications()

    def clear(self) -> OperationResult:
        return self._backend.clear_all()

    def add_test(self) -> OperationResult:
        return self._templater.send_patient_notification(NotificationOperation.CREATE, dict(TEST_PATIENT))

    def unread_count(self) -> OperationResult:
        return self._backend.get_unread_count()

    @staticmethod
    def commands() -> List[str]:
        return ["view_all", "clear", "add_test", "unread_count"]
