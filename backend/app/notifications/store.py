# backend/app/notifications/store.py

"""
通知コレクションの保持・永続化と CRUD 操作。

- 通知はメモリ上のリストに新しい順（先頭に追加）で保持する
- 変更のたびにコレクション全体を JSON 化して KeyValueStorage に上書き保存する
  （clear_all はスロットごと削除する）
- 公開メソッドは例外を外に出さず、OperationResult で成否を返す

将来サーバ側 API に置き換える場合も、NotificationBackend と同じ I/F を満たせば
Templater 側は変更不要。
"""

from __future__ import annotations

import json
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union

from pydantic_core import PydanticSerializationError

from .config import DEFAULT_STORAGE_KEY
from .schemas import Notification, NotificationFilter, NotificationPayload, OperationResult
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_SCHEMA_VERSION = 1

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9

PayloadLike = Union[NotificationPayload, Mapping[str, Any]]
FilterLike = Union[NotificationFilter, Mapping[str, Any]]


class NotificationBackend(Protocol):
    """
    通知の保存先が満たすべきインターフェース。

    実装例:
    - NotificationStore: ローカルの KeyValueStorage に保存
    - 将来のサーバ API クライアント: 同じ意味論で HTTP 経由で保存
    """

    def send_notification(self, payload: PayloadLike) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def list_notifications(
        self, filters: Optional[FilterLike] = None
    ) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def get_unread_count(self) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def mark_as_read(self, notification_id: str) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def mark_all_as_read(self) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def delete_notification(self, notification_id: str) -> OperationResult:  # pragma: no cover - Protocol
        ...

    def clear_all(self) -> OperationResult:  # pragma: no cover - Protocol
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationStore:
    """
    通知コレクションを単独で所有するストア。

    :param storage: 永続化先のキー・バリュー領域
    :param storage_key: 保存に使うキー名
    :param clock: 現在時刻を返す関数（テストで固定時刻を注入するため）
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock or _utcnow
        self._notifications: List[Notification] = self._load()

    # ------------------------------------------------------------------
    # 永続化
    # ------------------------------------------------------------------
    def _load(self) -> List[Notification]:
        """
        保存済みのコレクションを読み込む。

        未保存・空・壊れたデータの場合は空リストから始める（エラーはログのみ）。
        旧形式（JSON 配列そのもの）も読み込める。
        """
        try:
            raw = self._storage.get_item(self._storage_key)
            if not raw:
                return []

            data = json.loads(raw)
            if isinstance(data, dict):
                version = data.get("version")
                if version != STORAGE_SCHEMA_VERSION:
                    logger.warning(
                        "Unexpected notification storage version %r (expected %d). Trying to load anyway.",
                        version,
                        STORAGE_SCHEMA_VERSION,
                    )
                items = data.get("notifications", [])
            else:
                items = data

            if not isinstance(items, list):
                raise ValueError("Stored notifications must be a JSON array.")

            return [Notification.model_validate(item) for item in items]
        except Exception:  # noqa: BLE001 - 読み込み失敗時は空のコレクションで続行
            logger.exception("Failed to load notifications from storage key '%s'.", self._storage_key)
            return []

    def _save(self) -> None:
        """
        コレクション全体を上書き保存する。

        保存に失敗してもメモリ上の変更は維持し、ログに残すだけにする。
        """
        try:
            blob = json.dumps(
                {
                    "version": STORAGE_SCHEMA_VERSION,
                    "notifications": [
                        n.model_dump(mode="json", by_alias=True) for n in self._notifications
                    ],
                },
                ensure_ascii=False,
            )
            self._storage.set_item(self._storage_key, blob)
        except Exception:  # noqa: BLE001 - 保存失敗でも本処理は止めない
            logger.exception("Failed to save notifications to storage key '%s'.", self._storage_key)

    def _remove_saved(self) -> None:
        """
        保存済みのスロットを削除する。失敗してもログに残すだけにする。
        """
        try:
            self._storage.remove_item(self._storage_key)
        except Exception:  # noqa: BLE001 - 保存失敗でも本処理は止めない
            logger.exception("Failed to remove notifications from storage key '%s'.", self._storage_key)

    # ------------------------------------------------------------------
    # 内部ユーティリティ
    # ------------------------------------------------------------------
    def _generate_id(self, now: datetime) -> str:
        existing = {n.id for n in self._notifications}
        millis = int(now.timestamp() * 1000)
        while True:
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
            candidate = f"notification_{millis}_{suffix}"
            if candidate not in existing:
                return candidate

    @staticmethod
    def _json_metadata(payload: NotificationPayload) -> Dict[str, Any]:
        """
        metadata を保存時と同じ JSON 形式（datetime・Decimal は文字列）に揃える。

        JSON 化できない値を含む場合は元の値のまま保持し、保存側でエラーをログに残す。
        """
        try:
            return payload.model_dump(mode="json", include={"metadata"})["metadata"]
        except PydanticSerializationError:
            return dict(payload.metadata)

    def _find(self, notification_id: str) -> Optional[Notification]:
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    # ------------------------------------------------------------------
    # 公開 API
    # ------------------------------------------------------------------
    def send_notification(self, payload: PayloadLike) -> OperationResult:
        """
        通知を 1件登録し、登録したレコードを返す。
        """
        try:
            if not isinstance(payload, NotificationPayload):
                payload = NotificationPayload.model_validate(payload)

            now = self._clock()
            fields = payload.model_dump(include=set(NotificationPayload.model_fields))
            fields["metadata"] = self._json_metadata(payload)
            notification = Notification(
                **fields,
                id=self._generate_id(now),
                timestamp=now,
                created_at=now.isoformat(),
                is_read=False,
                read_at=None,
            )

            self._notifications.insert(0, notification)
            self._save()

            logger.info(
                "Notification sent: %s [%s/%s] %s",
                notification.id,
                notification.module.value,
                notification.operation,
                notification.title,
            )
            return OperationResult.ok(notification.model_copy(deep=True))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to send notification.")
            return OperationResult.fail(str(exc))

    def list_notifications(self, filters: Optional[FilterLike] = None) -> OperationResult:
        """
        フィルタ条件に一致する通知のコピーを新しい順で返す。
        """
        try:
            if filters is None:
                filters = NotificationFilter()
            elif not isinstance(filters, NotificationFilter):
                filters = NotificationFilter.model_validate(filters)

            items = [n.model_copy(deep=True) for n in self._notifications if filters.matches(n)]
            return OperationResult.ok(items)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to list notifications.")
            return OperationResult.fail(str(exc))

    def get_unread_count(self) -> OperationResult:
        try:
            return OperationResult.ok(sum(1 for n in self._notifications if not n.is_read))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to count unread notifications.")
            return OperationResult.fail(str(exc))

    def mark_as_read(self, notification_id: str) -> OperationResult:
        """
        指定 ID の通知を既読にする。存在しない ID の場合は何もせず成功を返す。
        """
        try:
            notification = self._find(notification_id)
            if notification is not None:
                notification.is_read = True
                notification.read_at = self._clock().isoformat()
                self._save()
            return OperationResult.ok()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to mark notification %s as read.", notification_id)
            return OperationResult.fail(str(exc))

    def mark_all_as_read(self) -> OperationResult:
        try:
            read_at = self._clock().isoformat()
            for notification in self._notifications:
                notification.is_read = True
                notification.read_at = read_at
            self._save()
            return OperationResult.ok()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to mark all notifications as read.")
            return OperationResult.fail(str(exc))

    def delete_notification(self, notification_id: str) -> OperationResult:
        """
        指定 ID の通知を削除する。存在しない ID の場合は何もしない。
        """
        try:
            self._notifications = [n for n in self._notifications if n.id != notification_id]
            self._save()
            return OperationResult.ok()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to delete notification %s.", notification_id)
            return OperationResult.fail(str(exc))

    def clear_all(self) -> OperationResult:
        try:
            self._notifications = []
            self._remove_saved()
            return OperationResult.ok()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to clear notifications.")
            return OperationResult.fail(str(exc))
