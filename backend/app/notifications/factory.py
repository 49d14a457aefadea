# backend/app/notifications/factory.py

"""
通知システム一式の組み立て。

モジュールレベルのシングルトンは持たず、呼び出し側が create_notification_system() の
戻り値を保持して必要なコンポーネントに渡す。

- storage: 設定で保存先ディレクトリがあれば FileKeyValueStorage、なければメモリ上
- store: NotificationStore
- templater: NotificationTemplater（store に送信）
- debug: NotificationDebugConsole
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import NotificationConfig, get_notification_config
from .debug import NotificationDebugConsole
from .storage import FileKeyValueStorage, InMemoryKeyValueStorage, KeyValueStorage
from .store import NotificationStore
from .templater import NotificationTemplater

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationSystem:
    """組み立て済みの通知コンポーネント一式。"""

    store: NotificationStore
    templater: NotificationTemplater
    debug: NotificationDebugConsole


def build_storage(config: NotificationConfig) -> KeyValueStorage:
    if config.storage_dir is not None:
        return FileKeyValueStorage(config.storage_dir)
    return InMemoryKeyValueStorage()


def create_notification_system(
    config: Optional[NotificationConfig] = None,
    *,
    storage: Optional[KeyValueStorage] = None,
) -> NotificationSystem:
    """
    設定（省略時は環境変数）から通知システムを組み立てて返す。

    :param config: 通知設定。None の場合は get_notification_config() を使う
    :param storage: 保存先を直接指定する場合に渡す（テスト用途など）
    """
    config = config or get_notification_config()
    storage = storage if storage is not None else build_storage(config)

    store = NotificationStore(storage, storage_key=config.storage_key)
    templater = NotificationTemplater(store, default_operator=config.default_operator)
    debug = NotificationDebugConsole(templater, store)

    logger.info("Notification system initialized (storage=%s).", type(storage).__name__)
    logger.debug("Available debug commands: %s", ", ".join(debug.commands()))

    return NotificationSystem(store=store, templater=templater, debug=debug)
