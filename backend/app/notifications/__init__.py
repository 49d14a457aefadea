# backend/app/notifications/__init__.py

"""
病院管理フロントエンド向けの通知ログ。

患者・医師・受付・会計・薬品の作成／更新／削除を人が読める通知として記録し、
キー・バリュー領域に保存する。既読化・フィルタ・削除の操作を提供する。

構成イメージ:
- schemas: 通知レコード・ペイロード・フィルタ・結果のスキーマ
- storage: 保存先のキー・バリュー領域（メモリ / ファイル）
- store: 通知コレクションの保持と CRUD
- templates / templater: 業務モジュールごとの文面生成と送信
- debug: 動作確認用コンソール
- factory: 通知システム一式の組み立て
"""

from .factory import NotificationSystem, create_notification_system
from .schemas import (
    Notification,
    NotificationFilter,
    NotificationModule,
    NotificationOperation,
    NotificationPayload,
    OperationResult,
)
from .store import NotificationBackend, NotificationStore
from .templater import NotificationTemplater

__all__ = [
    "Notification",
    "NotificationBackend",
    "NotificationFilter",
    "NotificationModule",
    "NotificationOperation",
    "NotificationPayload",
    "NotificationStore",
    "NotificationSystem",
    "NotificationTemplater",
    "OperationResult",
    "create_notification_system",
]
