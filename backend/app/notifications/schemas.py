# backend/app/notifications/schemas.py

"""
通知レコードの共通スキーマ定義。

- どの業務モジュールの通知か（患者・医師・受付・会計・薬品）
- どの操作が起点か（CREATE / UPDATE / DELETE）
- 画面表示用のタイトル＋本文
- 既読状態

を扱う。永続化時のキーはフロントエンドと同じ camelCase（isRead, createdAt など）で、
Python 側の属性名は snake_case とする。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import DEFAULT_OPERATOR_NAME

NEW_ENTITY_ID = "new"
ALL = "all"
STATUS_READ = "read"


class NotificationModule(str, Enum):
    """
    通知対象の業務モジュール。
    """

    PATIENT = "patient"
    DOCTOR = "doctor"
    REGISTRATION = "registration"
    PAYMENT = "payment"
    MEDICINE = "medicine"


class NotificationOperation(str, Enum):
    """
    通知の起点となった操作。

    UNKNOWN は CREATE/UPDATE/DELETE のいずれにも一致しなかった操作文字列を表す。
    照合は大文字小文字を区別する（"create" は UNKNOWN）。
    """

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Union[str, "NotificationOperation"]) -> "NotificationOperation":
        """
        操作文字列を列挙値に変換する。未知の値は UNKNOWN を返す。
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NotificationPayload(_CamelModel):
    """
    Templater から Store に渡す通知データ。

    id・時刻・既読フラグは Store 側で付与するため含まない。
    """

    module: NotificationModule = Field(..., description="通知対象の業務モジュール。")
    operation: str = Field(
        ...,
        description="操作文字列。呼び出し元が渡した値をそのまま保持する（大文字小文字も含む）。",
    )
    title: str = Field(..., description="短いタイトル。")
    content: str = Field(..., description="本文。プレーンテキスト想定。")
    operator_name: str = Field(DEFAULT_OPERATOR_NAME, description="操作したユーザー名。")
    entity_id: str = Field(NEW_ENTITY_ID, description="対象レコードの ID。未採番なら 'new'。")
    entity_name: str = Field(..., description="対象レコードの表示名。")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="モジュール固有の補足情報（患者電話番号・金額・在庫など）。",
    )


class Notification(NotificationPayload):
    """
    Store が保持する通知 1件分のレコード。
    """

    id: str = Field(..., description="通知 ID（生成時に採番、以後不変）。")
    timestamp: datetime = Field(..., description="生成時刻（UTC）。")
    created_at: str = Field(..., description="生成時刻の ISO-8601 文字列。")
    is_read: bool = Field(False, description="既読フラグ。false→true のみ遷移する。")
    read_at: Optional[str] = Field(None, description="既読にした時刻の ISO-8601 文字列。")


class NotificationFilter(BaseModel):
    """
    一覧取得時のフィルタ条件。各項目は任意で、指定されたものを AND で適用する。

    - module / operation: 完全一致。"all" または None なら絞り込まない
    - status: "read" なら既読のみ、"all" または None なら絞り込まない、それ以外は未読のみ
    """

    module: Optional[str] = None
    operation: Optional[str] = None
    status: Optional[str] = None

    def matches(self, notification: Notification) -> bool:
        if self.module and self.module != ALL and notification.module.value != self.module:
            return False
        if self.operation and self.operation != ALL and notification.operation != self.operation:
            return False
        if self.status and self.status != ALL:
            want_read = self.status == STATUS_READ
            if notification.is_read != want_read:
                return False
        return True


class OperationResult(BaseModel):
    """
    Store の公開操作の戻り値。

    例外は呼び出し元に伝播させず、success=False と error メッセージで表現する。
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)
