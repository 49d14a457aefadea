# backend/app/notifications/config.py

"""
通知ストアに必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from app.utils.config import get_env, get_path_env

DEFAULT_STORAGE_KEY = "hospital_notifications"
DEFAULT_OPERATOR_NAME = "Administrator"


@dataclass(frozen=True)
class NotificationConfig:
    """通知ストア用の設定値コンテナ。"""

    storage_dir: Optional[Path] = None
    storage_key: str = DEFAULT_STORAGE_KEY
    default_operator: str = DEFAULT_OPERATOR_NAME


@lru_cache()
def get_notification_config() -> NotificationConfig:
    """
    環境変数から通知ストア設定を読み込む。

    任意:
      - HOSPITAL_NOTIFICATIONS_STORAGE_DIR      (未設定ならメモリ上のみで保持)
      - HOSPITAL_NOTIFICATIONS_STORAGE_KEY      (デフォルト: hospital_notifications)
      - HOSPITAL_NOTIFICATIONS_DEFAULT_OPERATOR (デフォルト: Administrator)
    """
    storage_dir = get_path_env("HOSPITAL_NOTIFICATIONS_STORAGE_DIR")

    storage_key = get_env(
        "HOSPITAL_NOTIFICATIONS_STORAGE_KEY",
        default=DEFAULT_STORAGE_KEY,
    )
    default_operator = get_env(
        "HOSPITAL_NOTIFICATIONS_DEFAULT_OPERATOR",
        default=DEFAULT_OPERATOR_NAME,
    )

    return NotificationConfig(
        storage_dir=storage_dir,
        storage_key=storage_key,
        default_operator=default_operator,
    )
