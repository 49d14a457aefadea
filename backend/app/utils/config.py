# backend/app/utils/config.py

"""
環境変数読み取り用のユーティリティ。
通知ストアの保存先・既定オペレータ名などの設定読み込みで共通利用する。
"""

import os
from pathlib import Path
from typing import Optional


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    環境変数を取得するヘルパー。

    :param name: 環境変数名
    :param default: 未設定・空白のみの場合に返す値
    :return: 前後の空白を除いた文字列値、または default
    """
    value = os.getenv(name)

    if value is None or value.strip() == "":
        return default

    return value.strip()


def get_path_env(name: str) -> Optional[Path]:
    """
    パスを表す任意の環境変数を Path として返す。

    未設定・空文字の場合は None。`~` はホームディレクトリに展開する。
    """
    value = get_env(name)
    if value is None:
        return None
    return Path(value).expanduser()
