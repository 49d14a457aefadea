# backend/app/notifications/storage.py

"""
通知コレクションの保存先となるキー・バリュー領域。

ブラウザの localStorage と同じく「キー 1つに文字列 1つ」を丸ごと上書きするだけの
シンプルな I/F とし、差分書き込みやトランザクションは扱わない。

- InMemoryKeyValueStorage: プロセス内の dict に保持（テスト・設定なし時のデフォルト）
- FileKeyValueStorage: ディレクトリ配下に <key>.json として保持
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol, Union


class KeyValueStorage(Protocol):
    """
    文字列値を保存するキー・バリュー領域の最小インターフェース。
    """

    def get_item(self, key: str) -> Optional[str]:  # pragma: no cover - Protocol
        ...

    def set_item(self, key: str, value: str) -> None:  # pragma: no cover - Protocol
        ...

    def remove_item(self, key: str) -> None:  # pragma: no cover - Protocol
        ...


class InMemoryKeyValueStorage:
    """dict に値を保持するだけの実装。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStorage:
    """
    キーごとに 1ファイル（UTF-8 の JSON 文字列）として保存する実装。

    ディレクトリは初回書き込み時に作成する。
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(value, encoding="utf-8")

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
