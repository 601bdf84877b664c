"""
Device-Local Key-Value Storage

JsonFileLocalStore keeps every key in one JSON file, rewritten on each
set. InMemoryLocalStore holds the same data in a dict (tests, and
environments without a writable home directory).
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Optional

from foco_finance.log import get_logger
from foco_finance.services.storage.interface import LocalStoreInterface


logger = get_logger(__name__)


class InMemoryLocalStore(LocalStoreInterface):
    """Dict-backed store; values are deep-copied in and out."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileLocalStore(LocalStoreInterface):
    """
    Store persisted as a single JSON object on disk.

    A missing or corrupt file reads as empty. Writes go through a temp
    file and os.replace so a crash never leaves half a file behind.
    """

    def __init__(self, path: str):
        self._path = Path(path).expanduser()

    def _load(self) -> dict[str, Any]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning("local_store_corrupt", path=str(self._path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self._path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
