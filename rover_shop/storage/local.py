"""
Local JSON file store

Fallback when the remote store is unreachable or not configured. The whole
store lives in one file:

    {"teams": {"<team-id>": {...}}, "submissions": {"<id>": {...}}}
"""
import asyncio
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from rover_shop.storage.base import StorageError


logger = logging.getLogger(__name__)


class LocalJsonStore:
    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read local store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Local store {self.path} is not a JSON object")
        return data

    def _write(self, data: Dict[str, Dict[str, Dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Cannot write local store {self.path}: {e}") from e

    def _save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        with self._lock:
            data = self._read()
            data.setdefault(collection, {})[key] = record
            self._write(data)

    def _load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._read().get(collection, {}).get(key)

    def _delete(self, collection: str, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.get(collection, {}).pop(key, None) is not None:
                self._write(data)

    def _list_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._read().get(collection, {}).values())

    # File work runs in a worker thread

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._save, collection, key, record)

    async def load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._load, collection, key)

    async def delete(self, collection: str, key: str) -> None:
        await asyncio.to_thread(self._delete, collection, key)

    async def list_all(self, collection: str) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._list_all, collection)
