"""In-memory document store (tests and throwaway runs)"""
import copy
from typing import Any, Dict, List, Optional


class MemoryStore:
    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[key] = copy.deepcopy(record)

    async def load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        record = self.collections.get(collection, {}).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def delete(self, collection: str, key: str) -> None:
        self.collections.get(collection, {}).pop(key, None)

    async def list_all(self, collection: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(record) for record in self.collections.get(collection, {}).values()]
