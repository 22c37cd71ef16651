"""
Document store contract shared by every persistence backend
"""
from typing import Any, Dict, List, Optional, Protocol


TEAMS_COLLECTION = "teams"
SUBMISSIONS_COLLECTION = "submissions"


class StorageError(Exception):
    """A store could not complete a read or write"""


class DocumentStore(Protocol):
    """
    Keyed JSON documents grouped into named collections

    Implementations raise StorageError when the backend fails.
    """

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        ...

    async def load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        ...

    async def delete(self, collection: str, key: str) -> None:
        ...

    async def list_all(self, collection: str) -> List[Dict[str, Any]]:
        ...
