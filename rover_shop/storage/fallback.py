"""
Best-effort store: remote first, local copy always

Nothing here raises. Remote failures are logged and the local store takes
over; a write that fails remotely still lands locally.
"""
import logging
from typing import Any, Dict, List, Optional

from rover_shop.config import Settings
from rover_shop.storage.base import DocumentStore, StorageError
from rover_shop.storage.local import LocalJsonStore
from rover_shop.storage.remote import RemoteDocumentStore


logger = logging.getLogger(__name__)


class FallbackStore:
    def __init__(self, local: DocumentStore, primary: Optional[DocumentStore] = None):
        self.local = local
        self.primary = primary

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        if self.primary is not None:
            try:
                await self.primary.save(collection, key, record)
            except StorageError as e:
                logger.warning(f"⚠️ Remote save {collection}/{key} failed, keeping local copy: {e}")
        try:
            await self.local.save(collection, key, record)
        except StorageError as e:
            logger.warning(f"⚠️ Local save {collection}/{key} failed: {e}")

    async def load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        if self.primary is not None:
            try:
                record = await self.primary.load(collection, key)
                if record is not None:
                    return record
            except StorageError as e:
                logger.warning(f"⚠️ Remote load {collection}/{key} failed, using local copy: {e}")
        try:
            return await self.local.load(collection, key)
        except StorageError as e:
            logger.warning(f"⚠️ Local load {collection}/{key} failed: {e}")
            return None

    async def delete(self, collection: str, key: str) -> None:
        if self.primary is not None:
            try:
                await self.primary.delete(collection, key)
            except StorageError as e:
                logger.warning(f"⚠️ Remote delete {collection}/{key} failed: {e}")
        try:
            await self.local.delete(collection, key)
        except StorageError as e:
            logger.warning(f"⚠️ Local delete {collection}/{key} failed: {e}")

    async def list_all(self, collection: str) -> List[Dict[str, Any]]:
        if self.primary is not None:
            try:
                return await self.primary.list_all(collection)
            except StorageError as e:
                logger.warning(f"⚠️ Remote list {collection} failed, using local copy: {e}")
        try:
            return await self.local.list_all(collection)
        except StorageError as e:
            logger.warning(f"⚠️ Local list {collection} failed: {e}")
            return []

    async def aclose(self) -> None:
        close = getattr(self.primary, "aclose", None)
        if close is not None:
            await close()


def build_store(settings: Settings) -> FallbackStore:
    """Remote store with local fallback, or local only when no remote is configured"""
    local = LocalJsonStore(settings.local_store_path)
    if not settings.remote_store_url:
        logger.warning("Remote store not configured, saving to local store only")
        return FallbackStore(local)

    logger.info(f"Using remote store {settings.remote_store_url} (timeout {settings.remote_timeout}s)")
    remote = RemoteDocumentStore(settings.remote_store_url, timeout=settings.remote_timeout)
    return FallbackStore(local, primary=remote)
