"""
Remote document store client

Talks to a JSON document API:

    PUT    {base}/{collection}/{key}   body = record
    GET    {base}/{collection}/{key}   404 when absent
    DELETE {base}/{collection}/{key}
    GET    {base}/{collection}         list, or {"documents": [...]}
"""
from typing import Any, Dict, List, Optional

import httpx

from rover_shop.storage.base import StorageError


class RemoteDocumentStore:
    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {path} failed: {type(e).__name__}: {e}") from e
        if response.status_code >= 400 and response.status_code != 404:
            raise StorageError(f"{method} {path} returned {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise StorageError(f"Invalid JSON from {response.request.url}: {e}") from e

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        await self._request("PUT", f"/{collection}/{key}", json=record)

    async def load(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        response = await self._request("GET", f"/{collection}/{key}")
        if response.status_code == 404:
            return None
        return self._json(response)

    async def delete(self, collection: str, key: str) -> None:
        await self._request("DELETE", f"/{collection}/{key}")

    async def list_all(self, collection: str) -> List[Dict[str, Any]]:
        response = await self._request("GET", f"/{collection}")
        if response.status_code == 404:
            return []
        data = self._json(response)
        if isinstance(data, dict):
            data = data.get("documents", [])
        return list(data)

    async def aclose(self) -> None:
        await self.client.aclose()
