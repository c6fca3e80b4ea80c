# crud/remote_store.py
"""
Cloud document store client.

Documents live under a per-user path on the cloud document API:

    GET    /users/{uid}/{collection}          -> {"documents": [...]}
    GET    /users/{uid}/{collection}/{id}     -> document (404 when absent)
    POST   /users/{uid}/{collection}          -> {"id": "<server id>"}
    PATCH  /users/{uid}/{collection}/{id}     -> merge fields
    DELETE /users/{uid}/{collection}/{id}

Identifiers are generated by the server. Live updates are delivered by
polling the collection and reporting changed snapshots.
"""

import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from fastapi.encoders import jsonable_encoder

from retirewise.core.exceptions import DatabaseNotFoundError, RemoteStoreError
from .base import Document, DocumentStore, SnapshotCallback, Unsubscribe, notify

logger = logging.getLogger(__name__)


def create_remote_client(settings) -> httpx.AsyncClient:
    """Build the shared HTTP client for the cloud document API."""
    headers = {}
    if settings.REMOTE_STORE_TOKEN:
        headers["Authorization"] = f"Bearer {settings.REMOTE_STORE_TOKEN}"
    return httpx.AsyncClient(
        base_url=settings.REMOTE_STORE_URL,
        headers=headers,
        timeout=settings.REMOTE_STORE_TIMEOUT,
    )


class RemoteStore(DocumentStore):
    """Document store scoped to one signed-in user."""

    name = "remote"

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_id: str,
        subscribe_interval: float = 5.0,
    ):
        if not user_id:
            raise ValueError("RemoteStore requires a user id")
        self.client = client
        self.user_id = user_id
        self.subscribe_interval = subscribe_interval

    # =====================================================================
    # HTTP HELPERS
    # =====================================================================

    def _path(self, collection: str, record_id: Optional[str] = None) -> str:
        path = f"/users/{quote(self.user_id, safe='')}/{collection}"
        if record_id is not None:
            path = f"{path}/{quote(str(record_id), safe='')}"
        return path

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"Remote store request failed: {method} {path}: {e}")
            raise RemoteStoreError(f"Request error: {e}") from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.warning(f"Remote store returned HTTP {code} for {e.request.method} {e.request.url}")
            raise RemoteStoreError(
                f"HTTP {code}: {e.response.text[:200]}", status_code=code
            ) from e

    @staticmethod
    def _encode(data: Document) -> Document:
        return jsonable_encoder({k: v for k, v in data.items() if k != "id"})

    # =====================================================================
    # DOCUMENT STORE API
    # =====================================================================

    async def list(self, collection: str) -> List[Document]:
        response = await self._request("GET", self._path(collection))
        self._raise_for_status(response)
        payload = response.json()
        if isinstance(payload, dict):
            payload = payload.get("documents", [])
        return payload

    async def get(self, collection: str, record_id: str) -> Optional[Document]:
        response = await self._request("GET", self._path(collection, record_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response)
        document = response.json()
        document.setdefault("id", record_id)
        return document

    async def create(self, collection: str, data: Document) -> str:
        response = await self._request("POST", self._path(collection), json=self._encode(data))
        self._raise_for_status(response)
        record_id = response.json().get("id")
        if not record_id:
            raise RemoteStoreError(f"Cloud store did not return an id for new {collection} record")
        return str(record_id)

    async def update(self, collection: str, record_id: str, patch: Document) -> None:
        response = await self._request(
            "PATCH", self._path(collection, record_id), json=self._encode(patch)
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise DatabaseNotFoundError(f"{collection} record {record_id} not found")
        self._raise_for_status(response)

    async def delete(self, collection: str, record_id: str) -> None:
        response = await self._request("DELETE", self._path(collection, record_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            return
        self._raise_for_status(response)

    async def subscribe(self, collection: str, callback: SnapshotCallback) -> Unsubscribe:
        """Poll the collection and call back with the first and every changed snapshot."""

        async def poll() -> None:
            last = None
            while True:
                try:
                    documents = await self.list(collection)
                except RemoteStoreError as e:
                    logger.warning(f"Subscription to {collection} could not refresh: {e}")
                else:
                    if documents != last:
                        last = documents
                        try:
                            await notify(callback, documents)
                        except Exception:
                            logger.exception(f"Subscriber for {collection} raised")
                await asyncio.sleep(self.subscribe_interval)

        task = asyncio.create_task(poll())

        def unsubscribe() -> None:
            task.cancel()

        return unsubscribe
