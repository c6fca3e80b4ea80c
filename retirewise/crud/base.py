# crud/base.py
"""
Storage contract shared by the on-device store and the cloud store.

Both stores hold plain documents (dicts) grouped in named collections and
expose the same async CRUD operations, so the services above them never
need to know which one is serving a call.
"""

import inspect
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

# Collection names, shared by both stores and the backup file format
PROJECTS = "projects"
TIME_LOGS = "timeLogs"
JOURNAL_ENTRIES = "journalEntries"
INSIGHTS = "insights"
CONVERSATIONS = "conversations"
SETTINGS = "settings"

ENTITY_COLLECTIONS = (PROJECTS, TIME_LOGS, JOURNAL_ENTRIES, INSIGHTS, CONVERSATIONS)

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], Union[None, Awaitable[None]]]
Unsubscribe = Callable[[], None]


async def notify(callback: SnapshotCallback, documents: List[Document]) -> None:
    """Invoke a plain or coroutine callback with a snapshot."""
    result = callback(documents)
    if inspect.isawaitable(result):
        await result


def _matches(document: Document, where: Dict[str, Any]) -> bool:
    for key, expected in where.items():
        actual = document.get(key)
        # Flags may be stored as 0/1 or true/false depending on the store
        if isinstance(expected, bool):
            if bool(actual) != expected:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(value: Any):
    if value is None:
        return (1, "")
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return (0, value.isoformat())
    return (0, str(value))


class DocumentStore(ABC):
    """Abstract CRUD contract over named document collections."""

    name: str = "store"

    @abstractmethod
    async def list(self, collection: str) -> List[Document]:
        """Return every document in the collection."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> Optional[Document]:
        """Return one document, or None when it does not exist."""

    @abstractmethod
    async def create(self, collection: str, data: Document) -> str:
        """Persist a new document and return its id."""

    @abstractmethod
    async def update(self, collection: str, record_id: str, patch: Document) -> None:
        """Merge patch into an existing document."""

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """Remove a document; unknown ids are ignored."""

    @abstractmethod
    async def subscribe(self, collection: str, callback: SnapshotCallback) -> Unsubscribe:
        """
        Deliver collection snapshots to callback.

        Live updates are best effort: a store without push support delivers
        a single snapshot and returns a handle that does nothing.
        """

    async def query(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> List[Document]:
        """Filter by field equality and sort ascending by one field."""
        documents = await self.list(collection)
        if where:
            documents = [doc for doc in documents if _matches(doc, where)]
        if order_by:
            documents = sorted(documents, key=lambda doc: _sort_key(doc.get(order_by)))
        return documents
