# retirewise/crud/__init__.py

from .base import (
    DocumentStore,
    PROJECTS,
    TIME_LOGS,
    JOURNAL_ENTRIES,
    INSIGHTS,
    CONVERSATIONS,
    SETTINGS,
    ENTITY_COLLECTIONS,
)
from .local_store import LocalStore, generate_local_id
from .remote_store import RemoteStore, create_remote_client

__all__ = [
    "DocumentStore",
    "PROJECTS", "TIME_LOGS", "JOURNAL_ENTRIES", "INSIGHTS", "CONVERSATIONS", "SETTINGS",
    "ENTITY_COLLECTIONS",
    "LocalStore", "generate_local_id",
    "RemoteStore", "create_remote_client",
]
