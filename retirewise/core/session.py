# core/session.py
import logging
import threading
from typing import Callable, Optional, Tuple

from retirewise.crud.base import DocumentStore

logger = logging.getLogger(__name__)


class DataSession:
    """
    Active-user context for the data layer.

    Holds the signed-in user id (or None for local mode) together with the
    store that serves it. Both are swapped together under a lock, so a
    reader always sees a matching pair.
    """

    def __init__(
        self,
        local_store: DocumentStore,
        remote_factory: Callable[[str], DocumentStore],
    ):
        self.local_store = local_store
        self.remote_factory = remote_factory
        self._lock = threading.Lock()
        self._user_id: Optional[str] = None
        self._store: DocumentStore = local_store

    @property
    def user_id(self) -> Optional[str]:
        with self._lock:
            return self._user_id

    def set_current_user(self, user_id: Optional[str]) -> None:
        """Route subsequent calls to the remote store for user_id, or to the local store."""
        user_id = user_id or None
        with self._lock:
            if user_id == self._user_id:
                return
            self._user_id = user_id
            self._store = self.remote_factory(user_id) if user_id else self.local_store
        logger.info(f"Database user set: {'remote' if user_id else 'local'}")

    def current(self) -> Tuple[Optional[str], DocumentStore]:
        """Return the (user_id, store) pair for one operation."""
        with self._lock:
            return self._user_id, self._store
