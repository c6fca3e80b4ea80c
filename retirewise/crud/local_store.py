# crud/local_store.py
import asyncio
import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import DateTime, Integer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from retirewise import models
from retirewise.core.config import SessionLocal
from retirewise.core.exceptions import DatabaseNotFoundError, LocalStoreError
from .base import (
    CONVERSATIONS,
    INSIGHTS,
    JOURNAL_ENTRIES,
    PROJECTS,
    SETTINGS,
    TIME_LOGS,
    Document,
    DocumentStore,
    SnapshotCallback,
    Unsubscribe,
    notify,
)

logger = logging.getLogger(__name__)

MODELS = {
    PROJECTS: models.Project,
    TIME_LOGS: models.TimeLog,
    JOURNAL_ENTRIES: models.JournalEntry,
    INSIGHTS: models.Insight,
    CONVERSATIONS: models.Conversation,
    SETTINGS: models.Setting,
}

ID_PREFIXES = {
    PROJECTS: "project",
    TIME_LOGS: "timelog",
    JOURNAL_ENTRIES: "journal",
    INSIGHTS: "insight",
    CONVERSATIONS: "conversation",
    SETTINGS: "setting",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_local_id(prefix: str) -> str:
    """Build an id like journal_1718000000000_k3j9x0abc."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def _to_utc_naive(value: datetime) -> datetime:
    # Naive input is local wall-clock time; SQLite keeps naive UTC
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _noop() -> None:
    pass


class LocalStore(DocumentStore):
    """
    On-device document store backed by SQLAlchemy.

    Every collection maps to one table. Session work is blocking, so each
    public coroutine runs its SQL on a worker thread.
    """

    name = "local"

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    # =====================================================================
    # CONVERSION HELPERS
    # =====================================================================

    def _model(self, collection: str):
        try:
            return MODELS[collection]
        except KeyError:
            raise LocalStoreError(f"Unknown collection: {collection}") from None

    def _to_document(self, row) -> Document:
        document = {}
        for column in row.__table__.columns:
            value = getattr(row, column.key)
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            document[column.key] = value
        return document

    def _to_columns(self, model, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = model.__table__.columns
        values = {}
        for key, value in data.items():
            if key not in columns:
                logger.debug(f"Dropping unknown field {key!r} for {model.__tablename__}")
                continue
            column_type = columns[key].type
            if value is not None and isinstance(column_type, DateTime):
                if isinstance(value, str):
                    value = datetime.fromisoformat(value)
                value = _to_utc_naive(value)
            elif isinstance(value, bool) and isinstance(column_type, Integer):
                value = int(value)
            values[key] = value
        return values

    # =====================================================================
    # SYNC OPERATIONS (run on a worker thread)
    # =====================================================================

    def _query_sync(
        self, collection: str, where: Optional[Dict[str, Any]], order_by: Optional[str]
    ) -> List[Document]:
        model = self._model(collection)
        if order_by and order_by not in model.__table__.columns:
            raise LocalStoreError(f"Cannot order {collection} by {order_by!r}")
        with self.session_factory() as db:
            try:
                query = db.query(model)
                if where:
                    query = query.filter_by(**where)
                if order_by:
                    query = query.order_by(getattr(model, order_by))
                return [self._to_document(row) for row in query.all()]
            except SQLAlchemyError as exc:
                raise LocalStoreError(str(exc)) from exc

    def _get_sync(self, collection: str, record_id: str) -> Optional[Document]:
        model = self._model(collection)
        with self.session_factory() as db:
            try:
                row = db.query(model).filter(model.id == record_id).first()
            except SQLAlchemyError as exc:
                raise LocalStoreError(str(exc)) from exc
            return self._to_document(row) if row else None

    def _add_rows(self, db, collection: str, documents: Iterable[Document]) -> List[str]:
        model = self._model(collection)
        ids = []
        for data in documents:
            values = self._to_columns(model, data)
            values["id"] = values.get("id") or generate_local_id(ID_PREFIXES[collection])
            db.add(model(**values))
            ids.append(values["id"])
        return ids

    def _add_sync(self, collection: str, documents: Iterable[Document]) -> List[str]:
        with self.session_factory() as db:
            try:
                ids = self._add_rows(db, collection, documents)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise LocalStoreError(str(exc)) from exc
        return ids

    def _update_sync(self, collection: str, record_id: str, patch: Document) -> None:
        model = self._model(collection)
        with self.session_factory() as db:
            try:
                db_obj = db.query(model).filter(model.id == record_id).first()
                if db_obj is None:
                    raise DatabaseNotFoundError(f"{collection} record {record_id} not found")
                values = self._to_columns(model, patch)
                values.pop("id", None)
                for field, value in values.items():
                    setattr(db_obj, field, value)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise LocalStoreError(str(exc)) from exc

    def _delete_sync(self, collection: str, record_id: str) -> None:
        model = self._model(collection)
        with self.session_factory() as db:
            try:
                db_obj = db.query(model).filter(model.id == record_id).first()
                if db_obj:
                    db.delete(db_obj)
                    db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise LocalStoreError(str(exc)) from exc

    def _clear_sync(self, collection: str) -> int:
        model = self._model(collection)
        with self.session_factory() as db:
            try:
                count = db.query(model).delete()
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise LocalStoreError(str(exc)) from exc
        return count

    def _replace_sync(self, records: Dict[str, List[Document]]) -> Dict[str, int]:
        counts = {}
        with self.session_factory() as db:
            try:
                for collection, documents in records.items():
                    db.query(self._model(collection)).delete()
                    counts[collection] = len(self._add_rows(db, collection, documents))
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise LocalStoreError(str(exc)) from exc
        return counts

    # =====================================================================
    # DOCUMENT STORE API
    # =====================================================================

    async def list(self, collection: str) -> List[Document]:
        return await asyncio.to_thread(self._query_sync, collection, None, None)

    async def query(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> List[Document]:
        return await asyncio.to_thread(self._query_sync, collection, where, order_by)

    async def get(self, collection: str, record_id: str) -> Optional[Document]:
        return await asyncio.to_thread(self._get_sync, collection, record_id)

    async def create(self, collection: str, data: Document) -> str:
        """Insert one document; an "id" already present in data is kept."""
        ids = await asyncio.to_thread(self._add_sync, collection, [data])
        return ids[0]

    async def update(self, collection: str, record_id: str, patch: Document) -> None:
        await asyncio.to_thread(self._update_sync, collection, record_id, patch)

    async def delete(self, collection: str, record_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, collection, record_id)

    async def subscribe(self, collection: str, callback: SnapshotCallback) -> Unsubscribe:
        # No change feed on device: one snapshot, nothing to cancel
        await notify(callback, await self.list(collection))
        return _noop

    # =====================================================================
    # BULK OPERATIONS (backup import / clear-all)
    # =====================================================================

    async def replace_all(self, records: Dict[str, List[Document]]) -> Dict[str, int]:
        """
        Swap the contents of each given collection for the given documents,
        ids preserved. Runs as one transaction: on failure nothing changes.
        """
        return await asyncio.to_thread(self._replace_sync, records)

    async def clear(self, collection: str) -> int:
        """Delete every document in the collection; returns the count removed."""
        return await asyncio.to_thread(self._clear_sync, collection)
