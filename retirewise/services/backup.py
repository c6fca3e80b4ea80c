# services/backup.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError as PydanticValidationError

from retirewise.core.exceptions import ValidationError
from retirewise.crud.base import (
    CONVERSATIONS,
    INSIGHTS,
    JOURNAL_ENTRIES,
    PROJECTS,
    SETTINGS,
    TIME_LOGS,
)
from retirewise.crud.local_store import LocalStore
from retirewise.schemas import (
    BACKUP_VERSION,
    BackupImportResult,
    ConversationRead,
    JournalEntryRead,
    ProjectRead,
)
from retirewise.schemas.time_log import TimeLogBase

logger = logging.getLogger(__name__)

CLEAR_CONFIRMATION = "YES"


class _TimeLogRecord(TimeLogBase):
    id: str


class _SettingRecord(BaseModel):
    id: str
    data: Dict[str, Any] = {}


# Backup key -> (store collection, record schema, result field)
IMPORT_PLAN = (
    (PROJECTS, ProjectRead, "projects"),
    (TIME_LOGS, _TimeLogRecord, "time_logs"),
    (JOURNAL_ENTRIES, JournalEntryRead, "journal_entries"),
    (CONVERSATIONS, ConversationRead, "conversations"),
    (SETTINGS, _SettingRecord, "settings"),
)

EXPORT_COLLECTIONS = (PROJECTS, TIME_LOGS, JOURNAL_ENTRIES, CONVERSATIONS, SETTINGS)

# Settings survive a clear-all
CLEARED_COLLECTIONS = (PROJECTS, TIME_LOGS, JOURNAL_ENTRIES, CONVERSATIONS, INSIGHTS)


class BackupService:
    """Export, import and wipe of the on-device store."""

    def __init__(self, local_store: LocalStore):
        self.local_store = local_store

    async def export_data(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for collection in EXPORT_COLLECTIONS:
            document[collection] = await self.local_store.list(collection)
        document["exportDate"] = datetime.now(timezone.utc).isoformat()
        document["version"] = BACKUP_VERSION
        return jsonable_encoder(document)

    def _validate(self, document: Any) -> Dict[str, List[Dict[str, Any]]]:
        """Check the whole backup before anything is deleted."""
        if not isinstance(document, dict) or not document.get("exportDate") or "projects" not in document:
            raise ValidationError("Invalid backup file format")

        records: Dict[str, List[Dict[str, Any]]] = {}
        for collection, schema, _ in IMPORT_PLAN:
            if collection not in document or document[collection] is None:
                continue
            items = document[collection]
            if not isinstance(items, list):
                raise ValidationError(f"Invalid backup file format: {collection} must be a list")
            try:
                records[collection] = [schema.model_validate(item).model_dump() for item in items]
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid {collection} record in backup: {e}") from e

            seen = set()
            for record in records[collection]:
                if record["id"] in seen:
                    raise ValidationError(
                        f"Invalid backup file format: duplicate {collection} id {record['id']!r}"
                    )
                seen.add(record["id"])
        return records

    async def import_data(self, document: Any) -> BackupImportResult:
        """Replace the device data with the contents of a backup."""
        records = self._validate(document)
        result = BackupImportResult()

        counts = await self.local_store.replace_all(records)
        for collection, _, field in IMPORT_PLAN:
            setattr(result, field, counts.get(collection, 0))

        logger.info(f"Imported backup from {document['exportDate']}: {result.model_dump()}")
        return result

    async def clear_all_data(self, confirmation: str) -> Dict[str, int]:
        if confirmation != CLEAR_CONFIRMATION:
            raise ValidationError(f'Type {CLEAR_CONFIRMATION} to confirm deletion')
        removed = {}
        for collection in CLEARED_COLLECTIONS:
            removed[collection] = await self.local_store.clear(collection)
        logger.info(f"All local data cleared: {removed}")
        return removed
