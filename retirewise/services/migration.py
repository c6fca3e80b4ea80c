# services/migration.py
import asyncio
import logging
from typing import Callable, Dict, Optional

from retirewise.core.exceptions import RemoteStoreError
from retirewise.crud.base import (
    CONVERSATIONS,
    INSIGHTS,
    JOURNAL_ENTRIES,
    PROJECTS,
    TIME_LOGS,
    Document,
    DocumentStore,
)
from retirewise.schemas import MigrationError, MigrationResult, MigrationStatus

logger = logging.getLogger(__name__)


# (collection, result counter, error label), in migration order.
# Projects come first so later collections can point at their cloud ids.
MIGRATION_PLAN = (
    (PROJECTS, "projects", "project"),
    (TIME_LOGS, "time_logs", "time_log"),
    (JOURNAL_ENTRIES, "journal_entries", "journal_entry"),
    (INSIGHTS, "insights", "insight"),
    (CONVERSATIONS, "conversations", "conversation"),
)

# Collections whose project_id must be rewritten to the cloud project id
PROJECT_REFERENCES = {TIME_LOGS, JOURNAL_ENTRIES, INSIGHTS}


class MigrationService:
    """
    One-way copy of everything on the device into a user's cloud store.

    Records are copied one at a time. A record that fails (or does not
    finish within record_timeout seconds) is reported in the result and
    the copy carries on; only a failure to read the device store aborts.
    Re-running copies everything again.
    """

    def __init__(
        self,
        local_store: DocumentStore,
        remote_factory: Callable[[str], DocumentStore],
        record_timeout: Optional[float] = 30.0,
    ):
        self.local_store = local_store
        self.remote_factory = remote_factory
        self.record_timeout = record_timeout

    async def migrate_all(self, user_id: str) -> MigrationResult:
        logger.info(f"Starting migration to cloud for user {user_id}")
        remote = self.remote_factory(user_id)
        result = MigrationResult()

        for collection, counter, label in MIGRATION_PLAN:
            logger.info(f"Migrating {collection}...")
            id_map = await self._migrate_collection(
                collection, label, remote, result,
                project_ids=result.project_id_map if collection in PROJECT_REFERENCES else None,
            )
            setattr(result, counter, len(id_map))
            if collection == PROJECTS:
                result.project_id_map = id_map
            logger.info(f"Migrated {len(id_map)} {collection}")

        logger.info(
            f"Migration complete: {result.projects} projects, {result.time_logs} time logs, "
            f"{result.journal_entries} journal entries, {result.insights} insights, "
            f"{result.conversations} conversations, {len(result.errors)} errors"
        )
        return result

    async def _migrate_collection(
        self,
        collection: str,
        label: str,
        remote: DocumentStore,
        result: MigrationResult,
        project_ids: Optional[Dict[str, str]] = None,
    ) -> Dict[str, str]:
        """Copy one collection; returns local id -> cloud id for the records written."""
        documents = await self.local_store.list(collection)
        id_map: Dict[str, str] = {}

        for document in documents:
            local_id = document.get("id")
            data = self._prepare(document, project_ids)
            try:
                new_id = await asyncio.wait_for(
                    remote.create(collection, data), timeout=self.record_timeout
                )
            except asyncio.TimeoutError:
                message = f"timed out after {self.record_timeout}s"
                logger.error(f"Error migrating {label} {local_id}: {message}")
                result.errors.append(MigrationError(type=label, id=local_id, error=message))
            except Exception as e:
                logger.error(f"Error migrating {label} {local_id}: {e}")
                result.errors.append(MigrationError(type=label, id=local_id, error=str(e)))
            else:
                id_map[local_id] = new_id

        return id_map

    @staticmethod
    def _prepare(document: Document, project_ids: Optional[Dict[str, str]]) -> Document:
        data = {key: value for key, value in document.items() if key != "id"}
        data["original_local_id"] = document.get("id")

        if project_ids is not None and data.get("project_id"):
            local_project_id = data["project_id"]
            if local_project_id in project_ids:
                data["project_id"] = project_ids[local_project_id]
            else:
                logger.warning(
                    f"Project {local_project_id} was not migrated; "
                    f"keeping its local id on record {document.get('id')}"
                )
        return data

    async def check_migration_status(self, user_id: str) -> MigrationStatus:
        """Approximate: a user with any cloud project counts as migrated."""
        try:
            projects = await self.remote_factory(user_id).list(PROJECTS)
        except RemoteStoreError as e:
            logger.warning(f"Error checking migration status: {e}")
            return MigrationStatus(has_migrated=False, project_count=0)
        return MigrationStatus(has_migrated=len(projects) > 0, project_count=len(projects))
