# services/unified_db.py
"""
Unified data layer.

Every call goes to the cloud store of the signed-in user or, when nobody is
signed in, to the on-device store. The backend is resolved once per call
from the injected DataSession, so logging in or out mid-session takes
effect on the next call and no call is split across stores.

Project hour totals are kept in step with time logs here, identically for
both stores: create adds the duration, update moves the old duration out
and the new one in, delete takes the duration back out (never below zero).
"""

import asyncio
import logging
import weakref
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from retirewise.core.exceptions import NotFoundError
from retirewise.core.session import DataSession
from retirewise.crud.base import (
    CONVERSATIONS,
    INSIGHTS,
    JOURNAL_ENTRIES,
    PROJECTS,
    SETTINGS,
    TIME_LOGS,
    Document,
    DocumentStore,
    Unsubscribe,
    notify,
)
from retirewise.schemas import (
    ACTIVE_STATUSES,
    ConversationCreate,
    ConversationRead,
    ConversationUpdate,
    DailySummary,
    InsightCreate,
    InsightRead,
    JournalEntryCreate,
    JournalEntryRead,
    JournalEntryUpdate,
    ProjectCreate,
    ProjectHours,
    ProjectRead,
    ProjectUpdate,
    TimeLogCreate,
    TimeLogRead,
    TimeLogUpdate,
)

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT_NAME = "Unknown"
USER_SETTINGS_ID = "user_settings"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_local_day(now: Optional[datetime] = None) -> datetime:
    """Local midnight of the day containing now, as an aware datetime."""
    local_now = (now or datetime.now()).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    # Re-resolve the offset: midnight may fall on the other side of a DST change
    return midnight.astimezone()


def _in_window(moment: datetime, start: datetime, end: datetime) -> bool:
    # Naive timestamps are local wall-clock time
    return start <= moment.astimezone() < end


class UnifiedDB:
    """Single entry point for all application data."""

    def __init__(self, session: DataSession):
        self.session = session
        # Keyed by (user, collection, record id); an entry lives while someone holds it
        self._locks = weakref.WeakValueDictionary()

    # =====================================================================
    # SESSION
    # =====================================================================

    def set_current_user(self, user_id: Optional[str]) -> None:
        self.session.set_current_user(user_id)

    @property
    def current_user_id(self) -> Optional[str]:
        return self.session.user_id

    @property
    def is_remote(self) -> bool:
        return self.session.user_id is not None

    def _lock(self, scope: Optional[str], collection: str, record_id: str) -> asyncio.Lock:
        key = (scope, collection, record_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    # =====================================================================
    # PROJECTS
    # =====================================================================

    async def get_all_projects(self) -> List[ProjectRead]:
        _, store = self.session.current()
        return [ProjectRead.model_validate(doc) for doc in await store.list(PROJECTS)]

    async def get_active_projects(self) -> List[ProjectRead]:
        projects = await self.get_all_projects()
        return [p for p in projects if p.status in ACTIVE_STATUSES]

    async def get_project(self, project_id: str) -> Optional[ProjectRead]:
        _, store = self.session.current()
        doc = await store.get(PROJECTS, project_id)
        return ProjectRead.model_validate(doc) if doc else None

    async def create_project(self, obj_in: ProjectCreate) -> ProjectRead:
        _, store = self.session.current()
        data = obj_in.model_dump()
        data.update(total_hours_logged=0.0, last_worked_at=None, created_at=_now())
        project_id = await store.create(PROJECTS, data)
        return ProjectRead(id=project_id, **data)

    async def update_project(self, project_id: str, obj_in: ProjectUpdate) -> ProjectRead:
        scope, store = self.session.current()
        updates = obj_in.model_dump(exclude_unset=True)
        updates["updated_at"] = _now()
        async with self._lock(scope, PROJECTS, project_id):
            await store.update(PROJECTS, project_id, updates)
            doc = await store.get(PROJECTS, project_id)
        if doc is None:
            raise NotFoundError(f"Project {project_id} not found")
        return ProjectRead.model_validate(doc)

    async def delete_project(self, project_id: str) -> None:
        _, store = self.session.current()
        await store.delete(PROJECTS, project_id)

    async def subscribe_to_projects(
        self, callback: Callable[[List[ProjectRead]], Any]
    ) -> Unsubscribe:
        """
        Deliver project lists to callback.

        In cloud mode the callback fires on every change until the returned
        handle is called; on device it fires once.
        """
        _, store = self.session.current()

        async def on_snapshot(documents: List[Document]) -> None:
            await notify(callback, [ProjectRead.model_validate(doc) for doc in documents])

        return await store.subscribe(PROJECTS, on_snapshot)

    # ---- hour totals ----

    async def _adjust_project_hours(
        self,
        scope: Optional[str],
        store: DocumentStore,
        project_id: Optional[str],
        delta: float,
        worked_at: Optional[datetime] = None,
    ) -> None:
        """Add delta hours to a project, flooring at zero. Missing projects are skipped."""
        if not project_id:
            return
        async with self._lock(scope, PROJECTS, project_id):
            project = await store.get(PROJECTS, project_id)
            if project is None:
                logger.debug(f"Project {project_id} not found; skipping hour adjustment")
                return
            current = float(project.get("total_hours_logged") or 0)
            patch: Document = {"total_hours_logged": max(0.0, current + delta)}
            if worked_at is not None:
                patch["last_worked_at"] = worked_at
            await store.update(PROJECTS, project_id, patch)

    # =====================================================================
    # TIME LOGS
    # =====================================================================

    async def get_all_time_logs(self) -> List[TimeLogRead]:
        """All logs, each carrying its project's name, color and icon."""
        _, store = self.session.current()
        logs, projects = await asyncio.gather(store.list(TIME_LOGS), store.list(PROJECTS))
        project_map = {p["id"]: p for p in projects}
        enriched = []
        for log in logs:
            project = project_map.get(log.get("project_id"), {})
            enriched.append(
                TimeLogRead.model_validate(
                    {
                        **log,
                        "project_name": project.get("name") or UNKNOWN_PROJECT_NAME,
                        "project_color": project.get("color"),
                        "project_icon": project.get("icon"),
                    }
                )
            )
        return enriched

    async def get_time_log(self, log_id: str) -> Optional[TimeLogRead]:
        _, store = self.session.current()
        doc = await store.get(TIME_LOGS, log_id)
        return TimeLogRead.model_validate(doc) if doc else None

    async def get_today_time_logs(self, now: Optional[datetime] = None) -> List[TimeLogRead]:
        """Logs dated within [local midnight, local midnight + 24h)."""
        start = start_of_local_day(now)
        end = start + timedelta(hours=24)
        logs = await self.get_all_time_logs()
        return [log for log in logs if _in_window(log.date, start, end)]

    async def get_today_summary(self, now: Optional[datetime] = None) -> DailySummary:
        """Hours logged today, in total and per project."""
        start = start_of_local_day(now)
        logs = await self.get_today_time_logs(now)
        by_project: Dict[str, ProjectHours] = {}
        for log in logs:
            entry = by_project.setdefault(
                log.project_id,
                ProjectHours(project_id=log.project_id, project_name=log.project_name, hours=0.0),
            )
            entry.hours += log.duration
        return DailySummary(
            date=start.date(),
            total_hours=sum(log.duration for log in logs),
            log_count=len(logs),
            by_project=sorted(by_project.values(), key=lambda p: -p.hours),
        )

    async def create_time_log(self, obj_in: TimeLogCreate) -> TimeLogRead:
        scope, store = self.session.current()
        data = obj_in.model_dump()
        data["created_at"] = _now()
        log_id = await store.create(TIME_LOGS, data)
        await self._adjust_project_hours(
            scope, store, data["project_id"], data["duration"], worked_at=data["date"]
        )
        return TimeLogRead(id=log_id, **data)

    async def update_time_log(self, log_id: str, obj_in: TimeLogUpdate) -> TimeLogRead:
        scope, store = self.session.current()
        updates = obj_in.model_dump(exclude_unset=True)
        async with self._lock(scope, TIME_LOGS, log_id):
            old_log = await store.get(TIME_LOGS, log_id)
            if old_log is None:
                raise NotFoundError(f"Time log {log_id} not found")

            await store.update(TIME_LOGS, log_id, {**updates, "updated_at": _now()})

            if updates.get("duration") is not None or updates.get("project_id") is not None:
                new_project_id = updates.get("project_id") or old_log["project_id"]
                new_duration = updates.get("duration") or old_log["duration"]
                await self._adjust_project_hours(
                    scope, store, old_log["project_id"], -float(old_log["duration"])
                )
                await self._adjust_project_hours(
                    scope,
                    store,
                    new_project_id,
                    float(new_duration),
                    worked_at=updates.get("date") or old_log["date"],
                )

            doc = await store.get(TIME_LOGS, log_id)
        return TimeLogRead.model_validate(doc)

    async def delete_time_log(self, log_id: str) -> None:
        scope, store = self.session.current()
        async with self._lock(scope, TIME_LOGS, log_id):
            log = await store.get(TIME_LOGS, log_id)
            await store.delete(TIME_LOGS, log_id)
            if log:
                await self._adjust_project_hours(
                    scope, store, log.get("project_id"), -float(log.get("duration") or 0)
                )

    # =====================================================================
    # JOURNAL
    # =====================================================================

    async def get_all_journal_entries(self) -> List[JournalEntryRead]:
        _, store = self.session.current()
        return [JournalEntryRead.model_validate(doc) for doc in await store.list(JOURNAL_ENTRIES)]

    async def get_project_journal_entries(self, project_id: str) -> List[JournalEntryRead]:
        entries = await self.get_all_journal_entries()
        return [entry for entry in entries if entry.project_id == project_id]

    async def get_journal_entry(self, entry_id: str) -> Optional[JournalEntryRead]:
        _, store = self.session.current()
        doc = await store.get(JOURNAL_ENTRIES, entry_id)
        return JournalEntryRead.model_validate(doc) if doc else None

    async def create_journal_entry(self, obj_in: JournalEntryCreate) -> JournalEntryRead:
        _, store = self.session.current()
        data = obj_in.model_dump()
        data["created_at"] = _now()
        entry_id = await store.create(JOURNAL_ENTRIES, data)
        return JournalEntryRead(id=entry_id, **data)

    async def update_journal_entry(
        self, entry_id: str, obj_in: JournalEntryUpdate
    ) -> JournalEntryRead:
        _, store = self.session.current()
        updates = obj_in.model_dump(exclude_unset=True)
        updates["updated_at"] = _now()
        await store.update(JOURNAL_ENTRIES, entry_id, updates)
        doc = await store.get(JOURNAL_ENTRIES, entry_id)
        if doc is None:
            raise NotFoundError(f"Journal entry {entry_id} not found")
        return JournalEntryRead.model_validate(doc)

    async def delete_journal_entry(self, entry_id: str) -> None:
        _, store = self.session.current()
        await store.delete(JOURNAL_ENTRIES, entry_id)

    # =====================================================================
    # INSIGHTS
    # =====================================================================

    async def get_active_insights(self) -> List[InsightRead]:
        """Insights not yet dismissed, oldest first."""
        _, store = self.session.current()
        docs = await store.query(INSIGHTS, where={"dismissed": False}, order_by="generated_at")
        return [InsightRead.model_validate(doc) for doc in docs]

    async def get_all_insights(self) -> List[InsightRead]:
        _, store = self.session.current()
        return [InsightRead.model_validate(doc) for doc in await store.list(INSIGHTS)]

    async def create_insight(self, obj_in: InsightCreate) -> InsightRead:
        _, store = self.session.current()
        data = obj_in.model_dump()
        data.update(dismissed=False, created_at=_now())
        insight_id = await store.create(INSIGHTS, data)
        return InsightRead(id=insight_id, **data)

    async def dismiss_insight(self, insight_id: str) -> InsightRead:
        _, store = self.session.current()
        await store.update(INSIGHTS, insight_id, {"dismissed": True, "updated_at": _now()})
        doc = await store.get(INSIGHTS, insight_id)
        if doc is None:
            raise NotFoundError(f"Insight {insight_id} not found")
        return InsightRead.model_validate(doc)

    # =====================================================================
    # CONVERSATIONS
    # =====================================================================

    async def get_all_conversations(self) -> List[ConversationRead]:
        _, store = self.session.current()
        return [ConversationRead.model_validate(doc) for doc in await store.list(CONVERSATIONS)]

    async def get_conversation(self, conversation_id: str) -> Optional[ConversationRead]:
        _, store = self.session.current()
        doc = await store.get(CONVERSATIONS, conversation_id)
        return ConversationRead.model_validate(doc) if doc else None

    async def create_conversation(self, obj_in: ConversationCreate) -> ConversationRead:
        _, store = self.session.current()
        data = obj_in.model_dump()
        data["created_at"] = _now()
        conversation_id = await store.create(CONVERSATIONS, data)
        return ConversationRead(id=conversation_id, **data)

    async def update_conversation(
        self, conversation_id: str, obj_in: ConversationUpdate
    ) -> ConversationRead:
        _, store = self.session.current()
        updates = obj_in.model_dump(exclude_unset=True)
        updates["updated_at"] = _now()
        await store.update(CONVERSATIONS, conversation_id, updates)
        doc = await store.get(CONVERSATIONS, conversation_id)
        if doc is None:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return ConversationRead.model_validate(doc)

    async def delete_conversation(self, conversation_id: str) -> None:
        _, store = self.session.current()
        await store.delete(CONVERSATIONS, conversation_id)

    # =====================================================================
    # SETTINGS (device only, never synchronized)
    # =====================================================================

    async def get_settings(self) -> Dict[str, Any]:
        doc = await self.session.local_store.get(SETTINGS, USER_SETTINGS_ID)
        return (doc or {}).get("data") or {}

    async def update_settings(self, patch: Dict[str, Any]) -> Dict[str, Any]:
        store = self.session.local_store
        async with self._lock(None, SETTINGS, USER_SETTINGS_ID):
            doc = await store.get(SETTINGS, USER_SETTINGS_ID)
            data = {**((doc or {}).get("data") or {}), **patch}
            data["updated_at"] = _now().isoformat()
            if doc is None:
                await store.create(SETTINGS, {"id": USER_SETTINGS_ID, "data": data})
            else:
                await store.update(SETTINGS, USER_SETTINGS_ID, {"data": data})
        return data
