"""
Tests for the one-way device to cloud migration.
"""

import pytest

from retirewise.core.exceptions import LocalStoreError
from retirewise.crud import (
    CONVERSATIONS,
    INSIGHTS,
    JOURNAL_ENTRIES,
    PROJECTS,
    SETTINGS,
    TIME_LOGS,
)


async def seed_device(local_store):
    await local_store.create(PROJECTS, {"id": "p1", "name": "Woodworking", "total_hours_logged": 3.0})
    await local_store.create(PROJECTS, {"id": "p2", "name": "Garden"})
    await local_store.create(TIME_LOGS, {"id": "t1", "project_id": "p1", "date": "2026-01-01T10:00:00+00:00", "duration": 2.0})
    await local_store.create(TIME_LOGS, {"id": "t2", "project_id": "p1", "date": "2026-01-02T10:00:00+00:00", "duration": 1.0})
    await local_store.create(TIME_LOGS, {"id": "t3", "project_id": "p2", "date": "2026-01-03T10:00:00+00:00", "duration": 1.0})
    await local_store.create(JOURNAL_ENTRIES, {"id": "j1", "content": "first cut", "project_id": "p1"})
    await local_store.create(JOURNAL_ENTRIES, {"id": "j2", "content": "no project"})
    await local_store.create(INSIGHTS, {"id": "i1", "title": "Rest more"})
    await local_store.create(CONVERSATIONS, {"id": "c1", "title": "Chat", "messages": [{"role": "user", "content": "hi"}]})
    await local_store.create(SETTINGS, {"id": "user_settings", "data": {"theme": "dark"}})


def by_original_id(docs):
    return {doc["original_local_id"]: doc for doc in docs}


class TestMigrateAll:

    @pytest.mark.asyncio
    async def test_copies_every_collection(self, migration_service, local_store, doc_server):
        await seed_device(local_store)

        result = await migration_service.migrate_all("u1")

        assert (result.projects, result.time_logs, result.journal_entries) == (2, 3, 2)
        assert (result.insights, result.conversations) == (1, 1)
        assert result.errors == []
        assert len(doc_server.documents("u1", TIME_LOGS)) == 3
        # Settings stay on the device
        assert doc_server.documents("u1", SETTINGS) == []
        # Device data is untouched
        assert len(await local_store.list(PROJECTS)) == 2

    @pytest.mark.asyncio
    async def test_project_references_remapped(self, migration_service, local_store, doc_server):
        await seed_device(local_store)

        result = await migration_service.migrate_all("u1")

        projects = by_original_id(doc_server.documents("u1", PROJECTS))
        logs = by_original_id(doc_server.documents("u1", TIME_LOGS))
        entries = by_original_id(doc_server.documents("u1", JOURNAL_ENTRIES))
        assert result.project_id_map == {"p1": projects["p1"]["id"], "p2": projects["p2"]["id"]}
        assert logs["t1"]["project_id"] == projects["p1"]["id"]
        assert logs["t3"]["project_id"] == projects["p2"]["id"]
        assert entries["j1"]["project_id"] == projects["p1"]["id"]
        assert entries["j2"]["project_id"] is None

    @pytest.mark.asyncio
    async def test_insight_project_reference_remapped(self, migration_service, local_store, doc_server):
        await local_store.create(PROJECTS, {"id": "p1", "name": "Woodworking"})
        await local_store.create(INSIGHTS, {"id": "i1", "title": "Steady progress", "project_id": "p1"})
        await local_store.create(INSIGHTS, {"id": "i2", "title": "Rest more"})

        result = await migration_service.migrate_all("u1")

        insights = by_original_id(doc_server.documents("u1", INSIGHTS))
        assert insights["i1"]["project_id"] == result.project_id_map["p1"]
        assert insights["i2"]["project_id"] is None

    @pytest.mark.asyncio
    async def test_totals_and_fields_copied(self, migration_service, local_store, doc_server):
        await seed_device(local_store)

        await migration_service.migrate_all("u1")

        project = by_original_id(doc_server.documents("u1", PROJECTS))["p1"]
        conversation = doc_server.documents("u1", CONVERSATIONS)[0]
        assert project["total_hours_logged"] == 3.0
        assert project["name"] == "Woodworking"
        assert conversation["messages"] == [{"role": "user", "content": "hi"}]

    @pytest.mark.asyncio
    async def test_empty_device(self, migration_service):
        result = await migration_service.migrate_all("u1")
        assert result.projects == 0
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_rerun_copies_again(self, migration_service, local_store, doc_server):
        await seed_device(local_store)

        await migration_service.migrate_all("u1")
        await migration_service.migrate_all("u1")

        assert len(doc_server.documents("u1", PROJECTS)) == 4


class TestMigrationFailures:

    @pytest.mark.asyncio
    async def test_failed_records_reported_rest_copied(self, migration_service, local_store, doc_server):
        await seed_device(local_store)
        doc_server.fail_on = lambda collection, body: body.get("original_local_id") in {"t2", "i1"}

        result = await migration_service.migrate_all("u1")

        assert result.time_logs == 2
        assert result.insights == 0
        assert result.journal_entries == 2
        assert [(e.type, e.id) for e in result.errors] == [("time_log", "t2"), ("insight", "i1")]
        assert "500" in result.errors[0].error

    @pytest.mark.asyncio
    async def test_failed_project_leaves_local_reference(self, migration_service, local_store, doc_server):
        await seed_device(local_store)
        doc_server.fail_on = lambda collection, body: body.get("original_local_id") == "p2"

        result = await migration_service.migrate_all("u1")

        assert result.projects == 1
        assert "p2" not in result.project_id_map
        logs = by_original_id(doc_server.documents("u1", TIME_LOGS))
        assert logs["t3"]["project_id"] == "p2"

    @pytest.mark.asyncio
    async def test_stalled_record_times_out(self, migration_service, local_store, doc_server):
        await seed_device(local_store)
        doc_server.stall_on = lambda collection, body: body.get("original_local_id") == "c1"

        result = await migration_service.migrate_all("u1")

        assert result.conversations == 0
        assert result.projects == 2
        assert len(result.errors) == 1
        assert result.errors[0].type == "conversation"
        assert "timed out" in result.errors[0].error

    @pytest.mark.asyncio
    async def test_device_read_failure_aborts(self, migration_service, local_store, monkeypatch):
        original_list = local_store.list

        async def failing_list(collection):
            if collection == JOURNAL_ENTRIES:
                raise LocalStoreError("disk I/O error")
            return await original_list(collection)

        monkeypatch.setattr(local_store, "list", failing_list)

        with pytest.raises(LocalStoreError):
            await migration_service.migrate_all("u1")


class TestMigrationStatus:

    @pytest.mark.asyncio
    async def test_before_and_after(self, migration_service, local_store):
        await seed_device(local_store)

        before = await migration_service.check_migration_status("u1")
        await migration_service.migrate_all("u1")
        after = await migration_service.check_migration_status("u1")

        assert (before.has_migrated, before.project_count) == (False, 0)
        assert (after.has_migrated, after.project_count) == (True, 2)

    @pytest.mark.asyncio
    async def test_cloud_unavailable(self, migration_service, doc_server):
        doc_server.fail_all = True

        status = await migration_service.check_migration_status("u1")

        assert status.has_migrated is False
        assert status.project_count == 0
