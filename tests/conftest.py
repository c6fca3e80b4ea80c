"""
Pytest configuration and shared fixtures for RetireWise tests.

The device store runs on a throwaway SQLite file per test. The cloud store
is the real RemoteStore client talking to an in-memory document API through
httpx.MockTransport.
"""

import asyncio
import json
import os
import sys
import tempfile
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

# The app module builds its default engine at import time
os.environ.setdefault(
    "LOCAL_DATABASE_URL",
    f"sqlite:///{Path(tempfile.gettempdir()) / 'retirewise_test_app.db'}",
)

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import httpx
import pytest
from sqlalchemy.orm import sessionmaker

import retirewise.models  # noqa: F401
from retirewise.core.config import Base, build_engine
from retirewise.core.session import DataSession
from retirewise.crud import LocalStore, RemoteStore
from retirewise.services import BackupService, MigrationService, UnifiedDB


# ============================================================================
# Fake cloud document API
# ============================================================================

class FakeDocumentServer:
    """In-memory stand-in for the cloud document API."""

    def __init__(self):
        self.collections: Dict[Tuple[str, str], Dict[str, dict]] = defaultdict(dict)
        self.requests: List[httpx.Request] = []
        # (collection, body) -> True to reject / stall that create
        self.fail_on: Optional[Callable[[str, dict], bool]] = None
        self.stall_on: Optional[Callable[[str, dict], bool]] = None
        self.fail_all = False
        self._next_id = 0

    def documents(self, user_id: str, collection: str) -> List[dict]:
        return list(self.collections[(user_id, collection)].values())

    def seed(self, user_id: str, collection: str, document: dict) -> None:
        self.collections[(user_id, collection)][document["id"]] = dict(document)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_all:
            return httpx.Response(503, json={"error": "unavailable"})

        parts = request.url.path.strip("/").split("/")
        if parts and parts[0] == "v1":
            parts = parts[1:]
        if len(parts) < 3 or parts[0] != "users":
            return httpx.Response(404, json={"error": "no such route"})

        user_id, collection = parts[1], parts[2]
        record_id = parts[3] if len(parts) > 3 else None
        docs = self.collections[(user_id, collection)]

        if request.method == "GET" and record_id is None:
            return httpx.Response(200, json={"documents": list(docs.values())})
        if request.method == "GET":
            if record_id not in docs:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=docs[record_id])
        if request.method == "POST":
            body = json.loads(request.content)
            if self.stall_on and self.stall_on(collection, body):
                await asyncio.sleep(3600)
            if self.fail_on and self.fail_on(collection, body):
                return httpx.Response(500, json={"error": "write rejected"})
            self._next_id += 1
            new_id = f"cloud{self._next_id}"
            docs[new_id] = {**body, "id": new_id}
            return httpx.Response(201, json={"id": new_id})
        if request.method == "PATCH":
            if record_id not in docs:
                return httpx.Response(404, json={"error": "not found"})
            docs[record_id].update(json.loads(request.content))
            return httpx.Response(200, json=docs[record_id])
        if request.method == "DELETE":
            if docs.pop(record_id, None) is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(204)
        return httpx.Response(405)


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the loop until predicate holds."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


# ============================================================================
# Stores
# ============================================================================

@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file."""
    engine = build_engine(f"sqlite:///{tmp_path / 'local.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def local_store(session_factory):
    return LocalStore(session_factory)


@pytest.fixture
def doc_server():
    return FakeDocumentServer()


@pytest.fixture
async def remote_client(doc_server):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(doc_server.handler),
        base_url="http://cloud.test/v1",
    )
    yield client
    await client.aclose()


@pytest.fixture
def remote_factory(remote_client):
    def factory(user_id: str) -> RemoteStore:
        return RemoteStore(remote_client, user_id, subscribe_interval=0.01)

    return factory


# ============================================================================
# Services
# ============================================================================

@pytest.fixture
def data_session(local_store, remote_factory):
    return DataSession(local_store, remote_factory)


@pytest.fixture
def unified_db(data_session):
    return UnifiedDB(data_session)


@pytest.fixture(params=["local", "remote"])
def any_backend_db(request, unified_db):
    """The same UnifiedDB, signed out (device) or signed in (cloud)."""
    if request.param == "remote":
        unified_db.set_current_user("u1")
    return unified_db


@pytest.fixture
def migration_service(local_store, remote_factory):
    return MigrationService(local_store, remote_factory, record_timeout=0.2)


@pytest.fixture
def backup_service(local_store):
    return BackupService(local_store)


# ============================================================================
# HTTP API
# ============================================================================

@pytest.fixture
def app(monkeypatch, unified_db, migration_service, backup_service):
    """The FastAPI app with its services swapped for the test instances."""
    from main import app as fastapi_app

    monkeypatch.setattr(fastapi_app.state, "unified_db", unified_db)
    monkeypatch.setattr(fastapi_app.state, "migration_service", migration_service)
    monkeypatch.setattr(fastapi_app.state, "backup_service", backup_service)
    return fastapi_app


@pytest.fixture
async def api_client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client
