import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from retirewise.core.config import Base, SessionLocal, engine, settings
from retirewise.core.exceptions import register_exception_handlers
from retirewise.core.session import DataSession
import retirewise.models  # noqa: F401  (registers tables on Base.metadata)
from retirewise.crud import LocalStore, RemoteStore, create_remote_client
from retirewise.services import BackupService, MigrationService, UnifiedDB
from retirewise.api.routers import (
    chat,
    conversations,
    data,
    insights,
    journal,
    migration,
    projects,
    session,
    time_logs,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("retirewise")

# =====================================================================
# DATABASE INITIALIZATION
# =====================================================================

Base.metadata.create_all(bind=engine)

# =====================================================================
# STORES & SERVICES
# =====================================================================

local_store = LocalStore(SessionLocal)
remote_client = create_remote_client(settings)


def remote_factory(user_id: str) -> RemoteStore:
    return RemoteStore(
        remote_client, user_id, subscribe_interval=settings.REMOTE_SUBSCRIBE_INTERVAL
    )


data_session = DataSession(local_store, remote_factory)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await remote_client.aclose()
    await app.state.chat_client.aclose()
    logger.info("HTTP clients closed")


# =====================================================================
# CREATE APP
# =====================================================================

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Projects, time tracking, journal and AI advisor with local/cloud sync",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.unified_db = UnifiedDB(data_session)
app.state.migration_service = MigrationService(
    local_store, remote_factory, record_timeout=settings.MIGRATION_RECORD_TIMEOUT
)
app.state.backup_service = BackupService(local_store)
app.state.chat_client = httpx.AsyncClient(timeout=settings.CHAT_TIMEOUT)

# =====================================================================
# CORS MIDDLEWARE - MUST BE FIRST!
# =====================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

register_exception_handlers(app)

# =====================================================================
# HEALTH CHECK (before routers)
# =====================================================================


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# =====================================================================
# ROUTES
# =====================================================================

app.include_router(session.router)
app.include_router(projects.router)
app.include_router(time_logs.router)
app.include_router(journal.router)
app.include_router(insights.router)
app.include_router(conversations.router)
app.include_router(migration.router)
app.include_router(data.router)
app.include_router(chat.router)

# =====================================================================
# ROOT ENDPOINT
# =====================================================================


@app.get("/")
def root():
    """API root endpoint."""
    return {
        "message": "Welcome to RetireWise API",
        "version": "1.0.0",
        "backend": "remote" if app.state.unified_db.is_remote else "local",
        "docs": "/docs",
        "endpoints": {
            "session": "/session",
            "projects": "/projects",
            "time_logs": "/time-logs",
            "journal": "/journal",
            "insights": "/insights",
            "conversations": "/conversations",
            "migration": "/migration",
            "data": "/data",
            "chat": "/api/chat",
        },
    }
