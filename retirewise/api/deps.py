# api/deps.py
import httpx
from fastapi import Depends, Request

from retirewise.core.exceptions import UnauthorizedError
from retirewise.services import BackupService, MigrationService, UnifiedDB


# =====================================================================
# SERVICE DEPENDENCIES (wired onto app.state in main.py)
# =====================================================================


def get_unified_db(request: Request) -> UnifiedDB:
    return request.app.state.unified_db


def get_migration_service(request: Request) -> MigrationService:
    return request.app.state.migration_service


def get_backup_service(request: Request) -> BackupService:
    return request.app.state.backup_service


def get_chat_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.chat_client


def require_user_id(db: UnifiedDB = Depends(get_unified_db)) -> str:
    """Current signed-in user id; local mode is rejected."""
    user_id = db.current_user_id
    if not user_id:
        raise UnauthorizedError("You must be logged in to use cloud sync")
    return user_id
