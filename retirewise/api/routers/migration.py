# api/routers/migration.py
from fastapi import APIRouter, Depends

from retirewise.api.deps import get_migration_service, require_user_id
from retirewise.schemas import MigrationResult, MigrationStatus
from retirewise.services import MigrationService

router = APIRouter(prefix="/migration", tags=["Cloud Migration"])


@router.post("", response_model=MigrationResult, summary="Copy device data to the cloud")
async def migrate(
    user_id: str = Depends(require_user_id),
    migration: MigrationService = Depends(get_migration_service),
):
    """
    Copy every project, time log, journal entry, insight and conversation
    from the device into the signed-in user's cloud store.

    - Device data is not deleted
    - Records that fail are listed in `errors`; the rest are still copied
    - Running it twice copies everything twice
    """
    return await migration.migrate_all(user_id)


@router.get("/status", response_model=MigrationStatus, summary="Has this user migrated")
async def migration_status(
    user_id: str = Depends(require_user_id),
    migration: MigrationService = Depends(get_migration_service),
):
    return await migration.check_migration_status(user_id)
