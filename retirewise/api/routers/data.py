# api/routers/data.py
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from retirewise.api.deps import get_backup_service, get_unified_db
from retirewise.core.exceptions import ValidationError
from retirewise.schemas import BackupImportResult, ClearDataRequest
from retirewise.services import BackupService, UnifiedDB

router = APIRouter(prefix="/data", tags=["Data Management"])


# =====================================================================
# BACKUP
# =====================================================================

@router.get("/export", summary="Download a backup of device data")
async def export_data(backup: BackupService = Depends(get_backup_service)):
    document = await backup.export_data()
    filename = f"retirewise-backup-{datetime.now(timezone.utc).date().isoformat()}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=BackupImportResult, summary="Restore a backup")
async def import_data(
    document: Dict[str, Any] = Body(...),
    confirm: bool = Query(False, description="Must be true: existing device data is replaced"),
    backup: BackupService = Depends(get_backup_service),
):
    if not confirm:
        raise ValidationError("This will replace all current data; pass confirm=true to import")
    return await backup.import_data(document)


@router.post("/clear", summary="Permanently delete all device data")
async def clear_data(
    body: ClearDataRequest, backup: BackupService = Depends(get_backup_service)
):
    removed = await backup.clear_all_data(body.confirm)
    return {"cleared": removed}


# =====================================================================
# SETTINGS
# =====================================================================

@router.get("/settings", summary="Device settings")
async def get_settings(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_settings()


@router.patch("/settings", summary="Update device settings")
async def update_settings(
    patch: Dict[str, Any] = Body(...), db: UnifiedDB = Depends(get_unified_db)
):
    return await db.update_settings(patch)
