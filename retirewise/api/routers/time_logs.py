# api/routers/time_logs.py
from typing import List

from fastapi import APIRouter, Depends, status

from retirewise.api.deps import get_unified_db
from retirewise.core.exceptions import NotFoundError
from retirewise.schemas import DailySummary, TimeLogCreate, TimeLogRead, TimeLogUpdate
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/time-logs", tags=["Time Logs"])


@router.get("", response_model=List[TimeLogRead], summary="List time logs with project details")
async def list_time_logs(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_all_time_logs()


@router.get("/today", response_model=List[TimeLogRead], summary="Time logs dated today")
async def list_today_time_logs(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_today_time_logs()


@router.get("/today/summary", response_model=DailySummary, summary="Hours logged today")
async def today_summary(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_today_summary()


@router.post(
    "",
    response_model=TimeLogRead,
    status_code=status.HTTP_201_CREATED,
    summary="Log time against a project",
)
async def create_time_log(log_in: TimeLogCreate, db: UnifiedDB = Depends(get_unified_db)):
    """Adds the duration to the project's total hours and marks it last worked on."""
    return await db.create_time_log(log_in)


@router.get("/{log_id}", response_model=TimeLogRead, summary="Get time log")
async def get_time_log(log_id: str, db: UnifiedDB = Depends(get_unified_db)):
    log = await db.get_time_log(log_id)
    if log is None:
        raise NotFoundError(f"Time log {log_id} not found")
    return log


@router.patch("/{log_id}", response_model=TimeLogRead, summary="Update time log")
async def update_time_log(
    log_id: str, log_in: TimeLogUpdate, db: UnifiedDB = Depends(get_unified_db)
):
    """Changing duration or project moves the hours between project totals."""
    return await db.update_time_log(log_id, log_in)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete time log")
async def delete_time_log(log_id: str, db: UnifiedDB = Depends(get_unified_db)):
    await db.delete_time_log(log_id)
