# api/routers/insights.py
from typing import List

from fastapi import APIRouter, Depends, status

from retirewise.api.deps import get_unified_db
from retirewise.schemas import InsightCreate, InsightRead
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.get("", response_model=List[InsightRead], summary="Insights not yet dismissed")
async def list_active_insights(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_active_insights()


@router.get("/all", response_model=List[InsightRead], summary="All insights, dismissed included")
async def list_all_insights(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_all_insights()


@router.post(
    "",
    response_model=InsightRead,
    status_code=status.HTTP_201_CREATED,
    summary="Store a generated insight",
)
async def create_insight(insight_in: InsightCreate, db: UnifiedDB = Depends(get_unified_db)):
    return await db.create_insight(insight_in)


@router.post("/{insight_id}/dismiss", response_model=InsightRead, summary="Dismiss insight")
async def dismiss_insight(insight_id: str, db: UnifiedDB = Depends(get_unified_db)):
    """Dismissed insights are hidden, not deleted."""
    return await db.dismiss_insight(insight_id)
