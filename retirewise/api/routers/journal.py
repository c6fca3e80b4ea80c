# api/routers/journal.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from retirewise.api.deps import get_unified_db
from retirewise.core.exceptions import NotFoundError
from retirewise.schemas import JournalEntryCreate, JournalEntryRead, JournalEntryUpdate
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/journal", tags=["Journal"])


@router.get("", response_model=List[JournalEntryRead], summary="List journal entries")
async def list_entries(
    project_id: Optional[str] = Query(None, description="Only entries about this project"),
    db: UnifiedDB = Depends(get_unified_db),
):
    if project_id:
        return await db.get_project_journal_entries(project_id)
    return await db.get_all_journal_entries()


@router.post(
    "",
    response_model=JournalEntryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Write journal entry",
)
async def create_entry(entry_in: JournalEntryCreate, db: UnifiedDB = Depends(get_unified_db)):
    return await db.create_journal_entry(entry_in)


@router.get("/{entry_id}", response_model=JournalEntryRead, summary="Get journal entry")
async def get_entry(entry_id: str, db: UnifiedDB = Depends(get_unified_db)):
    entry = await db.get_journal_entry(entry_id)
    if entry is None:
        raise NotFoundError(f"Journal entry {entry_id} not found")
    return entry


@router.patch("/{entry_id}", response_model=JournalEntryRead, summary="Update journal entry")
async def update_entry(
    entry_id: str, entry_in: JournalEntryUpdate, db: UnifiedDB = Depends(get_unified_db)
):
    return await db.update_journal_entry(entry_id, entry_in)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete journal entry")
async def delete_entry(entry_id: str, db: UnifiedDB = Depends(get_unified_db)):
    await db.delete_journal_entry(entry_id)
