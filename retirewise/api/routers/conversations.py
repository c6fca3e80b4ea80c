# api/routers/conversations.py
from typing import List

from fastapi import APIRouter, Depends, status

from retirewise.api.deps import get_unified_db
from retirewise.core.exceptions import NotFoundError
from retirewise.schemas import ConversationCreate, ConversationRead, ConversationUpdate
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/conversations", tags=["Conversations"])


@router.get("", response_model=List[ConversationRead], summary="List advisor conversations")
async def list_conversations(db: UnifiedDB = Depends(get_unified_db)):
    return await db.get_all_conversations()


@router.post(
    "",
    response_model=ConversationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Start conversation",
)
async def create_conversation(
    conversation_in: ConversationCreate, db: UnifiedDB = Depends(get_unified_db)
):
    return await db.create_conversation(conversation_in)


@router.get("/{conversation_id}", response_model=ConversationRead, summary="Get conversation")
async def get_conversation(conversation_id: str, db: UnifiedDB = Depends(get_unified_db)):
    conversation = await db.get_conversation(conversation_id)
    if conversation is None:
        raise NotFoundError(f"Conversation {conversation_id} not found")
    return conversation


@router.patch("/{conversation_id}", response_model=ConversationRead, summary="Update conversation")
async def update_conversation(
    conversation_id: str,
    conversation_in: ConversationUpdate,
    db: UnifiedDB = Depends(get_unified_db),
):
    return await db.update_conversation(conversation_id, conversation_in)


@router.delete(
    "/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete conversation"
)
async def delete_conversation(conversation_id: str, db: UnifiedDB = Depends(get_unified_db)):
    await db.delete_conversation(conversation_id)
