# schemas/conversation.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import JSONList, reject_null


class ConversationBase(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    messages: JSONList = Field(
        default_factory=list,
        description="List of message objects: {role: str, content: ...}",
    )


class ConversationCreate(ConversationBase):
    pass


class ConversationUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    messages: Optional[JSONList] = None

    messages_not_null = field_validator("messages")(reject_null)


class ConversationRead(ConversationBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_local_id: Optional[str] = None

    @field_validator("messages", mode="before")
    @classmethod
    def _messages_default(cls, value):
        return value or []
