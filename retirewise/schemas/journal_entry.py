# schemas/journal_entry.py
import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import Tags, reject_null


class EntryType(str, enum.Enum):
    reflection = "reflection"
    learning = "learning"
    decision = "decision"
    milestone = "milestone"
    struggle = "struggle"
    idea = "idea"
    general = "general"


class Sentiment(str, enum.Enum):
    positive = "positive"
    neutral = "neutral"
    negative = "negative"


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("content must not be empty")
    return value


class JournalEntryBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(None, max_length=255)
    content: str = Field(..., min_length=1)
    project_id: Optional[str] = None
    entry_type: EntryType = EntryType.reflection
    sentiment: Optional[Sentiment] = None
    tags: Tags = Field(default_factory=list)
    favorite: bool = False

    content_not_blank = field_validator("content")(_require_text)


class JournalEntryCreate(JournalEntryBase):
    pass


class JournalEntryUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    project_id: Optional[str] = None
    entry_type: Optional[EntryType] = None
    sentiment: Optional[Sentiment] = None
    tags: Optional[Tags] = None
    favorite: Optional[bool] = None

    content_not_blank = field_validator("content")(_require_text)
    required_not_null = field_validator("content", "entry_type", "favorite")(reject_null)


class JournalEntryRead(JournalEntryBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_local_id: Optional[str] = None
