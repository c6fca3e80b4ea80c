# schemas/insight.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Flag


class InsightBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    insight_type: Optional[str] = Field(None, max_length=50)
    project_id: Optional[str] = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class InsightCreate(InsightBase):
    """Written by the insight generator; users only read and dismiss."""
    pass


class InsightRead(InsightBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    # Local rows hold 0/1, cloud documents hold true/false
    dismissed: Flag = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_local_id: Optional[str] = None
