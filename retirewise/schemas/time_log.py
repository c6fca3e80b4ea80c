# schemas/time_log.py
from datetime import date as date_type, datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import reject_null


class TimeLogBase(BaseModel):
    project_id: str = Field(..., min_length=1)
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration: float = Field(..., gt=0, description="Hours worked")
    notes: Optional[str] = None


class TimeLogCreate(TimeLogBase):
    pass


class TimeLogUpdate(BaseModel):
    project_id: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    duration: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None

    required_not_null = field_validator("project_id", "date", "duration")(reject_null)


class TimeLogRead(TimeLogBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    # Imported or migrated logs are not re-validated against gt=0
    duration: float = Field(..., ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_local_id: Optional[str] = None

    # Denormalized from the owning project on read
    project_name: Optional[str] = None
    project_color: Optional[str] = None
    project_icon: Optional[str] = None


# ----------------------
# Daily summary
# ----------------------

class ProjectHours(BaseModel):
    project_id: str
    project_name: str
    hours: float


class DailySummary(BaseModel):
    date: date_type
    total_hours: float
    log_count: int
    by_project: List[ProjectHours] = []
