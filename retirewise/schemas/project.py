# schemas/project.py
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import Hours, StrList, Tags, reject_null


class ProjectStatus(str, enum.Enum):
    planning = "planning"
    active = "active"
    paused = "paused"
    completed = "completed"
    archived = "archived"


# Statuses shown in the "active projects" view
ACTIVE_STATUSES = {ProjectStatus.active.value, ProjectStatus.planning.value}


# =====================================================================
# A. BASE SCHEMAS
# =====================================================================

class ProjectBase(BaseModel):
    """Fields a user edits directly."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1, max_length=255)
    type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    goals: StrList = Field(default_factory=list)
    motivation: Optional[str] = None
    tags: Tags = Field(default_factory=list)
    color: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=16)
    status: ProjectStatus = ProjectStatus.active
    target_hours: Optional[float] = Field(None, ge=0)


# =====================================================================
# B. CREATE / UPDATE SCHEMAS
# =====================================================================

class ProjectCreate(ProjectBase):
    """Schema for creating a project. Hour totals start at zero."""
    pass


class ProjectUpdate(BaseModel):
    """
    Partial update. The derived fields (total_hours_logged, last_worked_at)
    are maintained from time logs and cannot be patched here.
    """
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    goals: Optional[List[str]] = None
    motivation: Optional[str] = None
    tags: Optional[Tags] = None
    color: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=16)
    status: Optional[ProjectStatus] = None
    target_hours: Optional[float] = Field(None, ge=0)

    required_not_null = field_validator("name", "status")(reject_null)


# =====================================================================
# C. READ SCHEMAS
# =====================================================================

class ProjectRead(ProjectBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    total_hours_logged: Hours = 0.0
    last_worked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    original_local_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
