# schemas/migration.py
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MigrationError(BaseModel):
    """One record that could not be copied to the cloud."""
    type: str
    id: Optional[str] = None
    error: str


class MigrationResult(BaseModel):
    projects: int = 0
    time_logs: int = 0
    journal_entries: int = 0
    insights: int = 0
    conversations: int = 0
    errors: List[MigrationError] = Field(default_factory=list)
    # local project id -> cloud project id
    project_id_map: Dict[str, str] = Field(default_factory=dict)


class MigrationStatus(BaseModel):
    has_migrated: bool
    project_count: int
