# schemas/backup.py
from pydantic import BaseModel, Field

BACKUP_VERSION = "1.0"


class BackupImportResult(BaseModel):
    projects: int = 0
    time_logs: int = 0
    journal_entries: int = 0
    conversations: int = 0
    settings: int = 0


class ClearDataRequest(BaseModel):
    confirm: str = Field(..., description='Must be the literal "YES"')
