# retirewise/schemas/__init__.py

from .project import (
    ProjectStatus,
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    ACTIVE_STATUSES,
)
from .time_log import (
    TimeLogCreate,
    TimeLogUpdate,
    TimeLogRead,
    DailySummary,
    ProjectHours,
)
from .journal_entry import (
    EntryType,
    Sentiment,
    JournalEntryCreate,
    JournalEntryUpdate,
    JournalEntryRead,
)
from .insight import InsightCreate, InsightRead
from .conversation import ConversationCreate, ConversationUpdate, ConversationRead
from .migration import MigrationError, MigrationResult, MigrationStatus
from .backup import BACKUP_VERSION, BackupImportResult, ClearDataRequest
from .chat import ChatRequest, ChatErrorResponse
from .session import SessionUpdate, SessionRead


__all__ = [
    # Projects
    "ProjectStatus", "ProjectCreate", "ProjectUpdate", "ProjectRead", "ACTIVE_STATUSES",

    # Time logs
    "TimeLogCreate", "TimeLogUpdate", "TimeLogRead", "DailySummary", "ProjectHours",

    # Journal
    "EntryType", "Sentiment", "JournalEntryCreate", "JournalEntryUpdate", "JournalEntryRead",

    # Insights & conversations
    "InsightCreate", "InsightRead",
    "ConversationCreate", "ConversationUpdate", "ConversationRead",

    # Migration & backup
    "MigrationError", "MigrationResult", "MigrationStatus",
    "BACKUP_VERSION", "BackupImportResult", "ClearDataRequest",

    # Chat relay & session
    "ChatRequest", "ChatErrorResponse",
    "SessionUpdate", "SessionRead",
]
