# retirewise/models/__init__.py

from retirewise.core.config import Base

# Import all models here so metadata.create_all sees every table
from .project import Project
from .time_log import TimeLog
from .journal_entry import JournalEntry
from .insight import Insight
from .conversation import Conversation
from .setting import Setting

__all__ = [
    "Base",
    "Project",
    "TimeLog",
    "JournalEntry",
    "Insight",
    "Conversation",
    "Setting",
]
