# models/journal_entry.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON
from retirewise.core.config import Base


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(String(64), primary_key=True, index=True)

    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    project_id = Column(String(64), nullable=True, index=True)
    entry_type = Column(String(20), nullable=False, default="reflection")
    sentiment = Column(String(20), nullable=True)
    tags = Column(JSON, nullable=True)
    favorite = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)
