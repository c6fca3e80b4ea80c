# models/conversation.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, JSON
from retirewise.core.config import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(64), primary_key=True, index=True)

    title = Column(String(255), nullable=True)
    messages = Column(JSON, nullable=False, default=list)  # [{role: user/assistant, content: ...},..]

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)
