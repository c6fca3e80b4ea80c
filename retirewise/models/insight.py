# models/insight.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Integer, DateTime
from retirewise.core.config import Base


class Insight(Base):
    __tablename__ = "insights"

    id = Column(String(64), primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    insight_type = Column(String(50), nullable=True)
    project_id = Column(String(64), nullable=True)

    # Stored as 0/1 so it can be indexed and filtered in SQL
    dismissed = Column(Integer, nullable=False, default=0, index=True)
    generated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)
