# models/time_log.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, DateTime
from retirewise.core.config import Base


class TimeLog(Base):
    __tablename__ = "time_logs"

    id = Column(String(64), primary_key=True, index=True)

    # No foreign key: a log may outlive its project
    project_id = Column(String(64), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    duration = Column(Float, nullable=False)  # hours
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)
