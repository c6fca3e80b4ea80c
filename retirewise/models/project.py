# models/project.py

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, DateTime, JSON
from retirewise.core.config import Base


class Project(Base):
    __tablename__ = "projects"

    # Local ids are synthesized strings: project_<epoch-ms>_<suffix>
    id = Column(String(64), primary_key=True, index=True)

    # ---- Description ----
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    goals = Column(JSON, nullable=True)        # ["Complete MVP", ...]
    motivation = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)         # ["tech", "AI", ...]
    color = Column(String(20), nullable=True)
    icon = Column(String(16), nullable=True)
    status = Column(String(20), nullable=False, default="active")

    # ---- Progress ----
    target_hours = Column(Float, nullable=True)
    total_hours_logged = Column(Float, nullable=False, default=0.0)
    last_worked_at = Column(DateTime, nullable=True)

    # ---- Metadata ----
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)
