# models/setting.py

from sqlalchemy import Column, String, JSON
from retirewise.core.config import Base


class Setting(Base):
    __tablename__ = "settings"

    id = Column(String(64), primary_key=True)  # e.g. "user_settings"
    data = Column(JSON, nullable=False, default=dict)
