# schemas/session.py
from typing import Literal, Optional

from pydantic import BaseModel, Field


class SessionUpdate(BaseModel):
    """Opaque user id handed over by the authentication provider."""
    user_id: str = Field(..., min_length=1)


class SessionRead(BaseModel):
    user_id: Optional[str] = None
    backend: Literal["local", "remote"]
