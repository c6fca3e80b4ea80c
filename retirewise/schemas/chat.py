# schemas/chat.py
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .common import JSONList


class ChatRequest(BaseModel):
    """Body accepted by the chat relay and forwarded upstream."""
    messages: JSONList = Field(..., description="Conversation so far: [{role, content}, ...]")
    tools: Optional[JSONList] = None
    system: Optional[Any] = Field(None, description="System prompt (text or content blocks)")


class ChatErrorResponse(BaseModel):
    error: str
