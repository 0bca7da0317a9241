"""
Chat Session Schemas
====================
A session is a sidebar entry: the mood a conversation started in and a
short preview of its first message.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    mood: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Mood label, or 'Not specified' when none was selected.",
    )
    preview: Optional[str] = Field(default=None, max_length=200)


class ChatSession(BaseModel):
    id: str
    mood: str
    preview: Optional[str] = None
    message_count: int = 0
    timestamp: datetime


class SessionCreatedResponse(BaseModel):
    message: str = "Session created"
    data: ChatSession


class SessionListResponse(BaseModel):
    sessions: list[ChatSession]
