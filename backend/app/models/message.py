"""
Chat Message Schemas
====================
Messages are append-only. Once stored they are never edited; the only
mutation a user can make is deleting their whole history.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.models.mood import MoodLabel, MoodTag


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    model_config = {"frozen": True}

    id: str
    text: str
    sender: Sender
    timestamp: datetime
    mood: Optional[MoodTag] = None


class MessageCreate(BaseModel):
    """Payload for POST /api/v1/messages."""

    model_config = {"str_strip_whitespace": True}

    text: str = Field(..., min_length=1, max_length=2000)
    sender: Sender
    mood: Optional[MoodLabel] = Field(
        default=None,
        description="Mood selected when the message was sent. User messages only.",
    )


class MessageSavedResponse(BaseModel):
    message: str = "Message saved"
    data: Message


class MessageListResponse(BaseModel):
    messages: list[Message]


class ChatRequest(BaseModel):
    """Payload for POST /api/v1/messages/ai-response.

    The reply depends on the text alone. Extra fields such as a mood sent
    by older clients are ignored.
    """

    model_config = {"str_strip_whitespace": True}

    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    response: str
    category: str = Field(..., description="Keyword category that picked the reply.")
    message_id: str
