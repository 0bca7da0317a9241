"""
Messages Router
===============
GET    /api/v1/messages              — Chat history, oldest first.
POST   /api/v1/messages              — Store a user or bot message.
POST   /api/v1/messages/ai-response  — Get (and store) the scripted reply.
DELETE /api/v1/messages              — Wipe the user's chat history.

The client stores the user's own message with POST /messages (including
the selected mood tag) and then asks for a reply. The reply route never
stores the user's text, only the bot's answer.

History is append-only: there is no edit or single-message delete.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import get_chat_context
from app.models.message import (
    ChatRequest,
    ChatResponse,
    MessageCreate,
    MessageListResponse,
    MessageSavedResponse,
    Sender,
)
from app.models.mood import MoodTag
from app.services.conversation import ChatContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get(
    "",
    response_model=MessageListResponse,
    summary="Get chat history",
    responses={401: {"description": "Authentication required"}},
)
async def list_messages(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    ctx: ChatContext = Depends(get_chat_context),
) -> MessageListResponse:
    messages = await ctx.gateway.list_messages(
        ctx.user_id,
        limit or ctx.settings.message_history_limit,
    )
    return MessageListResponse(messages=messages)


@router.post(
    "",
    response_model=MessageSavedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a message",
    responses={
        201: {"description": "Message saved"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (empty text, unknown mood, mood on a bot message)"},
    },
)
async def save_message(
    body: MessageCreate,
    ctx: ChatContext = Depends(get_chat_context),
) -> MessageSavedResponse:
    if body.mood is not None and body.sender != Sender.USER:
        raise HTTPException(
            status_code=422,
            detail={"message": "Only user messages can carry a mood", "code": "invalid_mood"},
        )

    mood = MoodTag.for_label(body.mood) if body.mood is not None else None
    message = await ctx.gateway.append_message(ctx.user_id, body.text, body.sender, mood)
    return MessageSavedResponse(data=message)


@router.post(
    "/ai-response",
    response_model=ChatResponse,
    summary="Get a scripted reply",
    description=(
        "Classifies the message by keyword, picks one of the category's "
        "canned replies and stores it as a bot message. Crisis keywords "
        "always take priority over every other category."
    ),
    responses={
        401: {"description": "Authentication required"},
        409: {"description": "Reply cancelled because the history was cleared"},
        422: {"description": "Empty message"},
    },
)
async def ai_response(
    body: ChatRequest,
    ctx: ChatContext = Depends(get_chat_context),
) -> ChatResponse:
    result = await ctx.reply_to(body.message)
    if result is None:
        logger.info("Reply for user %s dropped: history cleared while pending", ctx.user_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Chat history was cleared before the reply", "code": "reply_cancelled"},
        )

    category, message = result
    return ChatResponse(response=message.text, category=category.value, message_id=message.id)


@router.delete(
    "",
    summary="Delete all messages",
    responses={401: {"description": "Authentication required"}},
)
async def delete_messages(ctx: ChatContext = Depends(get_chat_context)) -> dict:
    await ctx.clear_history()
    return {"message": "All messages deleted"}
