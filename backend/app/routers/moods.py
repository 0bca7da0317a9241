"""
Moods Router
============
GET  /api/v1/moods        — Mood logs in the lookback window, newest first.
POST /api/v1/moods        — Log a mood (independent of chat messages).
GET  /api/v1/moods/stats  — Per-label counts and percentages.

``days`` defaults to settings.mood_window_days (30).
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.dependencies import get_chat_context
from app.models.mood import (
    MOOD_EMOJIS,
    MoodHistoryResponse,
    MoodLogCreate,
    MoodLogCreatedResponse,
    MoodStats,
)
from app.services.conversation import ChatContext

router = APIRouter(prefix="/api/v1/moods", tags=["moods"])


@router.get("", response_model=MoodHistoryResponse, summary="Get mood history")
async def list_moods(
    days: Optional[int] = Query(default=None, ge=1, le=365),
    ctx: ChatContext = Depends(get_chat_context),
) -> MoodHistoryResponse:
    moods = await ctx.gateway.list_mood_logs(ctx.user_id, days or ctx.settings.mood_window_days)
    return MoodHistoryResponse(moods=moods)


@router.post(
    "",
    response_model=MoodLogCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a mood",
    responses={422: {"description": "Mood missing or not one of the allowed labels"}},
)
async def log_mood(
    body: MoodLogCreate,
    ctx: ChatContext = Depends(get_chat_context),
) -> MoodLogCreatedResponse:
    log = await ctx.gateway.append_mood_log(
        ctx.user_id,
        body.mood.value,
        emoji=body.emoji or MOOD_EMOJIS[body.mood.value],
        notes=body.notes,
    )
    return MoodLogCreatedResponse(data=log)


@router.get("/stats", response_model=MoodStats, summary="Get mood statistics")
async def mood_stats(
    days: Optional[int] = Query(default=None, ge=1, le=365),
    ctx: ChatContext = Depends(get_chat_context),
) -> MoodStats:
    return await ctx.gateway.mood_stats(ctx.user_id, days or ctx.settings.mood_window_days)
