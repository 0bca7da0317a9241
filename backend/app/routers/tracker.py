"""
Tracker Router
==============
GET /api/v1/tracker — Mood chart, trend and advice for the current user.

Computed on every call (see services.mood_tracker) from the user's own
messages, up to settings.tracker_history_limit of the most recent ones.
Bot replies are not fetched.

Returns in one round-trip:

  points:        One entry per day with at least one mood-tagged user
                 message. Days without tags are omitted, not interpolated.
  total_days:    len(points).
  average_mood:  Mean of the daily averages, 0 when there are no points.
  summary:       "😊 Great" … "😢 Struggling".
  trend:         improving | declining | stable | insufficient_data.
  advice:        Tiered message + suggestions, or null with no points.

``utc_offset_minutes`` is the browser's offset from UTC (e.g. 180 for
UTC+3). Message timestamps are shifted by it before grouping, so a
message sent at 01:00 local time counts toward the local day.
"""

from __future__ import annotations

from datetime import timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_chat_context
from app.models.message import Sender
from app.models.mood import TrackerResponse
from app.services.conversation import ChatContext
from app.services.mood_tracker import build_tracker

router = APIRouter(prefix="/api/v1/tracker", tags=["tracker"])


@router.get(
    "",
    response_model=TrackerResponse,
    summary="Get mood tracker view",
    responses={401: {"description": "Authentication required"}},
)
async def get_tracker(
    utc_offset_minutes: Optional[int] = Query(default=None, ge=-840, le=840),
    ctx: ChatContext = Depends(get_chat_context),
) -> TrackerResponse:
    messages = await ctx.gateway.list_messages(
        ctx.user_id,
        ctx.settings.tracker_history_limit,
        sender=Sender.USER,
    )
    tz = timezone(timedelta(minutes=utc_offset_minutes)) if utc_offset_minutes is not None else None
    return build_tracker(messages, tz=tz)
