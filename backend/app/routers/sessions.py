"""
Sessions Router
===============
GET  /api/v1/sessions — Recent chat sessions, newest first.
POST /api/v1/sessions — Record a new session for the sidebar.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.dependencies import get_chat_context
from app.models.session import SessionCreate, SessionCreatedResponse, SessionListResponse
from app.services.conversation import ChatContext

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


@router.get("", response_model=SessionListResponse, summary="List recent sessions")
async def list_sessions(ctx: ChatContext = Depends(get_chat_context)) -> SessionListResponse:
    sessions = await ctx.gateway.list_sessions(ctx.user_id, ctx.settings.session_list_limit)
    return SessionListResponse(sessions=sessions)


@router.post(
    "",
    response_model=SessionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a session",
)
async def create_session(
    body: SessionCreate,
    ctx: ChatContext = Depends(get_chat_context),
) -> SessionCreatedResponse:
    session = await ctx.gateway.create_session(ctx.user_id, body.mood, body.preview)
    return SessionCreatedResponse(data=session)
