"""
Request Dependencies
====================
Bearer-token auth and per-request chat state, injected with FastAPI
``Depends``. Auth runs before any handler body: a request without a valid
token never reaches the responder, the tracker or the store.

    no / malformed Authorization header  → 401 auth_required
    token rejected by Supabase Auth       → 403 auth_invalid
    token valid but no profile row        → 404 user_not_found
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.config import get_settings
from app.models.user import User
from app.services.conversation import ChatContext, get_reply_scheduler
from app.services.gateway import (
    InvalidTokenError,
    SupabaseGateway,
    UserNotFoundError,
    get_gateway,
)
from app.services.responder import get_response_selector

logger = logging.getLogger(__name__)


async def get_current_user(
    authorization: Optional[str] = Header(default=None, description="Bearer token from Supabase Auth"),
    gateway: SupabaseGateway = Depends(get_gateway),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        logger.debug("Rejected request without a bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Access token required", "code": "auth_required"},
        )

    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Empty bearer token", "code": "auth_required"},
        )

    try:
        return await gateway.authenticate(token)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Invalid or expired token", "code": "auth_invalid"},
        ) from exc
    except UserNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User profile not found", "code": "user_not_found"},
        ) from exc


async def get_chat_context(
    user: User = Depends(get_current_user),
    gateway: SupabaseGateway = Depends(get_gateway),
) -> ChatContext:
    return ChatContext(
        user_id=user.id,
        gateway=gateway,
        selector=get_response_selector(),
        scheduler=get_reply_scheduler(),
        settings=get_settings(),
    )
