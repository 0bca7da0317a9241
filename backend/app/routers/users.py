"""
User Router
===========
GET /api/v1/user/profile — Current user's profile.
PUT /api/v1/user/profile — Rename the current user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_current_user
from app.models.user import ProfileResponse, ProfileUpdate, ProfileUpdatedResponse, User
from app.services.gateway import SupabaseGateway, UserNotFoundError, get_gateway

router = APIRouter(prefix="/api/v1/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse, summary="Get profile")
async def get_profile(user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse(user=user)


@router.put("/profile", response_model=ProfileUpdatedResponse, summary="Update profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    gateway: SupabaseGateway = Depends(get_gateway),
) -> ProfileUpdatedResponse:
    try:
        updated = await gateway.update_profile(user.id, body.name)
    except UserNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User profile not found", "code": "user_not_found"},
        ) from exc
    return ProfileUpdatedResponse(user=updated)
