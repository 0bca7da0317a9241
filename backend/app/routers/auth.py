"""
Auth Router
===========
POST /api/v1/auth/register — Create an account and profile.
POST /api/v1/auth/login    — Exchange email + password for a bearer token.

Both routes are public. Every other route requires the token returned here.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.user import AuthResponse, LoginRequest, RegisterRequest
from app.services.gateway import (
    DuplicateEmailError,
    InvalidCredentialsError,
    SupabaseGateway,
    UserNotFoundError,
    get_gateway,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Email already registered"},
        422: {"description": "Validation error (missing name, bad email, short password)"},
    },
)
async def register(
    body: RegisterRequest,
    gateway: SupabaseGateway = Depends(get_gateway),
) -> AuthResponse:
    try:
        user, token = await gateway.create_user(body.name, body.email, body.password)
    except DuplicateEmailError as exc:
        logger.info("Registration rejected: email already registered")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Email already registered", "code": "email_taken"},
        ) from exc

    return AuthResponse(message="User registered successfully", token=token, user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    body: LoginRequest,
    gateway: SupabaseGateway = Depends(get_gateway),
) -> AuthResponse:
    try:
        user, token = await gateway.verify_credentials(body.email, body.password)
    except (InvalidCredentialsError, UserNotFoundError) as exc:
        # Same response for unknown email, wrong password and missing profile.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid credentials", "code": "invalid_credentials"},
        ) from exc

    return AuthResponse(message="Login successful", token=token, user=user)
