"""
User & Auth Schemas
===================
Passwords are handled by Supabase Auth and never stored or returned by
this service. The ``users`` table holds only the public profile.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class User(BaseModel):
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None
    last_active: Optional[datetime] = None


class RegisterRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, v: str) -> str:
        return v.lower()


class AuthResponse(BaseModel):
    message: str
    token: Optional[str] = Field(
        default=None,
        description=(
            "Bearer token for the Authorization header. Null after registration "
            "when the project requires email confirmation before first login."
        ),
    )
    user: User


class ProfileUpdate(BaseModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=100)


class ProfileResponse(BaseModel):
    user: User


class ProfileUpdatedResponse(BaseModel):
    message: str = "Profile updated"
    user: User
