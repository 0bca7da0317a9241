"""
Crisis Resource Schemas
=======================
Per-country crisis lines and support links shown next to the chat.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CrisisLine(BaseModel):
    icon: str = Field(..., description="Icon name: 'phone' or 'comment'.")
    text: str
    tel: str = Field(
        default="",
        description="Dialable number. Empty for text-only or non-numeric lines.",
    )
    desc: str


class ResourceLink(BaseModel):
    url: str
    text: str


class CountryResources(BaseModel):
    code: str
    name: str
    crisis: list[CrisisLine]
    therapist: ResourceLink
    resources: ResourceLink


class CountryListResponse(BaseModel):
    default_country: str
    countries: dict[str, str] = Field(..., description="Country code → display name.")
