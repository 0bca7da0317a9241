"""
Resources Router
================
GET /api/v1/resources            — Supported countries and the default.
GET /api/v1/resources/{country}  — Crisis lines and links for one country.

Public. Crisis information must be reachable without an account.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.config import get_settings
from app.models.resources import CountryListResponse, CountryResources
from app.services.resources import COUNTRY_RESOURCES, get_country_resources

router = APIRouter(prefix="/api/v1/resources", tags=["resources"])


@router.get("", response_model=CountryListResponse, summary="List supported countries")
async def list_countries() -> CountryListResponse:
    return CountryListResponse(
        default_country=get_settings().default_country,
        countries={code: c.name for code, c in COUNTRY_RESOURCES.items()},
    )


@router.get(
    "/{country}",
    response_model=CountryResources,
    summary="Get crisis resources for a country",
    responses={404: {"description": "Country not supported"}},
)
async def get_resources(country: str) -> CountryResources:
    resources = get_country_resources(country)
    if resources is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "message": f"No resources for country '{country}'",
                "code": "unknown_country",
                "supported": sorted(COUNTRY_RESOURCES),
            },
        )
    return resources
