"""
Calendar authorization routes.

Usage:
    GET /api/calendar/{provider}/auth-url - {"auth_url": ...} for google or outlook
"""

from fastapi import APIRouter, Depends, HTTPException, status

from viah.auth.verify import auth_dependency
from viah.features.calendar.service import (
    ProviderNotConfiguredError,
    UnknownProviderError,
    create_auth_url,
)
from viah.services.oauth_state_service import OAuthStateError

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


@router.get("/{provider}/auth-url")
async def calendar_auth_url(provider: str, claims: dict = Depends(auth_dependency)):
    try:
        auth_url = await create_auth_url(provider, claims["sub"])
    except UnknownProviderError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (ProviderNotConfiguredError, OAuthStateError) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    return {"auth_url": auth_url, "provider": provider}
