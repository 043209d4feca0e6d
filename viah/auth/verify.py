"""
verify.py
---------
Purpose:
    Bearer-token verification for protected routes.

Notes:
    - HS256 with JWT_SECRET when configured, otherwise ES256 keys from JWKS_URL.
    - The JWKS client is created on first use and cached.
    - Provides `auth_dependency` returning the decoded claims
      (`sub`, plus the app-specific `role` and `vendor_id` when present).
"""

from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from viah.config import settings

_security = HTTPBearer()


@lru_cache(maxsize=1)
def _jwk_client() -> PyJWKClient:
    if not settings.JWKS_URL:
        raise RuntimeError("JWKS_URL is not configured")
    return PyJWKClient(settings.JWKS_URL)


def verify_jwt(token: str) -> dict:
    try:
        if settings.JWT_SECRET:
            key, algorithms = settings.JWT_SECRET, ["HS256"]
        else:
            key, algorithms = _jwk_client().get_signing_key_from_jwt(token).key, ["ES256"]
        return jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=settings.JWT_AUDIENCE,
            options={"verify_exp": True},
        )
    except (jwt.PyJWTError, RuntimeError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    token = credentials.credentials
    claims = verify_jwt(token)
    if not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing user ID"
        )
    return claims
