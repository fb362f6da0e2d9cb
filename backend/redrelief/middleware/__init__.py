"""
Identity dependencies for the API routers.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request

from redrelief.config import Settings
from redrelief.services import TokenVerificationError, bearer_token, verify_token

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def optional_auth(request: Request, settings: Settings = Depends(get_settings)) -> Optional[dict]:
    """Attach the caller's claims when a valid token is sent; carry on anonymously otherwise."""
    request.state.user = None
    token = bearer_token(request.headers.get("authorization"))
    if not token:
        return None
    try:
        request.state.user = verify_token(token, settings)
    except TokenVerificationError as exc:
        logger.warning("Token verification failed: %s", exc)
    return request.state.user


async def require_auth(request: Request, settings: Settings = Depends(get_settings)) -> dict:
    token = bearer_token(request.headers.get("authorization"))
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        claims = verify_token(token, settings)
    except TokenVerificationError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise HTTPException(status_code=403, detail="Invalid token")
    request.state.user = claims
    return claims


async def require_admin(current_user: dict = Depends(require_auth)) -> dict:
    if current_user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


__all__ = [
    'get_settings',
    'optional_auth',
    'require_auth',
    'require_admin',
]
