"""
Bearer token verification
Tokens are issued by the external identity provider; this module only checks them.
"""
import logging
from typing import Optional

import jwt

from redrelief.config import Settings

logger = logging.getLogger(__name__)


class TokenVerificationError(Exception):
    pass


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_token(token: str, settings: Settings) -> dict:
    """Decode and validate ``token``, returning its claims."""
    if not settings.jwt_secret:
        raise TokenVerificationError("Token verification is not configured")
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=settings.jwt_algorithms,
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except jwt.PyJWTError as exc:
        raise TokenVerificationError(str(exc)) from exc
