"""
Bearer token verification.

Tokens are issued by the identity service; this module only verifies them and
reads the claims the engine needs (user_id, tenant_id, role).
"""

import logging
from typing import Any, Dict, Optional

import jwt

from booking_engine.core.config import settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("user_id", "tenant_id", "role")


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify a JWT and return its payload.

    Args:
        token: Encoded JWT from the Authorization header

    Returns:
        The payload, or None if the token is invalid, expired or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc.__class__.__name__)
        return None

    if any(not payload.get(claim) for claim in REQUIRED_CLAIMS):
        logger.info("Rejected bearer token: missing claims")
        return None
    return payload
