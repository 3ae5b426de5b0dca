"""
app/core/security.py

Purpose: Caller identity

- Verifies JWT access tokens issued by the account service
- Accepts "Authorization: Bearer <token>" or the legacy "x-auth-token" header
- Exposes the user id as a FastAPI dependency
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Dict, Optional

import jwt
from fastapi import Depends, Header, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger

logger = get_logger(__name__)

security = HTTPBearer(description="Access Token (Bearer)", auto_error=False)


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None, **claims: Any) -> str:
    """
    Issues a token in the same shape the login endpoint produces.

    Args:
        user_id: Owner of the token
        expires_in: Token lifetime (defaults to JWT_EXPIRES_HOURS)
        **claims: Extra claims merged into the payload

    Returns:
        Encoded JWT
    """
    lifetime = expires_in if expires_in is not None else timedelta(hours=settings.JWT_EXPIRES_HOURS)
    payload: Dict[str, Any] = {
        "user": {"id": user_id},
        "exp": datetime.now(timezone.utc) + lifetime,
        **claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_user_id(token: str) -> str:
    """
    Extracts the user id from an access token.

    Raises:
        AuthenticationError: If the token is expired, malformed or has no user id
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Token is not valid") from e

    user = payload.get("user")
    user_id = user.get("id") if isinstance(user, dict) else None
    user_id = user_id or payload.get("sub")

    if not user_id:
        raise AuthenticationError("Token has no user id")

    return str(user_id)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    x_auth_token: Optional[str] = Header(default=None, alias="x-auth-token"),
) -> str:
    """
    FastAPI dependency resolving the authenticated user id.
    """
    token = credentials.credentials if credentials and credentials.credentials else x_auth_token

    if not token:
        raise AuthenticationError("No token, authorization denied")

    try:
        return decode_user_id(token)
    except AuthenticationError as e:
        logger.info(f"Rejected access token: {e.message}")
        raise


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
