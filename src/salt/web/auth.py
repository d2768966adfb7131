"""
Bearer-token authentication for FastAPI routes.

Tokens are issued by Supabase Auth on the client; the server only checks
them against the auth service and never signs users in itself.
"""

import logging

from fastapi import Header, HTTPException
from pydantic import BaseModel

from salt.db.client import get_service_client

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthenticatedUser(BaseModel):
    """Signed-in user resolved from an access token."""

    id: str
    email: str | None
    access_token: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def bearer_token(authorization: str | None) -> str:
    """Access token from an "Authorization: Bearer <token>" header value."""
    if not authorization:
        raise _unauthorized("Missing authorization header")
    if not authorization.startswith(BEARER_PREFIX):
        raise _unauthorized("Invalid authorization format")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise _unauthorized("Missing access token")
    return token


async def get_current_user(authorization: str | None = Header(None)) -> AuthenticatedUser:
    """Route dependency: resolve the caller or fail with 401."""
    access_token = bearer_token(authorization)

    try:
        client = await get_service_client()
        response = await client.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Token validation failed: {e}")
        raise _unauthorized("Invalid or expired token") from e

    user = response.user if response else None
    if user is None:
        raise _unauthorized("Invalid or expired token")

    return AuthenticatedUser(id=str(user.id), email=user.email, access_token=access_token)
