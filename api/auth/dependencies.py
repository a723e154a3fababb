"""
Authentication Dependencies

FastAPI dependency resolving the calling user from a bearer token.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.auth.jwt import verify_token, TokenError
from api.middleware.error_handler import AuthenticationError


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """
    Get the authenticated user's ID from the bearer token.

    Raises AuthenticationError when the header is missing or the token is
    invalid, expired, or has no subject.
    """
    if credentials is None:
        raise AuthenticationError("Missing authorization header")

    try:
        payload = verify_token(credentials.credentials, "access")
    except TokenError as e:
        raise AuthenticationError(str(e))

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    # Used by the rate limiter key
    request.state.user_id = user_id
    return user_id
