"""
JWT Token Utilities

Access tokens identify the user calling the API; `sub` carries the user id.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from config.settings import settings

ACCESS_TOKEN_TYPE = "access"


class TokenError(Exception):
    """Token validation error."""
    pass


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for `data` (which should include 'sub').

    Tokens expire after `settings.jwt_expire_minutes` unless
    `expires_delta` says otherwise.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)

    claims = {
        **data,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> dict:
    """
    Return the claims of a valid, unexpired token of the given type.

    Raises:
        TokenError: If the signature, expiry or type check fails
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise TokenError(f"Invalid token: {str(e)}")

    if claims.get("type") != token_type:
        raise TokenError(f"Invalid token type. Expected {token_type}")

    return claims
