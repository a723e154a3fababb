"""
Authentication Package

Bearer-token (JWT) authentication of API callers.
"""

from api.auth.jwt import TokenError, create_access_token, verify_token
from api.auth.dependencies import get_current_user_id

__all__ = [
    "TokenError",
    "create_access_token",
    "verify_token",
    "get_current_user_id",
]
