"""
JWT Authentication middleware.

Validates the bearer tokens minted by the ride backend at login and
extracts user information.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.config import get_settings
from shared.models import AuthenticatedUser

TOKEN_ALGORITHM = "HS256"

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def decode_token(token: str) -> dict:
    """
    Decode and validate an access token.

    Args:
        token: The JWT token string

    Returns:
        The decoded claims

    Raises:
        AuthError: If the token is invalid, expired or not an access token
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["sub", "email", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {str(e)}")

    if payload.get("type") != "access":
        raise AuthError("Invalid token: not an access token")
    return payload


def get_user_from_payload(payload: dict) -> AuthenticatedUser:
    """
    Convert JWT claims to an AuthenticatedUser model.

    Args:
        payload: Decoded JWT payload

    Returns:
        AuthenticatedUser instance
    """
    return AuthenticatedUser(
        id=payload["sub"],
        email=payload["email"],
        expires_at=payload["exp"] * 1000,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise AuthError("Missing authorization header")

    payload = decode_token(credentials.credentials)
    return get_user_from_payload(payload)


# Type alias for cleaner route definitions
RequireAuth = Depends(get_current_user)
