# app/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from app.core.config import get_settings

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated checkout).
bearer_scheme = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """
    Identity carried by the access token.

    Tokens are issued by the auth service with claims:
      {user_id, role, username}
    """

    user_id: int
    role: str = "user"
    username: str | None = None


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (HS256 using JWT_SECRET)
      - expiration time (exp), when present

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenUser | None:
    """
    Resolve the caller identity from the bearer token.

    Returns:
        TokenUser if a valid token was sent, else None for guests.

    Raises:
        HTTPException(401): if token is malformed or missing user_id.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    raw_user_id = payload.get("user_id")
    if raw_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user_id",
        )

    try:
        user_id = int(raw_user_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user_id in token",
        )

    return TokenUser(
        user_id=user_id,
        role=payload.get("role") or "user",
        username=payload.get("username"),
    )


def require_auth(user: TokenUser | None = Depends(get_current_user)) -> TokenUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if no token was sent.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: TokenUser = Depends(require_auth)) -> TokenUser:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
