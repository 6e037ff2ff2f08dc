"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from contest_api.database import get_db
from contest_api.models.db.user import User
from contest_api.services.auth_service import (
    extend_session,
    get_active_session,
    get_user_by_id,
    verify_token,
)

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_user(token: str, db: DbSession) -> tuple[User | None, str | None]:
    """Resolve a bearer token to an active user.

    Returns the user, or None and the reason it was rejected.
    """
    payload = verify_token(token)
    if payload is None:
        return None, "Invalid or expired token"

    # Check if session is still active
    jti = payload.get("jti")
    if jti:
        session = get_active_session(db, jti)
        if session is None:
            return None, "Session expired or invalidated"
        # Extend session on activity
        extend_session(db, session)

    user_id = payload.get("sub")
    if user_id is None:
        return None, "Invalid token payload"

    user = get_user_by_id(db, int(user_id))
    if user is None:
        return None, "User not found"
    if not user.is_active:
        return None, "User is inactive"
    return user, None


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user, reason = _resolve_user(credentials.credentials, db)
    if user is None:
        raise _unauthorized(reason or "Not authenticated")
    return user


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> User | None:
    """Get the current user if authenticated, otherwise None (guest).

    This dependency does not raise an exception if not authenticated.
    """
    if credentials is None:
        return None
    user, _ = _resolve_user(credentials.credentials, db)
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user, requiring the ADMIN role.

    Raises:
        HTTPException: 403 for non-admin users.
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
