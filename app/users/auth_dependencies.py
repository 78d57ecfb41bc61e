# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.users.user_models.user_model import User
from app.users.security import decode_token

# Security schemes
security_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Validates:
    1. JWT signature and expiry
    2. User exists
    3. User has not deactivated the account

    Raises 401 if any validation fails.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")

    # 1. Decode JWT (validates signature + expiry)
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        raise _unauthorized("Invalid or expired access token")

    # 2. Extract user identifier
    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise _unauthorized("Token missing user identifier")

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalars().first()

    if not user:
        raise _unauthorized("User not found")

    # 3. Deactivated accounts lose access immediately
    if not user.is_active:
        raise _unauthorized("Account is not accessible")

    return user


async def get_current_user_id(
    current_user: User = Depends(get_current_user)
) -> int:
    """
    Get just the user ID.
    Convenience wrapper around get_current_user.
    """
    return current_user.id


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Require admin role.
    Raises 403 if user is not admin.
    """
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user
