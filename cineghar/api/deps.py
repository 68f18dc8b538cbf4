"""
FastAPI dependencies — database session, auth guards and pagination.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Callable
from typing import Optional

from fastapi import Cookie, Depends, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.core.exceptions import AppError, ForbiddenError
from cineghar.core.security import decode_access_token
from cineghar.db.session import async_session_factory
from cineghar.models.user import User
from cineghar.schemas.common import PaginationParams

logger = logging.getLogger(__name__)

# auto_error=False so the cookie can be checked when the header is missing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class CredentialsError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth dependencies ───────────────────────────────────────────────
def _extract_token(header_token: str | None, cookie_token: str | None) -> str | None:
    # Priority: Header > Cookie
    if header_token:
        return header_token
    if cookie_token:
        if cookie_token.startswith("Bearer "):
            return cookie_token.split(" ", 1)[1]
        return cookie_token
    return None


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""
    final_token = _extract_token(token, access_token)
    if not final_token:
        raise CredentialsError("Unauthorized: token missing")

    payload = decode_access_token(final_token)
    if payload is None:
        raise CredentialsError("Unauthorized: invalid or expired token")

    user_id: str | None = payload.get("sub")
    if user_id is None or not user_id.isdigit():
        raise CredentialsError("Unauthorized: invalid token subject")

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Token presented for missing user %s", user_id)
        raise CredentialsError("Unauthorized: user not found")
    return user


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Only allow admin role to proceed."""
    if current_user.role != "admin":
        raise ForbiddenError("Forbidden: admin privileges required")
    return current_user


async def require_self_or_admin(
    user_id: int,
    current_user: User = Depends(get_current_user),
) -> User:
    """The target user themselves, or any admin."""
    if current_user.id != user_id and current_user.role != "admin":
        raise ForbiddenError("Forbidden: can only update own profile or as admin")
    return current_user


# ── Pagination ──────────────────────────────────────────────────────
def pagination(default_limit: int = 10) -> Callable[..., PaginationParams]:
    def _params(
        page: int = Query(default=1, ge=1),
        limit: int = Query(default=default_limit, ge=1, le=100),
    ) -> PaginationParams:
        return PaginationParams(page=page, limit=limit)

    return _params
