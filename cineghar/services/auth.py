"""
Auth service — registration, login, profile updates and password reset.

State machine of an account:
    anonymous --register--> registered --login--> authenticated
    (forgot-password issues a single-use reset token; redeeming it
    replaces the password and invalidates the token)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.core.config import settings
from cineghar.core.exceptions import (BadRequestError, ConflictError,
                                      NotFoundError, UnauthorizedError)
from cineghar.core.security import (create_access_token, generate_reset_token,
                                    get_password_hash, hash_reset_token,
                                    verify_password)
from cineghar.models.user import User
from cineghar.schemas.common import as_utc
from cineghar.schemas.user import UserLogin, UserRegister
from cineghar.services.crud import apply_changes
from cineghar.services.email import email_service

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "If an account exists with this email, you will receive password reset instructions."
)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


async def create_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    password: str,
    date_of_birth: str | None = None,
    role: str = "user",
    image_url: str | None = None,
) -> User:
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("Email already in use")

    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        date_of_birth=date_of_birth,
        role=role,
        image_url=image_url,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created %s account %s (id=%d)", role, email, user.id)
    return user


async def register_user(db: AsyncSession, body: UserRegister) -> User:
    """Self-service sign-up; always creates a plain ``user`` role."""
    return await create_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        date_of_birth=body.date_of_birth,
    )


async def authenticate(db: AsyncSession, body: UserLogin) -> tuple[User, str]:
    user = await get_user_by_email(db, body.email)
    if user is None:
        raise NotFoundError("User")
    if not verify_password(body.password, user.hashed_password):
        logger.warning("Failed login for %s", body.email)
        raise UnauthorizedError("Invalid credentials")

    token = create_access_token(user.id, email=user.email, role=user.role)
    logger.info("User %d logged in", user.id)
    return user, token


async def update_user(db: AsyncSession, user: User, changes: dict[str, Any]) -> User:
    """Merge ``changes`` into ``user``; email must stay unique."""
    new_email = changes.get("email")
    if new_email and new_email != user.email:
        existing = await get_user_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise ConflictError("Email already in use")

    apply_changes(user, changes)

    await db.commit()
    await db.refresh(user)
    logger.info("Updated user %d (%s)", user.id, ", ".join(sorted(changes)) or "no fields")
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    user = await get_user(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %d (%s)", user_id, user.email)


# ── Password reset ──────────────────────────────────────────────────
async def request_password_reset(db: AsyncSession, email: str) -> str | None:
    """Issue a reset token for ``email``.

    Returns the raw token (for callers that need it, e.g. tests) or ``None``
    when no such account exists. The HTTP layer answers identically in both
    cases, and mail delivery failures are only logged.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for unknown email")
        return None

    token = generate_reset_token()
    user.reset_password_token = hash_reset_token(token)
    user.reset_password_expires = datetime.now(timezone.utc) + timedelta(
        minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
    )
    await db.commit()

    try:
        await email_service.send_password_reset(user.email, token)
    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to send reset password email to user %d: %s", user.id, exc)
    return token


async def reset_password(db: AsyncSession, token: str, new_password: str) -> User:
    result = await db.execute(
        select(User).where(User.reset_password_token == hash_reset_token(token))
    )
    user = result.scalar_one_or_none()
    expires = as_utc(user.reset_password_expires) if user else None
    if user is None or expires is None or expires < datetime.now(timezone.utc):
        raise BadRequestError("Invalid or expired reset token")

    user.hashed_password = get_password_hash(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    await db.commit()
    await db.refresh(user)
    logger.info("Password reset completed for user %d", user.id)
    return user
