"""
Auth endpoints — register, login, profile, password reset.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_current_user, get_db, require_self_or_admin
from cineghar.core.config import settings
from cineghar.models.user import User
from cineghar.schemas.common import Envelope, MessageResponse
from cineghar.schemas.user import (ForgotPasswordRequest, LoginResponse,
                                   ResetPasswordRequest, UserLogin, UserRead,
                                   UserRegister, UserUpdate)
from cineghar.services import auth as auth_service
from cineghar.services.uploads import save_image

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

_REMEMBER_ME_SECONDS = 30 * 24 * 60 * 60
_SESSION_SECONDS = 24 * 60 * 60


def _set_auth_cookie(response: Response, token: str, remember_me: bool) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=_REMEMBER_ME_SECONDS if remember_me else _SESSION_SECONDS,
    )


async def _profile_changes(
    name: str | None,
    email: str | None,
    date_of_birth: str | None,
    image: UploadFile | None,
) -> dict:
    """Validate multipart profile fields and store the optional image."""
    submitted = {
        key: value
        for key, value in {"name": name, "email": email, "date_of_birth": date_of_birth}.items()
        if value is not None
    }
    try:
        body = UserUpdate.model_validate(submitted)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    changes = body.model_dump(exclude_unset=True)
    if image is not None and image.filename:
        changes["image_url"] = await save_image(image)
    return changes


@router.post("/register", response_model=Envelope[UserRead], status_code=201)
async def register(
    body: UserRegister,
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    user = await auth_service.register_user(db, body)
    return Envelope(message="Register Successful", data=UserRead.model_validate(user))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate with email/password. Token in body and HttpOnly cookie."""
    user, token = await auth_service.authenticate(db, body)
    _set_auth_cookie(response, token, body.remember_me)
    return LoginResponse(data=UserRead.model_validate(user), token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the auth cookie and end the session."""
    response.delete_cookie("access_token")
    return MessageResponse(message="Logged out")


@router.get("/whoami", response_model=Envelope[UserRead])
async def whoami(
    current_user: User = Depends(get_current_user),
) -> Envelope[UserRead]:
    return Envelope(
        message="User profile fetched successfully",
        data=UserRead.model_validate(current_user),
    )


@router.put("/update-profile", response_model=Envelope[UserRead])
async def update_profile(
    name: str | None = Form(default=None),
    email: str | None = Form(default=None),
    date_of_birth: str | None = Form(default=None, alias="dateOfBirth"),
    image: UploadFile | None = File(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    changes = await _profile_changes(name, email, date_of_birth, image)
    user = await auth_service.update_user(db, current_user, changes)
    return Envelope(
        message="User profile updated successfully",
        data=UserRead.model_validate(user),
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    # Same answer whether or not the account exists
    await auth_service.request_password_reset(db, body.email)
    return MessageResponse(message=auth_service.FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await auth_service.reset_password(db, body.token, body.password)
    return MessageResponse(message="Password has been reset successfully.")


@router.put("/{user_id}", response_model=Envelope[UserRead])
async def update_user_by_id(
    user_id: int,
    name: str | None = Form(default=None),
    email: str | None = Form(default=None),
    date_of_birth: str | None = Form(default=None, alias="dateOfBirth"),
    image: UploadFile | None = File(default=None),
    _actor: User = Depends(require_self_or_admin),
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    """Update a user by id (the user themselves or an admin), image optional."""
    target = await auth_service.get_user(db, user_id)
    changes = await _profile_changes(name, email, date_of_birth, image)
    user = await auth_service.update_user(db, target, changes)
    return Envelope(message="User updated successfully", data=UserRead.model_validate(user))
