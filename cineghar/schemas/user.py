"""Pydantic schemas for registration, login, password reset and user CRUD."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from cineghar.schemas.common import CamelModel, PageBase

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_DOB_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

Role = Literal["user", "admin"]


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if not _EMAIL_RE.match(v):
        raise ValueError("Invalid email address")
    return v


def _check_dob(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    v = v.strip()
    if not _DOB_RE.match(v):
        raise ValueError("Date of birth must be YYYY-MM-DD")
    return v


class _PasswordPair(CamelModel):
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


# ── Registration / login ────────────────────────────────────────────
class UserRegister(_PasswordPair):
    name: str = Field(min_length=1, max_length=200)
    email: str
    date_of_birth: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("date_of_birth")
    @classmethod
    def _dob(cls, v: str | None) -> str | None:
        return _check_dob(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class AdminUserCreate(UserRegister):
    role: Role = "user"


class UserLogin(CamelModel):
    email: str
    password: str = Field(min_length=6)
    remember_me: bool = False

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)


class ForgotPasswordRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)


class ResetPasswordRequest(_PasswordPair):
    token: str = Field(min_length=1)


# ── Updates ─────────────────────────────────────────────────────────
class UserUpdate(CamelModel):
    """Fields a user may change on their own profile."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    date_of_birth: str | None = None
    image_url: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return None if v is None else _normalise_email(v)

    @field_validator("date_of_birth")
    @classmethod
    def _dob(cls, v: str | None) -> str | None:
        return _check_dob(v)


class AdminUserUpdate(UserUpdate):
    role: Role | None = None


# ── Responses ───────────────────────────────────────────────────────
class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: str
    date_of_birth: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginResponse(CamelModel):
    success: bool = True
    message: str = "Login successful"
    data: UserRead
    token: str


class UserPage(PageBase[UserRead]):
    total_users: int
