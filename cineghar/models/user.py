"""
User model — authentication, role-based access and password reset.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from cineghar.db.base import Base, TimestampMixin

ROLES = ("user", "admin")


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="user",
        server_default="user",
    )  # user | admin
    date_of_birth: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    image_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    # SHA-256 of the emailed token
    reset_password_token: str | None = Column(String(64), nullable=True, index=True)  # type: ignore[assignment]
    reset_password_expires: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
