"""
Offer model — promotional codes redeemable at checkout.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from cineghar.db.base import Base, TimestampMixin

OFFER_TYPES = ("percentage_discount", "fixed_discount", "bonus_points")


class Offer(TimestampMixin, Base):
    __tablename__ = "offers"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    code: str = Column(String(50), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    type: str = Column(String(30), nullable=False)  # type: ignore[assignment]
    discount_percent: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    discount_amount: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    bonus_points: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    min_spend: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    start_date: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    end_date: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]
    max_redemptions: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    per_user_limit: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
