"""
Booking & SeatHold models — seats reserved for one showtime.

A hold keeps seats for one user until ``expires_at``; confirming it turns
the held seats into a booking and removes the hold.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (JSON, Column, DateTime, Float, ForeignKey, Integer,
                        String, UniqueConstraint)
from sqlalchemy.orm import relationship

from cineghar.db.base import Base, TimestampMixin

BOOKING_STATUSES = ("confirmed", "cancelled")


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    showtime_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("showtimes.id"), nullable=False, index=True
    )
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seats: list[str] = Column(JSON, nullable=False)  # type: ignore[assignment]
    total_price: float = Column(Float, nullable=False)  # type: ignore[assignment]  # NPR
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="confirmed", server_default="confirmed"
    )  # confirmed | cancelled

    showtime = relationship("Showtime")


class SeatHold(TimestampMixin, Base):
    __tablename__ = "seat_holds"
    __table_args__ = (UniqueConstraint("showtime_id", "user_id", name="uq_seat_holds_showtime_user"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    showtime_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seats: list[str] = Column(JSON, nullable=False)  # type: ignore[assignment]
    expires_at: datetime = Column(DateTime(timezone=True), nullable=False, index=True)  # type: ignore[assignment]

    def is_live(self, now: datetime) -> bool:
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires > now
