"""
Cinema hall model — a screening venue in one of the supported cities.
"""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, Float, Integer, String
from sqlalchemy.orm import relationship

from cineghar.db.base import Base, TimestampMixin

CITIES = ("Kathmandu", "Pokhara", "Chitwan")


class CinemaHall(TimestampMixin, Base):
    __tablename__ = "cinema_halls"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    city: str = Column(String(50), nullable=False, index=True)  # type: ignore[assignment]
    location: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    rating: float = Column(Float, nullable=False, default=0)  # type: ignore[assignment]
    facilities: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]

    showtimes = relationship("Showtime", back_populates="hall", passive_deletes=True)
