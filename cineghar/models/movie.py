"""
Movie & Showtime models — the catalogue and its screenings.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import (JSON, Boolean, Column, DateTime, Float, ForeignKey,
                        Index, Integer, String, Text)
from sqlalchemy.orm import relationship

from cineghar.db.base import Base, TimestampMixin


class Movie(TimestampMixin, Base):
    __tablename__ = "movies"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(300), nullable=False, index=True)  # type: ignore[assignment]
    description: str = Column(Text, nullable=False)  # type: ignore[assignment]
    genre: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    duration: int = Column(Integer, nullable=False)  # type: ignore[assignment]  # minutes
    rating: float = Column(Float, nullable=False)  # type: ignore[assignment]  # 0-10
    poster_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    release_date: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]

    showtimes = relationship("Showtime", back_populates="movie", passive_deletes=True)


class Showtime(TimestampMixin, Base):
    __tablename__ = "showtimes"
    __table_args__ = (Index("ix_showtimes_hall_start", "hall_id", "start_time"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    movie_id: int = Column(Integer, ForeignKey("movies.id"), nullable=False)  # type: ignore[assignment]
    hall_id: int = Column(Integer, ForeignKey("cinema_halls.id"), nullable=False)  # type: ignore[assignment]
    start_time: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]

    movie = relationship("Movie", back_populates="showtimes")
    hall = relationship("CinemaHall", back_populates="showtimes")

    def end_time(self, duration_minutes: int) -> datetime:
        start = self.start_time
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        return start + timedelta(minutes=duration_minutes)
