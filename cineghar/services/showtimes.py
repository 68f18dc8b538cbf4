"""
Showtime scheduling rules and response shaping.

A showtime occupies its hall from ``start_time`` for the movie's
duration; two active showtimes in the same hall may not overlap.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cineghar.core.exceptions import ConflictError
from cineghar.models.movie import Movie, Showtime
from cineghar.schemas.common import as_utc
from cineghar.schemas.movie import (EntityRef, ExpandedHall, ExpandedMovie,
                                    ShowtimeRead)

logger = logging.getLogger(__name__)

EXPAND = (selectinload(Showtime.movie), selectinload(Showtime.hall))


async def ensure_hall_free(
    db: AsyncSession,
    hall_id: int,
    start: datetime,
    duration_minutes: int,
    exclude_id: int | None = None,
) -> None:
    """Raise ``ConflictError`` if ``[start, start+duration)`` clashes in ``hall_id``."""
    start = as_utc(start)
    end = start + timedelta(minutes=duration_minutes)

    longest = (await db.execute(select(func.max(Movie.duration)))).scalar_one() or 0
    query = (
        select(Showtime, Movie.duration)
        .join(Movie, Showtime.movie_id == Movie.id)
        .where(
            Showtime.hall_id == hall_id,
            Showtime.is_active.is_(True),
            Showtime.start_time < end,
            Showtime.start_time > start - timedelta(minutes=longest),
        )
    )
    if exclude_id is not None:
        query = query.where(Showtime.id != exclude_id)

    for other, other_duration in (await db.execute(query)).all():
        if other.end_time(other_duration) > start:
            logger.info("Hall %d clash: showtime %d overlaps %s", hall_id, other.id, start)
            raise ConflictError(
                f"Hall is already booked by showtime {other.id} starting "
                f"{as_utc(other.start_time).isoformat()}"
            )


async def load_expanded(db: AsyncSession, showtime_id: int) -> Showtime | None:
    """Fetch a showtime with its movie and hall, bypassing the identity map."""
    return await db.get(Showtime, showtime_id, options=list(EXPAND), populate_existing=True)


def to_read(showtime: Showtime, expand: bool = True) -> ShowtimeRead:
    """Build the response; related rows are either expanded or referenced."""
    if expand:
        movie = ExpandedMovie.model_validate(showtime.movie)
        hall = ExpandedHall.model_validate(showtime.hall)
    else:
        movie = EntityRef(id=showtime.movie_id)
        hall = EntityRef(id=showtime.hall_id)
    return ShowtimeRead(
        id=showtime.id,
        movie=movie,
        hall=hall,
        start_time=showtime.start_time,
        is_active=showtime.is_active,
        created_at=showtime.created_at,
        updated_at=showtime.updated_at,
    )


async def ensure_duration_fits(db: AsyncSession, movie: Movie, new_duration: int) -> None:
    """A longer runtime must not push any active screening into the next one.

    Runs before the new duration is written, so the movie's other screenings
    are checked with the old runtime; the earlier of any clashing pair still
    sees the later one inside its new extent.
    """
    if new_duration <= movie.duration:
        return
    result = await db.execute(
        select(Showtime).where(Showtime.movie_id == movie.id, Showtime.is_active.is_(True))
    )
    for showtime in result.scalars().all():
        await ensure_hall_free(
            db, showtime.hall_id, showtime.start_time, new_duration, exclude_id=showtime.id
        )
