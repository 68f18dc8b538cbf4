"""
Admin showtime CRUD — schedules a movie in a hall.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db, pagination, require_admin
from cineghar.core.exceptions import ConflictError
from cineghar.models.booking import Booking, SeatHold
from cineghar.models.cinema_hall import CinemaHall
from cineghar.models.movie import Movie, Showtime
from cineghar.schemas.common import Envelope, MessageResponse, PaginationParams
from cineghar.schemas.movie import (ShowtimeCreate, ShowtimePage, ShowtimeRead,
                                    ShowtimeUpdate)
from cineghar.services import showtimes as showtime_service
from cineghar.services.crud import apply_changes, get_or_404, paginate

router = APIRouter(
    prefix="/admin/showtimes", tags=["admin: showtimes"], dependencies=[Depends(require_admin)]
)
logger = logging.getLogger(__name__)


@router.post("", response_model=Envelope[ShowtimeRead], status_code=201)
async def create_showtime(
    body: ShowtimeCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[ShowtimeRead]:
    movie = await get_or_404(db, Movie, body.movie_id, "Movie")
    await get_or_404(db, CinemaHall, body.hall_id, "Cinema hall")
    if body.is_active:
        await showtime_service.ensure_hall_free(db, body.hall_id, body.start_time, movie.duration)

    showtime = Showtime(**body.model_dump())
    db.add(showtime)
    await db.commit()
    await db.refresh(showtime)
    logger.info("Scheduled movie %d in hall %d at %s", body.movie_id, body.hall_id, body.start_time)
    return Envelope(message="Showtime created", data=showtime_service.to_read(showtime, expand=False))


@router.get("", response_model=ShowtimePage)
async def list_showtimes(
    params: PaginationParams = Depends(pagination()),
    db: AsyncSession = Depends(get_db),
) -> ShowtimePage:
    showtimes, total, pages = await paginate(db, Showtime, params, options=showtime_service.EXPAND)
    return ShowtimePage(
        data=[showtime_service.to_read(s) for s in showtimes],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_showtimes=total,
    )


@router.get("/{showtime_id}", response_model=Envelope[ShowtimeRead])
async def get_showtime(showtime_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[ShowtimeRead]:
    showtime = await get_or_404(db, Showtime, showtime_id, "Showtime", options=showtime_service.EXPAND)
    return Envelope(data=showtime_service.to_read(showtime))


@router.put("/{showtime_id}", response_model=Envelope[ShowtimeRead])
async def update_showtime(
    showtime_id: int,
    body: ShowtimeUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[ShowtimeRead]:
    showtime = await get_or_404(db, Showtime, showtime_id, "Showtime")
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}

    movie_id = changes.get("movie_id", showtime.movie_id)
    hall_id = changes.get("hall_id", showtime.hall_id)
    movie = await get_or_404(db, Movie, movie_id, "Movie")
    await get_or_404(db, CinemaHall, hall_id, "Cinema hall")

    if changes.get("is_active", showtime.is_active):
        start = changes.get("start_time", showtime.start_time)
        await showtime_service.ensure_hall_free(
            db, hall_id, start, movie.duration, exclude_id=showtime.id
        )

    apply_changes(showtime, changes)
    await db.commit()
    showtime = await showtime_service.load_expanded(db, showtime_id)
    logger.info("Updated showtime %d", showtime_id)
    return Envelope(message="Showtime updated", data=showtime_service.to_read(showtime))


@router.delete("/{showtime_id}", response_model=MessageResponse)
async def delete_showtime(showtime_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    showtime = await get_or_404(db, Showtime, showtime_id, "Showtime")
    booked = (
        await db.execute(
            select(func.count()).select_from(Booking).where(Booking.showtime_id == showtime_id)
        )
    ).scalar_one()
    if booked:
        raise ConflictError(f"Showtime has {booked} booking(s); it cannot be deleted")

    await db.execute(delete(SeatHold).where(SeatHold.showtime_id == showtime_id))
    await db.delete(showtime)
    await db.commit()
    logger.info("Deleted showtime %d", showtime_id)
    return MessageResponse(message="Showtime deleted")
