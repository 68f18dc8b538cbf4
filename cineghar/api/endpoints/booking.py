"""
Booking endpoints — browse where and when a movie plays, then hold and
confirm seats.

Browsing is public; holding and confirming need a logged-in user.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_current_user, get_db
from cineghar.core.exceptions import BadRequestError
from cineghar.models.cinema_hall import CITIES, CinemaHall
from cineghar.models.movie import Showtime
from cineghar.models.user import User
from cineghar.schemas.booking import (BookingConfirmRequest, BookingRead,
                                      CityRead, SeatHoldRead, SeatHoldRequest,
                                      SeatMap)
from cineghar.schemas.cinema_hall import CinemaHallRead, City
from cineghar.schemas.common import Envelope
from cineghar.schemas.movie import ShowtimeRead
from cineghar.services import booking as booking_service
from cineghar.services import showtimes as showtime_service

router = APIRouter(prefix="/booking", tags=["booking"])
logger = logging.getLogger(__name__)


# ── Browse ──────────────────────────────────────────────────────────
@router.get("/cities", response_model=Envelope[list[CityRead]])
async def list_cities() -> Envelope[list[CityRead]]:
    return Envelope(data=[CityRead(id=c, name=c) for c in CITIES])


@router.get("/halls", response_model=Envelope[list[CinemaHallRead]])
async def list_open_halls(
    city: City | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[CinemaHallRead]]:
    query = select(CinemaHall).where(CinemaHall.is_active.is_(True))
    if city:
        query = query.where(CinemaHall.city == city)
    result = await db.execute(query.order_by(CinemaHall.name.asc()))
    return Envelope(data=[CinemaHallRead.model_validate(h) for h in result.scalars().all()])


@router.get("/showtimes", response_model=Envelope[list[ShowtimeRead]])
async def find_showtimes(
    movie_id: int | None = Query(default=None, alias="movieId"),
    hall_id: int | None = Query(default=None, alias="hallId"),
    date: Literal["today", "tomorrow"] | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[ShowtimeRead]]:
    """Active showtimes of a movie, optionally in one hall and on one local day."""
    if movie_id is None:
        raise BadRequestError("movieId is required")

    query = (
        select(Showtime)
        .options(*showtime_service.EXPAND)
        .where(Showtime.movie_id == movie_id, Showtime.is_active.is_(True))
    )
    if hall_id is not None:
        query = query.where(Showtime.hall_id == hall_id)
    if date is not None:
        start, end = booking_service.day_window(date)
        query = query.where(Showtime.start_time >= start, Showtime.start_time < end)

    result = await db.execute(query.order_by(Showtime.start_time.asc()))
    return Envelope(data=[showtime_service.to_read(s) for s in result.scalars().all()])


@router.get("/showtimes/{showtime_id}/seats", response_model=Envelope[SeatMap])
async def get_seat_map(showtime_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[SeatMap]:
    return Envelope(data=await booking_service.seat_map(db, showtime_id))


# ── Hold & confirm ──────────────────────────────────────────────────
@router.post("/holds", response_model=Envelope[SeatHoldRead], status_code=status.HTTP_201_CREATED)
async def hold_seats(
    body: SeatHoldRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Envelope[SeatHoldRead]:
    """201 for a new hold, 200 when seats were merged into the user's existing one."""
    hold, created = await booking_service.hold_seats(db, current_user, body.showtime_id, body.seats)
    if not created:
        response.status_code = status.HTTP_200_OK
    return Envelope(
        message="Seats held" if created else "Hold updated",
        data=SeatHoldRead.model_validate(hold),
    )


@router.post("/confirm", response_model=Envelope[BookingRead], status_code=status.HTTP_201_CREATED)
async def confirm_booking(
    body: BookingConfirmRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Envelope[BookingRead]:
    booking = await booking_service.confirm_booking(db, current_user, body.showtime_id)
    return Envelope(message="Booking confirmed", data=BookingRead.model_validate(booking))
