"""
Seat booking — the seat map, time-limited seat holds and confirmation.

Lifecycle of a seat for one showtime:
    free --hold--> held (until expires_at) --confirm--> booked
    held --expiry--> free

A user has at most one hold per showtime; holding again merges the new
seats into it and restarts the clock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Literal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.core.config import settings
from cineghar.core.exceptions import BadRequestError, ConflictError
from cineghar.models.booking import Booking, SeatHold
from cineghar.models.movie import Showtime
from cineghar.models.user import User
from cineghar.schemas.booking import HeldSeat, SeatMap
from cineghar.schemas.common import as_utc
from cineghar.services.crud import get_or_404

logger = logging.getLogger(__name__)

Day = Literal["today", "tomorrow"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def day_window(day: Day, now: datetime | None = None) -> tuple[datetime, datetime]:
    """UTC bounds ``[start, end)`` of the local calendar day ``day``."""
    local_tz = timezone(timedelta(minutes=settings.LOCAL_UTC_OFFSET_MINUTES))
    local_now = (now or _utcnow()).astimezone(local_tz)
    if day == "tomorrow":
        local_now += timedelta(days=1)
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start.astimezone(timezone.utc), (start + timedelta(days=1)).astimezone(timezone.utc)


async def booked_seats(db: AsyncSession, showtime_id: int) -> set[str]:
    result = await db.execute(
        select(Booking.seats).where(Booking.showtime_id == showtime_id, Booking.status == "confirmed")
    )
    return {seat for seats in result.scalars().all() for seat in seats}


async def live_holds(db: AsyncSession, showtime_id: int, now: datetime) -> list[SeatHold]:
    result = await db.execute(
        select(SeatHold)
        .where(SeatHold.showtime_id == showtime_id, SeatHold.expires_at > now)
        .order_by(SeatHold.expires_at.asc())
    )
    return list(result.scalars().all())


async def seat_map(db: AsyncSession, showtime_id: int) -> SeatMap:
    await get_or_404(db, Showtime, showtime_id, "Showtime")
    booked = await booked_seats(db, showtime_id)
    held = [
        HeldSeat(seat_id=seat, expires_at=as_utc(hold.expires_at))
        for hold in await live_holds(db, showtime_id, _utcnow())
        for seat in hold.seats
        if seat not in booked
    ]
    return SeatMap(booked_seats=sorted(booked), held_seats=held)


async def _bookable_showtime(db: AsyncSession, showtime_id: int) -> Showtime:
    showtime = await get_or_404(db, Showtime, showtime_id, "Showtime")
    if not showtime.is_active:
        raise BadRequestError("Showtime is not open for booking")
    return showtime


async def hold_seats(
    db: AsyncSession, user: User, showtime_id: int, seats: list[str]
) -> tuple[SeatHold, bool]:
    """Hold ``seats`` for ``user``. Returns ``(hold, created)``.

    Raises ``ConflictError`` when any seat is booked or held by someone else.
    """
    await _bookable_showtime(db, showtime_id)
    now = _utcnow()

    booked = await booked_seats(db, showtime_id)
    held_by_others = {
        seat
        for hold in await live_holds(db, showtime_id, now)
        if hold.user_id != user.id
        for seat in hold.seats
    }
    conflict = next((s for s in seats if s in booked or s in held_by_others), None)
    if conflict is not None:
        raise ConflictError(f"Seat {conflict} is already booked or held by another user")

    expires_at = now + timedelta(minutes=settings.SEAT_HOLD_MINUTES)
    result = await db.execute(
        select(SeatHold).where(SeatHold.showtime_id == showtime_id, SeatHold.user_id == user.id)
    )
    hold = result.scalar_one_or_none()
    created = hold is None
    if hold is None:
        hold = SeatHold(showtime_id=showtime_id, user_id=user.id, seats=seats, expires_at=expires_at)
        db.add(hold)
    else:
        # seats of a lapsed hold were released and may have been taken since
        kept = hold.seats if hold.is_live(now) else []
        hold.seats = list(dict.fromkeys([*kept, *seats]))
        hold.expires_at = expires_at

    await db.commit()
    await db.refresh(hold)
    logger.info(
        "User %d holds %s for showtime %d until %s",
        user.id, ",".join(hold.seats), showtime_id, expires_at.isoformat(),
    )
    return hold, created


async def confirm_booking(db: AsyncSession, user: User, showtime_id: int) -> Booking:
    """Turn the user's live hold into a confirmed booking at the seat price."""
    await _bookable_showtime(db, showtime_id)
    now = _utcnow()

    result = await db.execute(
        select(SeatHold).where(SeatHold.showtime_id == showtime_id, SeatHold.user_id == user.id)
    )
    hold = result.scalar_one_or_none()
    if hold is None or not hold.is_live(now) or not hold.seats:
        raise BadRequestError("No valid held seats to confirm")

    booked = await booked_seats(db, showtime_id)
    conflict = next((s for s in hold.seats if s in booked), None)
    if conflict is not None:
        raise ConflictError(f"Seat {conflict} was just booked by another user")

    booking = Booking(
        showtime_id=showtime_id,
        user_id=user.id,
        seats=list(hold.seats),
        total_price=len(hold.seats) * settings.SEAT_PRICE,
        status="confirmed",
    )
    db.add(booking)
    await db.delete(hold)
    await db.commit()
    await db.refresh(booking)
    logger.info(
        "Booking %d confirmed: user %d, showtime %d, %d seat(s), NPR %.2f",
        booking.id, user.id, showtime_id, len(booking.seats), booking.total_price,
    )
    return booking


async def purge_expired_holds(db: AsyncSession) -> int:
    """Delete lapsed holds; returns how many were removed."""
    result = await db.execute(
        delete(SeatHold)
        .where(SeatHold.expires_at <= _utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount or 0
