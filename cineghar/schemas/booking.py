"""Pydantic schemas for the seat map, seat holds and bookings."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from cineghar.schemas.common import CamelModel

SEAT_ROWS = ("A", "B", "C", "D", "E", "F", "G")
SEAT_COLUMNS = 12


def normalise_seat(seat: str) -> str:
    """``" b7 "`` -> ``"B7"``; rejects seats outside the A1-G12 grid."""
    label = seat.strip().upper()
    row, column = label[:1], label[1:]
    if row not in SEAT_ROWS or not column.isdigit() or not 1 <= int(column) <= SEAT_COLUMNS:
        raise ValueError(f"Invalid seat {seat!r}")
    return f"{row}{int(column)}"


class CityRead(CamelModel):
    id: str
    name: str


class HeldSeat(CamelModel):
    seat_id: str
    expires_at: datetime


class SeatMap(CamelModel):
    rows: list[str] = Field(default_factory=lambda: list(SEAT_ROWS))
    columns: int = SEAT_COLUMNS
    booked_seats: list[str]
    held_seats: list[HeldSeat]


class SeatHoldRequest(CamelModel):
    showtime_id: int = Field(ge=1)
    seats: list[str] = Field(min_length=1, max_length=len(SEAT_ROWS) * SEAT_COLUMNS)

    @field_validator("seats")
    @classmethod
    def _seats(cls, v: list[str]) -> list[str]:
        # order kept, duplicates dropped
        return list(dict.fromkeys(normalise_seat(s) for s in v))


class BookingConfirmRequest(CamelModel):
    showtime_id: int = Field(ge=1)


class SeatHoldRead(CamelModel):
    id: int
    showtime_id: int
    user_id: int
    seats: list[str]
    expires_at: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BookingRead(CamelModel):
    id: int
    showtime_id: int
    user_id: int
    seats: list[str]
    total_price: float
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
