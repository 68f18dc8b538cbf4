"""Seat booking wrappers: browse, hold, confirm."""

from __future__ import annotations

from typing import Any

from cineghar.client import endpoints
from cineghar.client.http import ApiClient


class BookingApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def cities(self) -> dict[str, Any]:
        return self.client.get(endpoints.BOOKING_CITIES)

    def halls(self, city: str | None = None) -> dict[str, Any]:
        return self.client.get(endpoints.BOOKING_HALLS, params={"city": city})

    def showtimes(
        self, movie_id: int, hall_id: int | None = None, date: str | None = None
    ) -> dict[str, Any]:
        """``date`` is ``"today"``, ``"tomorrow"`` or None for every day."""
        return self.client.get(
            endpoints.BOOKING_SHOWTIMES,
            params={"movieId": movie_id, "hallId": hall_id, "date": date},
        )

    def seats(self, showtime_id: int) -> dict[str, Any]:
        return self.client.get(endpoints.showtime_seats(showtime_id))

    def hold(self, showtime_id: int, seats: list[str]) -> dict[str, Any]:
        return self.client.post(
            endpoints.BOOKING_HOLDS, json={"showtimeId": showtime_id, "seats": seats}
        )

    def confirm(self, showtime_id: int) -> dict[str, Any]:
        return self.client.post(endpoints.BOOKING_CONFIRM, json={"showtimeId": showtime_id})
