"""Tests for the booking client wrappers."""

import json

import httpx

from cineghar.client.booking import BookingApi
from cineghar.client.http import ApiClient
from cineghar.client.session import SessionStore


def _api(seen: list[httpx.Request]) -> BookingApi:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": []})

    session = SessionStore()
    session.set_token("tok-booking")
    client = ApiClient(base_url="http://api.test", session=session, transport=httpx.MockTransport(handler))
    return BookingApi(client)


def test_browse_paths_and_params():
    seen: list[httpx.Request] = []
    api = _api(seen)

    api.cities()
    api.halls(city="Pokhara")
    api.showtimes(7, date="today")
    api.seats(12)

    assert [r.url.path for r in seen] == [
        "/api/booking/cities",
        "/api/booking/halls",
        "/api/booking/showtimes",
        "/api/booking/showtimes/12/seats",
    ]
    assert seen[1].url.params["city"] == "Pokhara"
    assert dict(seen[2].url.params) == {"movieId": "7", "date": "today"}


def test_hold_and_confirm_send_camel_case_bodies():
    seen: list[httpx.Request] = []
    api = _api(seen)

    api.hold(12, ["A1", "A2"])
    api.confirm(12)

    assert [r.method for r in seen] == ["POST", "POST"]
    assert json.loads(seen[0].content) == {"showtimeId": 12, "seats": ["A1", "A2"]}
    assert json.loads(seen[1].content) == {"showtimeId": 12}
    assert seen[1].url.path == "/api/booking/confirm"
    assert seen[1].headers["Authorization"] == "Bearer tok-booking"
