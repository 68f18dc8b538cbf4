"""Tests for showtime scheduling, overlap detection and the tagged movie/hall fields."""

import pytest
from httpx import AsyncClient

SHOWTIMES = "/api/admin/showtimes"


@pytest.fixture
async def movie_id(async_client: AsyncClient, admin_headers) -> int:
    resp = await async_client.post(
        "/api/admin/movies",
        json={
            "title": "Loot 3",
            "description": "Heist comedy.",
            "genre": ["Thriller"],
            "duration": 120,
            "rating": 7.0,
        },
        headers=admin_headers,
    )
    return resp.json()["data"]["id"]


@pytest.fixture
async def hall_id(async_client: AsyncClient, admin_headers) -> int:
    resp = await async_client.post(
        "/api/admin/halls",
        json={"name": "FCube", "city": "Kathmandu", "location": "Chabahil"},
        headers=admin_headers,
    )
    return resp.json()["data"]["id"]


async def _schedule(client, headers, movie_id, hall_id, start, **extra):
    return await client.post(
        SHOWTIMES,
        json={"movieId": movie_id, "hallId": hall_id, "startTime": start, **extra},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_create_returns_references(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    resp = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["movie"] == {"kind": "ref", "id": movie_id}
    assert data["hall"] == {"kind": "ref", "id": hall_id}
    assert data["isActive"] is True


@pytest.mark.asyncio
async def test_get_returns_expanded(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    created = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    sid = created.json()["data"]["id"]
    resp = await async_client.get(f"{SHOWTIMES}/{sid}", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["movie"]["kind"] == "expanded"
    assert data["movie"]["title"] == "Loot 3"
    assert data["hall"]["kind"] == "expanded"
    assert data["hall"]["name"] == "FCube"


@pytest.mark.asyncio
async def test_unknown_movie_or_hall(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    resp = await _schedule(async_client, admin_headers, 999, hall_id, "2026-11-01T10:00:00Z")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Movie not found"
    resp = await _schedule(async_client, admin_headers, movie_id, 999, "2026-11-01T10:00:00Z")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cinema hall not found"


@pytest.mark.asyncio
async def test_overlap_in_same_hall_conflicts(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    """A 120-minute movie at 10:00 blocks the hall until 12:00."""
    first = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    assert first.status_code == 201

    clash = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T11:30:00Z")
    assert clash.status_code == 409
    assert "already booked" in clash.json()["message"]

    earlier = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T08:30:00Z")
    assert earlier.status_code == 409


@pytest.mark.asyncio
async def test_back_to_back_is_allowed(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    resp = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T12:00:00Z")
    assert resp.status_code == 201
    before = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T08:00:00Z")
    assert before.status_code == 201


@pytest.mark.asyncio
async def test_timezone_offsets_are_normalised(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    """10:00 UTC is 15:45 in Kathmandu; the same slot is refused either way."""
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    resp = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T16:00:00+05:45")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_other_hall_and_inactive_do_not_conflict(
    async_client: AsyncClient, admin_headers, movie_id, hall_id
):
    other = await async_client.post(
        "/api/admin/halls",
        json={"name": "Big Movies", "city": "Pokhara", "location": "Lakeside"},
        headers=admin_headers,
    )
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")

    elsewhere = await _schedule(
        async_client, admin_headers, movie_id, other.json()["data"]["id"], "2026-11-01T10:00:00Z"
    )
    assert elsewhere.status_code == 201

    inactive = await _schedule(
        async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:30:00Z", isActive=False
    )
    assert inactive.status_code == 201


@pytest.mark.asyncio
async def test_update_rechecks_overlap(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    later = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T14:00:00Z")
    sid = later.json()["data"]["id"]

    # moving a showtime within its own slot is not a clash with itself
    nudged = await async_client.put(
        f"{SHOWTIMES}/{sid}", json={"startTime": "2026-11-01T14:15:00Z"}, headers=admin_headers
    )
    assert nudged.status_code == 200
    assert nudged.json()["data"]["movie"]["kind"] == "expanded"

    clash = await async_client.put(
        f"{SHOWTIMES}/{sid}", json={"startTime": "2026-11-01T11:00:00Z"}, headers=admin_headers
    )
    assert clash.status_code == 409


@pytest.mark.asyncio
async def test_list_and_delete(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    created = await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    sid = created.json()["data"]["id"]

    listing = await async_client.get(SHOWTIMES, headers=admin_headers)
    body = listing.json()
    assert body["totalShowtimes"] == 1
    assert body["data"][0]["hall"]["kind"] == "expanded"

    deleted = await async_client.delete(f"{SHOWTIMES}/{sid}", headers=admin_headers)
    assert deleted.json()["message"] == "Showtime deleted"


@pytest.mark.asyncio
async def test_referenced_movie_and_hall_cannot_be_deleted(
    async_client: AsyncClient, admin_headers, movie_id, hall_id
):
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    movie = await async_client.delete(f"/api/admin/movies/{movie_id}", headers=admin_headers)
    assert movie.status_code == 409
    hall = await async_client.delete(f"/api/admin/halls/{hall_id}", headers=admin_headers)
    assert hall.status_code == 409


@pytest.mark.asyncio
async def test_public_movie_showtimes(async_client: AsyncClient, admin_headers, movie_id, hall_id):
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T18:00:00Z")
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    await _schedule(
        async_client, admin_headers, movie_id, hall_id, "2026-11-02T10:00:00Z", isActive=False
    )

    resp = await async_client.get(f"/api/movies/{movie_id}/showtimes")
    assert resp.status_code == 200
    starts = [s["startTime"][:16] for s in resp.json()["data"]]
    assert starts == ["2026-11-01T10:00", "2026-11-01T18:00"]


@pytest.mark.asyncio
async def test_longer_runtime_cannot_overlap_scheduled_showtimes(
    async_client: AsyncClient, admin_headers, movie_id, hall_id
):
    """Two back-to-back 120-minute screenings leave no room for a 150-minute cut."""
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T12:00:00Z")

    longer = await async_client.put(
        f"/api/admin/movies/{movie_id}", json={"duration": 150}, headers=admin_headers
    )
    assert longer.status_code == 409
    assert "already booked" in longer.json()["message"]

    movie = await async_client.get(f"/api/admin/movies/{movie_id}", headers=admin_headers)
    assert movie.json()["data"]["duration"] == 120

    shorter = await async_client.put(
        f"/api/admin/movies/{movie_id}", json={"duration": 100}, headers=admin_headers
    )
    assert shorter.status_code == 200
    assert shorter.json()["data"]["duration"] == 100


@pytest.mark.asyncio
async def test_longer_runtime_ignores_inactive_showtimes(
    async_client: AsyncClient, admin_headers, movie_id, hall_id
):
    await _schedule(async_client, admin_headers, movie_id, hall_id, "2026-11-01T10:00:00Z")
    await _schedule(
        async_client, admin_headers, movie_id, hall_id, "2026-11-01T12:00:00Z", isActive=False
    )
    resp = await async_client.put(
        f"/api/admin/movies/{movie_id}", json={"duration": 180}, headers=admin_headers
    )
    assert resp.status_code == 200
