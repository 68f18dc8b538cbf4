"""Tests for the admin user management endpoints."""

import pytest
from httpx import AsyncClient

USERS = "/api/admin/users"


def _new_user(i: int, **extra):
    return {
        "name": f"Member {i}",
        "email": f"member{i}@example.com",
        "password": "secret123",
        "confirmPassword": "secret123",
        **extra,
    }


@pytest.mark.asyncio
async def test_admin_routes_require_token(async_client: AsyncClient):
    resp = await async_client.get(USERS)
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_forbid_plain_users(async_client: AsyncClient, user_headers):
    resp = await async_client.get(USERS, headers=user_headers)
    assert resp.status_code == 403
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_create_user_with_role(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(USERS, json=_new_user(1, role="admin"), headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["data"]["role"] == "admin"


@pytest.mark.asyncio
async def test_create_user_duplicate_email(async_client: AsyncClient, admin_headers):
    await async_client.post(USERS, json=_new_user(1), headers=admin_headers)
    resp = await async_client.post(USERS, json=_new_user(1), headers=admin_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_list_users_paginates(async_client: AsyncClient, admin_headers):
    """Admin plus four members, two per page: three pages, newest first."""
    for i in range(4):
        await async_client.post(USERS, json=_new_user(i), headers=admin_headers)

    resp = await async_client.get(f"{USERS}?page=1&limit=2", headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalUsers"] == 5
    assert body["totalPages"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert [u["email"] for u in body["data"]] == ["member3@example.com", "member2@example.com"]

    last = await async_client.get(f"{USERS}?page=3&limit=2", headers=admin_headers)
    assert len(last.json()["data"]) == 1


@pytest.mark.asyncio
async def test_list_users_rejects_bad_page(async_client: AsyncClient, admin_headers):
    resp = await async_client.get(f"{USERS}?page=0", headers=admin_headers)
    assert resp.status_code == 400
    resp = await async_client.get(f"{USERS}?limit=101", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_get_update_delete_user(async_client: AsyncClient, admin_headers):
    created = await async_client.post(USERS, json=_new_user(7), headers=admin_headers)
    uid = created.json()["data"]["id"]

    fetched = await async_client.get(f"{USERS}/{uid}", headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["email"] == "member7@example.com"

    updated = await async_client.put(
        f"{USERS}/{uid}", json={"role": "admin", "name": "Promoted"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["role"] == "admin"
    assert updated.json()["data"]["name"] == "Promoted"
    assert updated.json()["data"]["email"] == "member7@example.com"

    deleted = await async_client.delete(f"{USERS}/{uid}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "message": "User deleted successfully"}

    gone = await async_client.get(f"{USERS}/{uid}", headers=admin_headers)
    assert gone.status_code == 404
    assert gone.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_delete_missing_user_is_404(async_client: AsyncClient, admin_headers):
    resp = await async_client.delete(f"{USERS}/9999", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_does_not_touch_password(async_client: AsyncClient, admin_headers):
    """Passwords change only through the reset flow; a stray field is ignored."""
    created = await async_client.post(USERS, json=_new_user(8), headers=admin_headers)
    uid = created.json()["data"]["id"]

    updated = await async_client.put(
        f"{USERS}/{uid}", json={"name": "Renamed", "password": "hijacked1"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Renamed"

    old = await async_client.post(
        "/api/auth/login", json={"email": "member8@example.com", "password": "secret123"}
    )
    assert old.status_code == 200
    new = await async_client.post(
        "/api/auth/login", json={"email": "member8@example.com", "password": "hijacked1"}
    )
    assert new.status_code == 401
