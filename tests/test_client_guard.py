"""Tests for the route guard decision table."""

import pytest

from cineghar.client.guard import (AUTHORIZED, LOADING, AuthState,
                                   evaluate_guard, redirect)

ADMIN = {"email": "root@example.com", "role": "admin"}
VIEWER = {"email": "viewer@example.com", "role": "user"}


@pytest.mark.parametrize(
    "state, area, expected",
    [
        (AuthState(is_loading=True), "user", LOADING),
        (AuthState(is_loading=True, user=ADMIN), "admin", LOADING),
        (AuthState(is_loading=False), "user", redirect("/login")),
        (AuthState(is_loading=False), "admin", redirect("/login")),
        (AuthState(is_loading=False, user=ADMIN), "user", redirect("/admin")),
        (AuthState(is_loading=False, user=VIEWER), "admin", redirect("/auth/dashboard")),
        (AuthState(is_loading=False, user=VIEWER), "user", AUTHORIZED),
        (AuthState(is_loading=False, user=ADMIN), "admin", AUTHORIZED),
    ],
)
def test_evaluate_guard(state, area, expected):
    assert evaluate_guard(state, area) == expected


def test_user_without_role_is_not_admin():
    state = AuthState(is_loading=False, user={"email": "x@example.com"})
    assert evaluate_guard(state, "admin") == redirect("/auth/dashboard")
    assert evaluate_guard(state, "user") == AUTHORIZED
