"""
Route guard — decides whether a page may render for the current auth state.

    loading                         -> LOADING
    not authenticated               -> REDIRECT /login
    admin on a user page            -> REDIRECT /admin
    non-admin on an admin page      -> REDIRECT /auth/dashboard
    otherwise                       -> AUTHORIZED
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

LOGIN_ROUTE = "/login"
ADMIN_HOME = "/admin"
USER_HOME = "/auth/dashboard"

Area = Literal["user", "admin"]


class AuthState(BaseModel):
    is_loading: bool = True
    user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"


class GuardDecision(BaseModel):
    kind: Literal["loading", "redirect", "authorized"]
    target: str | None = None


LOADING = GuardDecision(kind="loading")
AUTHORIZED = GuardDecision(kind="authorized")


def redirect(target: str) -> GuardDecision:
    return GuardDecision(kind="redirect", target=target)


def evaluate_guard(state: AuthState, area: Area) -> GuardDecision:
    if state.is_loading:
        return LOADING
    if not state.is_authenticated:
        return redirect(LOGIN_ROUTE)
    if area == "user" and state.is_admin:
        return redirect(ADMIN_HOME)
    if area == "admin" and not state.is_admin:
        return redirect(USER_HOME)
    return AUTHORIZED
