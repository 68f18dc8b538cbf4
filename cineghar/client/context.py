"""
Auth context — the current user and authentication flag.

One instance is created by the application shell and handed to whatever
needs it; subscribers are told about every change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cineghar.client.auth import AuthApi
from cineghar.client.guard import ADMIN_HOME, LOGIN_ROUTE, USER_HOME, AuthState
from cineghar.client.session import SessionStore

logger = logging.getLogger(__name__)

Listener = Callable[[AuthState], None]


class AuthContext:
    def __init__(self, auth_api: AuthApi, session: SessionStore) -> None:
        self.auth_api = auth_api
        self.session = session
        self.user: dict[str, Any] | None = None
        self.is_loading = True
        self._listeners: list[Listener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def state(self) -> AuthState:
        return AuthState(is_loading=self.is_loading, user=self.user)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def initialize(self) -> None:
        """Restore a previous session from the store."""
        try:
            token = self.session.get_token()
            cached = self.session.get_user()
            if token and cached:
                self.user = cached
        finally:
            self.is_loading = False
            self._notify()

    def login(self, email: str, password: str, remember_me: bool = False) -> str:
        """Sign in and return the landing route for the user's role."""
        self.is_loading = True
        self._notify()
        try:
            result = self.auth_api.login(email, password, remember_me=remember_me)
        except Exception:
            self.is_loading = False
            self._notify()
            raise

        self.session.set_token(result.token, persist_long=remember_me)
        self.session.set_user(result.user, persist_long=remember_me)
        self.user = result.user
        self.is_loading = False
        self._notify()
        logger.info("Signed in as %s", result.user.get("email"))
        return ADMIN_HOME if result.user.get("role") == "admin" else USER_HOME

    def register(
        self, name: str, email: str, password: str, date_of_birth: str | None = None
    ) -> str:
        self.is_loading = True
        self._notify()
        try:
            self.auth_api.register(name, email, password, date_of_birth)
        except Exception:
            self.is_loading = False
            self._notify()
            raise
        # Auto-login after successful registration
        return self.login(email, password, remember_me=True)

    def logout(self) -> str:
        self.user = None
        self.session.clear()
        self._notify()
        return LOGIN_ROUTE

    def update_user(self, user: dict[str, Any]) -> None:
        self.user = user
        self.session.set_user(user, persist_long=True)
        self._notify()
