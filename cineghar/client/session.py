"""
Client-side session store — bearer token and cached user profile.

Both values live as cookies in an ``LWPCookieJar`` so they survive restarts
when a file path is configured. "Remember me" extends their lifetime from
one day to thirty.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from http.cookiejar import Cookie, LWPCookieJar
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "cineghar_token"
USER_COOKIE = "cineghar_user"

LONG_LIVED_SECONDS = 30 * 24 * 60 * 60
SHORT_LIVED_SECONDS = 24 * 60 * 60


class SessionStore:
    def __init__(
        self,
        path: str | Path | None = None,
        domain: str = "localhost",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._path = Path(path) if path else None
        self._domain = domain
        self._clock = clock
        self._jar = LWPCookieJar(str(self._path) if self._path else None)
        if self._path and self._path.exists():
            self._jar.load(ignore_discard=True)

    # ── Token ──────────────────────────────────────────────────────
    def set_token(self, token: str, persist_long: bool = False) -> None:
        self._set(TOKEN_COOKIE, token, persist_long)

    def get_token(self) -> str | None:
        return self._get(TOKEN_COOKIE)

    # ── User ───────────────────────────────────────────────────────
    def set_user(self, user: dict[str, Any], persist_long: bool = False) -> None:
        self._set(USER_COOKIE, quote(json.dumps(user)), persist_long)

    def get_user(self) -> dict[str, Any] | None:
        raw = self._get(USER_COOKIE)
        if raw is None:
            return None
        try:
            user = json.loads(unquote(raw))
        except ValueError:
            user = None
        if not isinstance(user, dict):
            logger.warning("Discarding unreadable %s cookie", USER_COOKIE)
            self._remove(USER_COOKIE)
            return None
        return user

    def clear(self) -> None:
        self._remove(TOKEN_COOKIE)
        self._remove(USER_COOKIE)

    # ── Cookie jar plumbing ────────────────────────────────────────
    def _set(self, name: str, value: str, persist_long: bool) -> None:
        lifetime = LONG_LIVED_SECONDS if persist_long else SHORT_LIVED_SECONDS
        cookie = Cookie(
            version=0,
            name=name,
            value=value,
            port=None,
            port_specified=False,
            domain=self._domain,
            domain_specified=False,
            domain_initial_dot=False,
            path="/",
            path_specified=True,
            secure=False,
            expires=int(self._clock()) + lifetime,
            discard=False,
            comment=None,
            comment_url=None,
            rest={},
        )
        self._jar.set_cookie(cookie)
        self._save()

    def _get(self, name: str) -> str | None:
        cookie = next(
            (c for c in self._jar if c.name == name and c.domain == self._domain), None
        )
        if cookie is None:
            return None
        if cookie.is_expired(self._clock()):
            self._remove(name)
            return None
        return cookie.value

    def _remove(self, name: str) -> None:
        try:
            self._jar.clear(self._domain, "/", name)
        except KeyError:
            return
        self._save()

    def _save(self) -> None:
        if self._path:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._jar.save(ignore_discard=True)
