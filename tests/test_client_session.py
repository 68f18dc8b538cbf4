"""Tests for the cookie-backed client session store."""

import logging

from cineghar.client.session import (LONG_LIVED_SECONDS, SHORT_LIVED_SECONDS,
                                     USER_COOKIE, SessionStore)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_token_and_user_round_trip():
    store = SessionStore()
    store.set_token("tok")
    store.set_user({"name": "Asha Rai", "email": "asha@example.com", "role": "user"})
    assert store.get_token() == "tok"
    assert store.get_user() == {"name": "Asha Rai", "email": "asha@example.com", "role": "user"}


def test_empty_store():
    store = SessionStore()
    assert store.get_token() is None
    assert store.get_user() is None


def test_short_session_expires_after_a_day():
    clock = FakeClock()
    store = SessionStore(clock=clock)
    store.set_token("tok")
    clock.now += SHORT_LIVED_SECONDS - 1
    assert store.get_token() == "tok"
    clock.now += 2
    assert store.get_token() is None


def test_remember_me_lasts_thirty_days():
    clock = FakeClock()
    store = SessionStore(clock=clock)
    store.set_token("tok", persist_long=True)
    clock.now += SHORT_LIVED_SECONDS * 2
    assert store.get_token() == "tok"
    clock.now += LONG_LIVED_SECONDS
    assert store.get_token() is None


def test_corrupt_user_cookie_is_discarded(caplog):
    store = SessionStore()
    store._set(USER_COOKIE, "%7Bnot-json", persist_long=False)
    with caplog.at_level(logging.WARNING, logger="cineghar.client.session"):
        assert store.get_user() is None
    assert "Discarding" in caplog.text
    # removed, so a second read is silent
    caplog.clear()
    assert store.get_user() is None
    assert caplog.text == ""


def test_clear_removes_both():
    store = SessionStore()
    store.set_token("tok")
    store.set_user({"email": "a@b.co"})
    store.clear()
    assert store.get_token() is None
    assert store.get_user() is None
    store.clear()


def test_persists_to_file(tmp_path):
    path = tmp_path / "session" / "cookies.lwp"
    first = SessionStore(path)
    first.set_token("tok", persist_long=True)
    first.set_user({"name": "Asha; \"quoted\"", "email": "asha@example.com"}, persist_long=True)

    second = SessionStore(path)
    assert second.get_token() == "tok"
    assert second.get_user() == {"name": "Asha; \"quoted\"", "email": "asha@example.com"}

    second.clear()
    assert SessionStore(path).get_token() is None
