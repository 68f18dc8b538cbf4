"""
Shared test fixtures for the CineGhar test suite.

Every test gets a fresh in-memory SQLite database (aiosqlite) wired into
the app through a ``get_db`` override.
"""

import os
import sys
import tempfile
from typing import AsyncGenerator, Generator

import httpx
import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
# CORS fix (JSON format)
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cineghar-uploads-")
os.environ["SMTP_HOST"] = ""
os.environ["KHALTI_SECRET_KEY"] = "test_khalti_secret"
os.environ["FRONTEND_URL"] = "http://frontend.test"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cineghar.api.deps import get_db
from cineghar.core.config import settings
from cineghar.core.security import create_access_token
from cineghar.db.base import Base
from cineghar.db.session import build_engine, build_session_factory
from cineghar.main import app
from cineghar.models.user import User
from cineghar.services import auth as auth_service
from cineghar.services.khalti import KhaltiGateway, get_khalti_gateway

USER_PASSWORD = "secret123"


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh database per test; tables created up front, engine disposed after."""
    engine = build_engine(settings.TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = build_session_factory(engine)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Users & tokens ──────────────────────────────────────────────────
async def _make_user(db: AsyncSession, email: str, role: str) -> User:
    return await auth_service.create_user(
        db, name=email.split("@")[0].title(), email=email, password=USER_PASSWORD, role=role
    )


def _bearer(user: User) -> dict[str, str]:
    token = create_access_token(user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@cineghar.test", "admin")


@pytest.fixture
async def regular_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "viewer@cineghar.test", "user")


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture
def user_headers(regular_user: User) -> dict[str, str]:
    return _bearer(regular_user)


# ── Khalti ──────────────────────────────────────────────────────────
@pytest.fixture
def khalti_calls() -> list[httpx.Request]:
    """Requests the fake Khalti server received, in order."""
    return []


@pytest.fixture
def khalti_gateway(khalti_calls: list[httpx.Request]) -> Generator[KhaltiGateway, None, None]:
    def handler(request: httpx.Request) -> httpx.Response:
        khalti_calls.append(request)
        if request.url.path.endswith("/epayment/initiate/"):
            return httpx.Response(
                200,
                json={
                    "pidx": "bZQLD9wRVWo4CdESSfuSsB",
                    "payment_url": "https://test-pay.khalti.com/?pidx=bZQLD9wRVWo4CdESSfuSsB",
                    "expires_at": "2026-10-19T13:00:00+05:45",
                    "expires_in": 1800,
                },
            )
        if request.url.path.endswith("/epayment/lookup/"):
            return httpx.Response(
                200,
                json={
                    "pidx": "bZQLD9wRVWo4CdESSfuSsB",
                    "total_amount": 50000,
                    "status": "Completed",
                    "transaction_id": "GFq9PFS7b2iYvL8Lir9oXe",
                    "fee": 0,
                    "refunded": False,
                },
            )
        return httpx.Response(404, json={"detail": "Not found."})

    gateway = KhaltiGateway(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_khalti_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_khalti_gateway, None)
