"""
CineGhar — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select

from cineghar.api.endpoints.auth import limiter
from cineghar.api.router import api_router
from cineghar.core.config import settings
from cineghar.core.exceptions import register_exception_handlers
from cineghar.core.security import get_password_hash
from cineghar.db.base import Base
from cineghar.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from cineghar.models.booking import Booking, SeatHold  # noqa: F401
from cineghar.models.cinema_hall import CinemaHall  # noqa: F401
from cineghar.models.movie import Movie, Showtime  # noqa: F401
from cineghar.models.offer import Offer  # noqa: F401
from cineghar.models.user import User
from cineghar.services import booking as booking_service
from cineghar.services.uploads import UPLOAD_URL_PREFIX, upload_dir

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            admin = User(
                name="System Administrator",
                email=settings.FIRST_ADMIN_EMAIL,
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                role="admin",
            )
            session.add(admin)
            await session.commit()
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )

        # Seat holds that lapsed while the server was down
        purged = await booking_service.purge_expired_holds(session)
        if purged:
            logger.info("Released %d expired seat hold(s)", purged)

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Movie ticket booking API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Login rate limiting
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    @application.get("/", include_in_schema=False)
    async def banner() -> dict:
        return {"success": True, "message": f"{settings.PROJECT_NAME} API Server"}

    # Uploaded images
    application.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=str(upload_dir())),
        name="uploads",
    )
    logger.info("Uploads served from %s", upload_dir())

    return application


app = create_app()
