"""
Movie catalogue — admin CRUD plus the public listing.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db, pagination, require_admin
from cineghar.core.exceptions import ConflictError
from cineghar.models.movie import Movie, Showtime
from cineghar.schemas.common import Envelope, MessageResponse, PaginationParams
from cineghar.schemas.movie import (MovieCreate, MoviePage, MovieRead,
                                    MovieUpdate, ShowtimeRead)
from cineghar.services import showtimes as showtime_service
from cineghar.services.crud import apply_changes, get_or_404, paginate

router = APIRouter(prefix="/admin/movies", tags=["admin: movies"], dependencies=[Depends(require_admin)])
public_router = APIRouter(prefix="/movies", tags=["movies"])
logger = logging.getLogger(__name__)


# ── Admin ───────────────────────────────────────────────────────────
@router.post("", response_model=Envelope[MovieRead], status_code=201)
async def create_movie(
    body: MovieCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[MovieRead]:
    movie = Movie(**body.model_dump())
    db.add(movie)
    await db.commit()
    await db.refresh(movie)
    logger.info("Created movie %r (id=%d)", movie.title, movie.id)
    return Envelope(message="Movie created successfully", data=MovieRead.model_validate(movie))


@router.get("", response_model=MoviePage)
async def list_movies(
    params: PaginationParams = Depends(pagination()),
    db: AsyncSession = Depends(get_db),
) -> MoviePage:
    movies, total, pages = await paginate(db, Movie, params)
    return MoviePage(
        message="Movies fetched successfully",
        data=[MovieRead.model_validate(m) for m in movies],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_movies=total,
    )


@router.get("/{movie_id}", response_model=Envelope[MovieRead])
async def get_movie(movie_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[MovieRead]:
    movie = await get_or_404(db, Movie, movie_id, "Movie")
    return Envelope(message="Movie fetched", data=MovieRead.model_validate(movie))


@router.put("/{movie_id}", response_model=Envelope[MovieRead])
async def update_movie(
    movie_id: int,
    body: MovieUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[MovieRead]:
    movie = await get_or_404(db, Movie, movie_id, "Movie")
    changes = body.model_dump(exclude_unset=True)
    if changes.get("duration") is not None:
        await showtime_service.ensure_duration_fits(db, movie, changes["duration"])
    apply_changes(movie, changes)
    await db.commit()
    await db.refresh(movie)
    logger.info("Updated movie %d", movie_id)
    return Envelope(message="Movie updated successfully", data=MovieRead.model_validate(movie))


@router.delete("/{movie_id}", response_model=MessageResponse)
async def delete_movie(movie_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    movie = await get_or_404(db, Movie, movie_id, "Movie")
    scheduled = (
        await db.execute(select(func.count()).select_from(Showtime).where(Showtime.movie_id == movie_id))
    ).scalar_one()
    if scheduled:
        raise ConflictError(f"Movie has {scheduled} showtime(s); delete them first")

    await db.delete(movie)
    await db.commit()
    logger.info("Deleted movie %d", movie_id)
    return MessageResponse(message="Movie deleted successfully")


# ── Public ──────────────────────────────────────────────────────────
@public_router.get("", response_model=MoviePage)
async def browse_movies(
    q: str | None = Query(default=None, description="Case-insensitive title search"),
    genre: str | None = Query(default=None),
    params: PaginationParams = Depends(pagination()),
    db: AsyncSession = Depends(get_db),
) -> MoviePage:
    filters = []
    if q:
        filters.append(Movie.title.ilike(f"%{q.strip()}%"))
    if genre:
        # genre is a JSON list; match its quoted element in the serialised text
        needle = json.dumps(genre.strip()).lower()
        filters.append(func.lower(cast(Movie.genre, String)).contains(needle, autoescape=True))

    movies, total, pages = await paginate(db, Movie, params, filters=filters)
    return MoviePage(
        message="Movies fetched successfully",
        data=[MovieRead.model_validate(m) for m in movies],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_movies=total,
    )


@public_router.get("/{movie_id}", response_model=Envelope[MovieRead])
async def movie_detail(movie_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[MovieRead]:
    movie = await get_or_404(db, Movie, movie_id, "Movie")
    return Envelope(message="Movie fetched", data=MovieRead.model_validate(movie))


@public_router.get("/{movie_id}/showtimes", response_model=Envelope[list[ShowtimeRead]])
async def movie_showtimes(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> Envelope[list[ShowtimeRead]]:
    """Active showtimes of one movie, earliest first, with movie and hall expanded."""
    await get_or_404(db, Movie, movie_id, "Movie")
    result = await db.execute(
        select(Showtime)
        .options(*showtime_service.EXPAND)
        .where(Showtime.movie_id == movie_id, Showtime.is_active.is_(True))
        .order_by(Showtime.start_time.asc())
    )
    return Envelope(data=[showtime_service.to_read(s) for s in result.scalars().all()])
