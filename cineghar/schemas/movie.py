"""Pydantic schemas for movies and showtimes."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field, field_validator

from cineghar.schemas.cinema_hall import CinemaHallRead
from cineghar.schemas.common import CamelModel, PageBase, UtcDatetime


def _check_poster(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    v = v.strip()
    if not (v.startswith(("http://", "https://")) or v.startswith("/")):
        raise ValueError("posterUrl must be an absolute URL or a path starting with '/'")
    return v


# ── Movie ───────────────────────────────────────────────────────────
class MovieCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    genre: list[str] = Field(default_factory=list)
    duration: int = Field(ge=1)
    rating: float = Field(ge=0, le=10)
    poster_url: str | None = None
    release_date: UtcDatetime | None = None

    @field_validator("poster_url")
    @classmethod
    def _poster(cls, v: str | None) -> str | None:
        return _check_poster(v)


class MovieUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, min_length=1)
    genre: list[str] | None = None
    duration: int | None = Field(default=None, ge=1)
    rating: float | None = Field(default=None, ge=0, le=10)
    poster_url: str | None = None
    release_date: UtcDatetime | None = None

    @field_validator("poster_url")
    @classmethod
    def _poster(cls, v: str | None) -> str | None:
        return _check_poster(v)


class MovieRead(CamelModel):
    id: int
    title: str
    description: str
    genre: list[str]
    duration: int
    rating: float
    poster_url: str | None
    release_date: datetime | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MoviePage(PageBase[MovieRead]):
    total_movies: int


# ── Showtime ────────────────────────────────────────────────────────
class ShowtimeCreate(CamelModel):
    movie_id: int = Field(ge=1)
    hall_id: int = Field(ge=1)
    start_time: UtcDatetime
    is_active: bool = True


class ShowtimeUpdate(CamelModel):
    movie_id: int | None = Field(default=None, ge=1)
    hall_id: int | None = Field(default=None, ge=1)
    start_time: UtcDatetime | None = None
    is_active: bool | None = None


class EntityRef(CamelModel):
    """A related row that was not loaded; only its id."""

    kind: Literal["ref"] = "ref"
    id: int


class ExpandedMovie(MovieRead):
    kind: Literal["expanded"] = "expanded"


class ExpandedHall(CinemaHallRead):
    kind: Literal["expanded"] = "expanded"


MovieField = Annotated[Union[EntityRef, ExpandedMovie], Field(discriminator="kind")]
HallField = Annotated[Union[EntityRef, ExpandedHall], Field(discriminator="kind")]


class ShowtimeRead(CamelModel):
    id: int
    movie: MovieField
    hall: HallField
    start_time: datetime
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ShowtimePage(PageBase[ShowtimeRead]):
    total_showtimes: int
