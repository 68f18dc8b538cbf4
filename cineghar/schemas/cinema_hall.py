"""Pydantic schemas for cinema halls."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from cineghar.schemas.common import CamelModel, PageBase

City = Literal["Kathmandu", "Pokhara", "Chitwan"]


def _clean_facilities(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    return [f.strip() for f in v if f and f.strip()]


class CinemaHallCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    city: City
    location: str = Field(min_length=1, max_length=300)
    rating: float = Field(default=0, ge=0, le=5)
    facilities: list[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("facilities")
    @classmethod
    def _facilities(cls, v: list[str]) -> list[str]:
        return _clean_facilities(v) or []


class CinemaHallUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    city: City | None = None
    location: str | None = Field(default=None, min_length=1, max_length=300)
    rating: float | None = Field(default=None, ge=0, le=5)
    facilities: list[str] | None = None
    is_active: bool | None = None

    @field_validator("facilities")
    @classmethod
    def _facilities(cls, v: list[str] | None) -> list[str] | None:
        return _clean_facilities(v)


class CinemaHallRead(CamelModel):
    id: int
    name: str
    city: str
    location: str
    rating: float
    facilities: list[str]
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CinemaHallPage(PageBase[CinemaHallRead]):
    total_halls: int
