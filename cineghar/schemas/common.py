"""Shared response envelope, pagination and camelCase base schema."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class PageBase(CamelModel, Generic[T]):
    """List envelope; subclasses add their ``total<Entity>`` counter."""

    success: bool = True
    message: str | None = None
    data: list[T]
    page: int
    limit: int
    total_pages: int


class PaginationParams(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Naive input is taken as UTC; aware input is converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(to_utc)]
