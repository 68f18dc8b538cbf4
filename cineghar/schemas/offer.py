"""Pydantic schemas for promotional offers."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator

from cineghar.schemas.common import CamelModel, PageBase, UtcDatetime, as_utc

OfferType = Literal["percentage_discount", "fixed_discount", "bonus_points"]


class _OfferFields(CamelModel):
    description: str | None = None
    discount_percent: float | None = Field(default=None, ge=0, le=100)
    discount_amount: float | None = Field(default=None, ge=0)
    bonus_points: int | None = Field(default=None, ge=0)
    min_spend: float | None = Field(default=None, ge=0)
    end_date: UtcDatetime | None = None
    max_redemptions: int | None = Field(default=None, ge=1)
    per_user_limit: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _window(self):
        start = as_utc(getattr(self, "start_date", None))
        end = as_utc(self.end_date)
        if start is not None and end is not None and end < start:
            raise ValueError("endDate must not be before startDate")
        return self


class OfferCreate(_OfferFields):
    name: str = Field(min_length=3, max_length=200)
    code: str = Field(min_length=3, max_length=50)
    type: OfferType
    start_date: UtcDatetime
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        return v.strip().upper()


class OfferUpdate(_OfferFields):
    name: str | None = Field(default=None, min_length=3, max_length=200)
    code: str | None = Field(default=None, min_length=3, max_length=50)
    type: OfferType | None = None
    start_date: UtcDatetime | None = None
    is_active: bool | None = None

    @field_validator("code")
    @classmethod
    def _code(cls, v: str | None) -> str | None:
        return None if v is None else v.strip().upper()


class OfferRead(CamelModel):
    id: int
    name: str
    code: str
    description: str | None
    type: str
    discount_percent: float | None
    discount_amount: float | None
    bonus_points: int | None
    min_spend: float | None
    start_date: datetime
    end_date: datetime | None
    is_active: bool
    max_redemptions: int | None
    per_user_limit: int | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OfferPage(PageBase[OfferRead]):
    total_offers: int
