"""Khalti payment request bodies."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cineghar.schemas.common import CamelModel


class KhaltiInitiateRequest(CamelModel):
    amount: float = Field(gt=0, description="Amount in NPR; sent to Khalti in paisa")
    purchase_order_id: str = Field(min_length=1)
    purchase_order_name: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class KhaltiLookupRequest(CamelModel):
    pidx: str | None = None


class ProviderResponse(CamelModel):
    """Provider payload passed through untouched."""

    success: bool = True
    data: dict[str, Any]
