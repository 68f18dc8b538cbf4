"""
View state holders for list pages and the Khalti return page.

Each holder calls the API synchronously and exposes a plain state object a
renderer can read. Responses are applied in the order calls finish.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, Field

from cineghar.client.http import ApiError
from cineghar.client.payment import PaymentApi

logger = logging.getLogger(__name__)

Status = Literal["idle", "loading", "success", "error"]
Fetch = Callable[[int, int], dict[str, Any]]


def _total(body: dict[str, Any], fallback: int) -> int:
    """Pick the ``total<Entity>`` counter out of a list response."""
    for key, value in body.items():
        if key.startswith("total") and key != "totalPages" and isinstance(value, int):
            return value
    return fallback


# ── List pages ──────────────────────────────────────────────────────
class ListState(BaseModel):
    status: Status = "idle"
    items: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None
    page: int = 1
    limit: int = 10
    total_pages: int = 0
    total: int = 0


class ListView:
    def __init__(self, fetch: Fetch, limit: int = 10) -> None:
        self.fetch = fetch
        self.state = ListState(limit=limit)

    def load(self, page: int | None = None) -> ListState:
        page = page or self.state.page
        self.state = self.state.model_copy(update={"status": "loading", "error": None})
        try:
            body = self.fetch(page, self.state.limit)
        except ApiError as exc:
            logger.info("List load failed on page %d: %s", page, exc.message)
            self.state = self.state.model_copy(update={"status": "error", "error": exc.message})
            return self.state

        items = body.get("data") or []
        self.state = ListState(
            status="success",
            items=items,
            page=body.get("page", page),
            limit=body.get("limit", self.state.limit),
            total_pages=body.get("totalPages", 1),
            total=_total(body, len(items)),
        )
        return self.state

    def refresh(self) -> ListState:
        return self.load(self.state.page)

    def next_page(self) -> ListState:
        if self.state.page >= self.state.total_pages:
            return self.state
        return self.load(self.state.page + 1)

    def prev_page(self) -> ListState:
        if self.state.page <= 1:
            return self.state
        return self.load(self.state.page - 1)


# ── Khalti return ───────────────────────────────────────────────────
class KhaltiReturnState(BaseModel):
    type: Literal["idle", "loading", "error", "result"] = "idle"
    message: str | None = None
    status: str | None = None
    amount: int | None = None  # paisa
    transaction_id: str | None = None

    @property
    def is_success(self) -> bool:
        return self.type == "result" and self.status == "Completed"

    @property
    def amount_rupees(self) -> float | None:
        return None if self.amount is None else self.amount / 100


class KhaltiReturnView:
    def __init__(self, payment_api: PaymentApi) -> None:
        self.payment_api = payment_api
        self.state = KhaltiReturnState()

    def verify(self, pidx: str | None) -> KhaltiReturnState:
        if not pidx:
            self.state = KhaltiReturnState(type="error", message="Missing payment reference (pidx).")
            return self.state

        self.state = KhaltiReturnState(type="loading")
        try:
            body = self.payment_api.lookup_khalti(pidx)
            data = body.get("data")
            if not body.get("success") or not data:
                raise ApiError(body.get("message") or "Failed to verify payment.")
        except ApiError as exc:
            self.state = KhaltiReturnState(type="error", message=exc.message)
            return self.state

        self.state = KhaltiReturnState(
            type="result",
            status=data.get("status"),
            amount=data.get("total_amount"),
            transaction_id=data.get("transaction_id"),
        )
        logger.info("Khalti payment %s is %s", pidx, self.state.status)
        return self.state
