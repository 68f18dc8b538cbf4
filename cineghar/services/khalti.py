"""
Khalti ePayment gateway — initiate a payment and look up its status.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from cineghar.core.config import settings
from cineghar.core.exceptions import AppError

logger = logging.getLogger(__name__)

RETURN_PATH = "/auth/payment/khalti/return"


class KhaltiError(AppError):
    """Provider-side failure; carries the provider's status code."""


def _provider_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or fallback)
    return fallback


class KhaltiGateway:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not settings.KHALTI_SECRET_KEY:
            raise AppError("Khalti configuration missing. Please set KHALTI_SECRET_KEY.")
        return {
            "Authorization": f"Key {settings.KHALTI_SECRET_KEY}",
            "Content-Type": "application/json",
        }

    async def _post(self, path: str, payload: dict[str, Any], fallback: str) -> dict[str, Any]:
        headers = self._headers()
        url = f"{settings.KHALTI_BASE_URL.rstrip('/')}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Khalti request to %s failed: %s", path, exc)
            raise KhaltiError(str(exc) or fallback) from exc

        if response.is_error:
            message = _provider_message(response, fallback)
            logger.warning("Khalti %s returned %d: %s", path, response.status_code, message)
            raise KhaltiError(message, status_code=response.status_code)
        return response.json()

    async def initiate(
        self,
        amount_rupees: float,
        purchase_order_id: str,
        purchase_order_name: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "return_url": f"{settings.FRONTEND_URL.rstrip('/')}{RETURN_PATH}",
            "website_url": settings.khalti_website_url,
            "amount": round(amount_rupees * 100),  # paisa
            "purchase_order_id": purchase_order_id,
            "purchase_order_name": purchase_order_name,
        }
        if metadata:
            payload["merchant_extra"] = json.dumps(metadata)
        return await self._post("/epayment/initiate/", payload, "Failed to initiate Khalti payment")

    async def lookup(self, pidx: str) -> dict[str, Any]:
        return await self._post("/epayment/lookup/", {"pidx": pidx}, "Failed to lookup Khalti payment")


def get_khalti_gateway() -> KhaltiGateway:
    return KhaltiGateway()
