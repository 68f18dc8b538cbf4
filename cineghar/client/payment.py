"""Khalti payment wrappers."""

from __future__ import annotations

from typing import Any

from cineghar.client import endpoints
from cineghar.client.http import ApiClient


class PaymentApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def initiate_khalti(
        self,
        amount: float,
        purchase_order_id: str,
        purchase_order_name: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """``amount`` is in NPR; the server converts it to paisa."""
        payload: dict[str, Any] = {
            "amount": amount,
            "purchaseOrderId": purchase_order_id,
            "purchaseOrderName": purchase_order_name,
        }
        if metadata:
            payload["metadata"] = metadata
        return self.client.post(endpoints.KHALTI_INITIATE, json=payload)

    def lookup_khalti(self, pidx: str) -> dict[str, Any]:
        return self.client.post(endpoints.KHALTI_LOOKUP, json={"pidx": pidx})
