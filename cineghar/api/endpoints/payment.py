"""
Khalti ePayment proxy — keeps the merchant secret on the server.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Query

from cineghar.api.deps import get_current_user
from cineghar.core.exceptions import BadRequestError
from cineghar.models.user import User
from cineghar.schemas.payment import (KhaltiInitiateRequest,
                                      KhaltiLookupRequest, ProviderResponse)
from cineghar.services.khalti import KhaltiGateway, get_khalti_gateway

router = APIRouter(prefix="/payment/khalti", tags=["payment"])
logger = logging.getLogger(__name__)


@router.post("/initiate", response_model=ProviderResponse)
async def initiate_payment(
    body: KhaltiInitiateRequest,
    current_user: User = Depends(get_current_user),
    gateway: KhaltiGateway = Depends(get_khalti_gateway),
) -> ProviderResponse:
    data = await gateway.initiate(
        amount_rupees=body.amount,
        purchase_order_id=body.purchase_order_id,
        purchase_order_name=body.purchase_order_name,
        metadata=body.metadata,
    )
    logger.info(
        "User %d initiated Khalti payment for order %s (pidx=%s)",
        current_user.id,
        body.purchase_order_id,
        data.get("pidx"),
    )
    return ProviderResponse(data=data)


@router.post("/lookup", response_model=ProviderResponse)
async def lookup_payment(
    body: KhaltiLookupRequest | None = Body(default=None),
    pidx: str | None = Query(default=None),
    _user: User = Depends(get_current_user),
    gateway: KhaltiGateway = Depends(get_khalti_gateway),
) -> ProviderResponse:
    """Verify a payment server-side; ``pidx`` may come in the body or the query."""
    final_pidx = (body.pidx if body else None) or pidx
    if not final_pidx:
        raise BadRequestError("pidx is required")

    data = await gateway.lookup(final_pidx)
    logger.info("Khalti lookup %s -> %s", final_pidx, data.get("status"))
    return ProviderResponse(data=data)
