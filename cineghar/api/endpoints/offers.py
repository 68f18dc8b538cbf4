"""
Admin offer CRUD — promotional codes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db, pagination, require_admin
from cineghar.core.exceptions import BadRequestError, ConflictError
from cineghar.models.offer import Offer
from cineghar.schemas.common import (Envelope, MessageResponse,
                                     PaginationParams, as_utc)
from cineghar.schemas.offer import OfferCreate, OfferPage, OfferRead, OfferUpdate
from cineghar.services.crud import apply_changes, get_or_404, paginate

router = APIRouter(prefix="/admin/offers", tags=["admin: offers"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: int | None = None) -> None:
    query = select(Offer.id).where(Offer.code == code)
    if exclude_id is not None:
        query = query.where(Offer.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise ConflictError(f"Offer code '{code}' already exists")


@router.get("", response_model=OfferPage)
async def list_offers(
    params: PaginationParams = Depends(pagination(default_limit=20)),
    db: AsyncSession = Depends(get_db),
) -> OfferPage:
    offers, total, pages = await paginate(db, Offer, params)
    return OfferPage(
        data=[OfferRead.model_validate(o) for o in offers],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_offers=total,
    )


@router.get("/{offer_id}", response_model=Envelope[OfferRead])
async def get_offer(offer_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[OfferRead]:
    offer = await get_or_404(db, Offer, offer_id, "Offer")
    return Envelope(data=OfferRead.model_validate(offer))


@router.post("", response_model=Envelope[OfferRead], status_code=201)
async def create_offer(body: OfferCreate, db: AsyncSession = Depends(get_db)) -> Envelope[OfferRead]:
    await _ensure_code_free(db, body.code)
    offer = Offer(**body.model_dump())
    db.add(offer)
    await db.commit()
    await db.refresh(offer)
    logger.info("Created offer %s (id=%d)", offer.code, offer.id)
    return Envelope(message="Offer created", data=OfferRead.model_validate(offer))


@router.put("/{offer_id}", response_model=Envelope[OfferRead])
async def update_offer(
    offer_id: int,
    body: OfferUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[OfferRead]:
    offer = await get_or_404(db, Offer, offer_id, "Offer")
    changes = body.model_dump(exclude_unset=True)
    if changes.get("code") and changes["code"] != offer.code:
        await _ensure_code_free(db, changes["code"], exclude_id=offer.id)

    start = as_utc(changes.get("start_date") or offer.start_date)
    end = as_utc(changes["end_date"] if "end_date" in changes else offer.end_date)
    if end is not None and start is not None and end < start:
        raise BadRequestError("endDate must not be before startDate")

    apply_changes(offer, changes)
    await db.commit()
    await db.refresh(offer)
    logger.info("Updated offer %d", offer_id)
    return Envelope(message="Offer updated", data=OfferRead.model_validate(offer))


@router.delete("/{offer_id}", response_model=MessageResponse)
async def delete_offer(offer_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    offer = await get_or_404(db, Offer, offer_id, "Offer")
    await db.delete(offer)
    await db.commit()
    logger.info("Deleted offer %d (%s)", offer_id, offer.code)
    return MessageResponse(message="Offer deleted")
