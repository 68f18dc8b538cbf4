"""
Admin cinema hall CRUD.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db, pagination, require_admin
from cineghar.core.exceptions import ConflictError
from cineghar.models.cinema_hall import CinemaHall
from cineghar.models.movie import Showtime
from cineghar.schemas.cinema_hall import (CinemaHallCreate, CinemaHallPage,
                                          CinemaHallRead, CinemaHallUpdate)
from cineghar.schemas.common import Envelope, MessageResponse, PaginationParams
from cineghar.services.crud import apply_changes, get_or_404, paginate

router = APIRouter(prefix="/admin/halls", tags=["admin: halls"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("", response_model=CinemaHallPage)
async def list_halls(
    params: PaginationParams = Depends(pagination()),
    db: AsyncSession = Depends(get_db),
) -> CinemaHallPage:
    halls, total, pages = await paginate(db, CinemaHall, params)
    return CinemaHallPage(
        data=[CinemaHallRead.model_validate(h) for h in halls],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_halls=total,
    )


@router.get("/{hall_id}", response_model=Envelope[CinemaHallRead])
async def get_hall(hall_id: int, db: AsyncSession = Depends(get_db)) -> Envelope[CinemaHallRead]:
    hall = await get_or_404(db, CinemaHall, hall_id, "Cinema hall")
    return Envelope(data=CinemaHallRead.model_validate(hall))


@router.post("", response_model=Envelope[CinemaHallRead], status_code=201)
async def create_hall(
    body: CinemaHallCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[CinemaHallRead]:
    hall = CinemaHall(**body.model_dump())
    db.add(hall)
    await db.commit()
    await db.refresh(hall)
    logger.info("Created hall %s in %s (id=%d)", hall.name, hall.city, hall.id)
    return Envelope(message="Cinema hall created", data=CinemaHallRead.model_validate(hall))


@router.put("/{hall_id}", response_model=Envelope[CinemaHallRead])
async def update_hall(
    hall_id: int,
    body: CinemaHallUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[CinemaHallRead]:
    hall = await get_or_404(db, CinemaHall, hall_id, "Cinema hall")
    apply_changes(hall, body.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(hall)
    logger.info("Updated hall %d", hall_id)
    return Envelope(message="Cinema hall updated", data=CinemaHallRead.model_validate(hall))


@router.delete("/{hall_id}", response_model=MessageResponse)
async def delete_hall(hall_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    hall = await get_or_404(db, CinemaHall, hall_id, "Cinema hall")
    scheduled = (
        await db.execute(select(func.count()).select_from(Showtime).where(Showtime.hall_id == hall_id))
    ).scalar_one()
    if scheduled:
        raise ConflictError(f"Cinema hall has {scheduled} showtime(s); delete them first")

    await db.delete(hall)
    await db.commit()
    logger.info("Deleted hall %d (%s)", hall_id, hall.name)
    return MessageResponse(message="Cinema hall deleted")
