"""
Shared store operations for the admin resource routers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.core.exceptions import NotFoundError
from cineghar.db.base import Base
from cineghar.schemas.common import PaginationParams, total_pages

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession, model: type[ModelT], obj_id: int, entity: str, options: Sequence[Any] = ()
) -> ModelT:
    obj = await db.get(model, obj_id, options=list(options))
    if obj is None:
        raise NotFoundError(entity)
    return obj


async def paginate(
    db: AsyncSession,
    model: type[ModelT],
    params: PaginationParams,
    options: Sequence[Any] = (),
    filters: Sequence[Any] = (),
) -> tuple[list[ModelT], int, int]:
    """Newest first. Returns ``(rows, total, total_pages)``."""
    total = (
        await db.execute(select(func.count()).select_from(model).where(*filters))
    ).scalar_one()
    query = (
        select(model)
        .where(*filters)
        .order_by(model.created_at.desc(), model.id.desc())
        .offset(params.offset)
        .limit(params.limit)
    )
    if options:
        query = query.options(*options)
    result = await db.execute(query)
    return list(result.scalars().all()), total, total_pages(total, params.limit)


def apply_changes(obj: Base, changes: dict[str, Any]) -> None:
    """Merge a partial update; ``None`` never clears a NOT NULL column."""
    columns = obj.__table__.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(obj, field, value)
