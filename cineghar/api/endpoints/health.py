"""
Health check — database connectivity.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db
from cineghar.core.config import settings
from cineghar.schemas.common import CamelModel

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


class HealthResponse(CamelModel):
    success: bool = True
    version: str
    db: bool


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check."""
    result = HealthResponse(version=settings.VERSION, db=False)
    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
    result.success = result.db
    return result
