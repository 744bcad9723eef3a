"""Maintenance Routes: operations meant for an external scheduler (cron, k8s CronJob)."""

import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.database import get_db
from rollcall.schemas.event import ArchiveOut, ArchiveRequest
from rollcall.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.post("/archive", response_model=ArchiveOut)
async def archive_past_events(
    body: ArchiveRequest | None = None, db: AsyncSession = Depends(get_db),
):
    """Archive every active event dated before today."""
    today = body.today if body and body.today else date.today()
    archived = await event_service.archive_past_events(db, today)
    return ArchiveOut(archived=archived)
