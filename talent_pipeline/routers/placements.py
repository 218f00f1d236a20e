"""
Placement router - API endpoints for placements, invoicing and rebates.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.dependencies import Actor, get_db, get_event_publisher
from talent_pipeline.core.permissions import require_reader, require_writer
from talent_pipeline.models.enums import PlacementStatus
from talent_pipeline.schemas.placement import (
    InvoiceRaisedRequest,
    PlacementCreate,
    PlacementRead,
    PlacementStats,
    PlacementStatusRequest,
    PlacementUpdate,
    RebateRequest,
)
from talent_pipeline.services.events import EventPublisher
from talent_pipeline.services.placement_service import PlacementService

router = APIRouter(tags=["placements"])


@router.post("/placements", response_model=PlacementRead, status_code=status.HTTP_201_CREATED)
async def create_placement(
    data: PlacementCreate,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Record a placement. 409 if the pipeline entry already has one."""
    service = PlacementService(db, publisher=publisher)
    return await service.create(data, actor.user_id)


@router.get("/placements", response_model=List[PlacementRead])
async def list_placements(
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    status: Optional[PlacementStatus] = None,
    placed_by: Optional[UUID] = None,
    start_date_from: Optional[date] = None,
    start_date_to: Optional[date] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    List placements, latest start date first.

    Filters: status, placed_by, start_date_from, start_date_to (inclusive).
    """
    service = PlacementService(db)
    return await service.list(
        status=status,
        placed_by=placed_by,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
        limit=limit,
        offset=offset,
    )


@router.get("/placements/stats", response_model=PlacementStats)
async def placement_stats(
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
):
    service = PlacementService(db)
    return await service.stats(date_from=date_from, date_to=date_to)


@router.get("/placements/{placement_id}", response_model=PlacementRead)
async def get_placement(
    placement_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    service = PlacementService(db)
    return await service.get(placement_id)


@router.patch("/placements/{placement_id}", response_model=PlacementRead)
async def update_placement(
    placement_id: UUID,
    data: PlacementUpdate,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Partial update. The guarantee expiry moves only when start_date and guarantee_period_days are both sent."""
    service = PlacementService(db, publisher=publisher)
    return await service.update(placement_id, data, actor.user_id)


@router.post("/placements/{placement_id}/invoice-raised", response_model=PlacementRead)
async def mark_invoice_raised(
    placement_id: UUID,
    data: InvoiceRaisedRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = PlacementService(db, publisher=publisher)
    return await service.mark_invoice_raised(placement_id, data.invoice_number, actor.user_id)


@router.post("/placements/{placement_id}/invoice-paid", response_model=PlacementRead)
async def mark_invoice_paid(
    placement_id: UUID,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = PlacementService(db, publisher=publisher)
    return await service.mark_invoice_paid(placement_id, actor.user_id)


@router.post("/placements/{placement_id}/rebate", response_model=PlacementRead)
async def trigger_rebate(
    placement_id: UUID,
    data: RebateRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Trigger the guarantee rebate. The placement moves to rebate status."""
    service = PlacementService(db, publisher=publisher)
    return await service.trigger_rebate(
        placement_id,
        data.reason,
        amount=data.amount,
        percentage=data.percentage,
        actor_id=actor.user_id,
    )


@router.post("/placements/{placement_id}/status", response_model=PlacementRead)
async def update_status(
    placement_id: UUID,
    data: PlacementStatusRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = PlacementService(db, publisher=publisher)
    return await service.update_status(placement_id, data.status, actor.user_id)


@router.get("/pipeline/{pipeline_id}/placement", response_model=Optional[PlacementRead])
async def placement_for_pipeline(
    pipeline_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    """The entry's placement, or null if it has none."""
    service = PlacementService(db)
    return await service.get_for_pipeline(pipeline_id)
