"""
Placement ledger.

Creates and maintains the financial record of a placed candidate: fee,
guarantee window, rebate and invoicing. Every change is logged on the owning
pipeline entry's activity trail.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.config import settings
from talent_pipeline.errors import DuplicateEntryError, NotFoundError, ValidationError
from talent_pipeline.models.enums import ActivityAction, PlacementStatus
from talent_pipeline.models.placement import Placement
from talent_pipeline.repositories.activity_repository import ActivityRepository
from talent_pipeline.repositories.pipeline_repository import PipelineRepository
from talent_pipeline.repositories.placement_repository import PlacementRepository
from talent_pipeline.schemas.placement import PlacementCreate, PlacementStats, PlacementUpdate
from talent_pipeline.services.base import ServiceBase, bounded, column_values
from talent_pipeline.services.events import EventPublisher
from talent_pipeline.utils.time import utc_now, utc_today

logger = logging.getLogger(__name__)

DUPLICATE_PLACEMENT_MESSAGE = "A placement already exists for this pipeline entry"


def compute_guarantee_expiry(start_date: date, guarantee_period_days: int) -> date:
    return start_date + timedelta(days=guarantee_period_days)


def is_within_guarantee(placement: Placement, on_date: Optional[date] = None) -> bool:
    """True while ``on_date`` (default today) lies between start date and guarantee expiry."""
    if placement.guarantee_expires_at is None:
        return False
    on_date = on_date or utc_today()
    return placement.start_date <= on_date <= placement.guarantee_expires_at


def compute_stats(placements: Iterable[Placement]) -> PlacementStats:
    """Counts and fee totals; placements without a fee count as zero."""
    placements = list(placements)
    zero = Decimal("0")

    def fee(placement: Placement) -> Decimal:
        return placement.fee_value if placement.fee_value is not None else zero

    def with_status(status: PlacementStatus) -> int:
        return sum(1 for p in placements if p.status == status.value)

    return PlacementStats(
        total=len(placements),
        confirmed=with_status(PlacementStatus.CONFIRMED),
        started=with_status(PlacementStatus.STARTED),
        completed=with_status(PlacementStatus.COMPLETED),
        rebate=with_status(PlacementStatus.REBATE),
        rebates=sum(1 for p in placements if p.rebate_triggered),
        total_fee_value=sum((fee(p) for p in placements), zero),
        invoiced_value=sum((fee(p) for p in placements if p.invoice_raised), zero),
        paid_value=sum((fee(p) for p in placements if p.invoice_paid), zero),
    )


class PlacementService(ServiceBase):
    """Service for placement business logic."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(db, publisher=publisher, timeout=timeout)
        self.repository = PlacementRepository(db)
        self.pipeline = PipelineRepository(db)
        self.activity = ActivityRepository(db)

    async def _get_placement(self, placement_id: UUID) -> Placement:
        placement = await self.repository.get_by_id(placement_id)
        if placement is None:
            raise NotFoundError.for_resource("Placement", placement_id)
        return placement

    @bounded
    async def create(self, data: PlacementCreate, actor_id: Optional[UUID]) -> Placement:
        """
        Record a placement for a pipeline entry.

        Raises:
            NotFoundError: the pipeline entry does not exist
            DuplicateEntryError: the entry already has a placement
        """
        values = column_values(data.model_dump())

        if values["guarantee_period_days"] is None:
            values["guarantee_period_days"] = settings.DEFAULT_GUARANTEE_PERIOD_DAYS
        values["guarantee_expires_at"] = compute_guarantee_expiry(
            data.start_date, values["guarantee_period_days"]
        )
        if values["invoice_date"] is None:
            values["invoice_date"] = data.start_date
        if values["split_percentage"] is None:
            values["split_percentage"] = Decimal("100")
        if values["fee_currency"] is None:
            values["fee_currency"] = settings.DEFAULT_FEE_CURRENCY
        if values["payment_terms_days"] is None:
            values["payment_terms_days"] = settings.DEFAULT_PAYMENT_TERMS_DAYS
        if values["placed_by"] is None:
            values["placed_by"] = actor_id
        values["created_by"] = actor_id
        values["status"] = PlacementStatus.CONFIRMED.value

        async with self.unit_of_work(duplicate_message=DUPLICATE_PLACEMENT_MESSAGE):
            if await self.pipeline.get_by_id(data.pipeline_id) is None:
                raise NotFoundError.for_resource("Pipeline entry", data.pipeline_id)
            if await self.repository.get_by_pipeline(data.pipeline_id) is not None:
                raise DuplicateEntryError(DUPLICATE_PLACEMENT_MESSAGE)

            placement = await self.repository.create(values)
            await self.activity.append(
                data.pipeline_id,
                ActivityAction.PLACEMENT_CREATED,
                actor_id,
                note=f"Placement created: Start {data.start_date.isoformat()}, Fee £{data.fee_value or 'TBC'}",
            )

        logger.info("Placement %s created for pipeline %s", placement.id, data.pipeline_id)
        self.publish(
            "placement_created",
            "placement",
            placement.id,
            actor_id,
            pipeline_id=str(data.pipeline_id),
            start_date=data.start_date.isoformat(),
        )
        return placement

    @bounded
    async def update(
        self,
        placement_id: UUID,
        data: PlacementUpdate,
        actor_id: Optional[UUID] = None,
    ) -> Placement:
        """
        Apply a partial update.

        The guarantee expiry is recomputed only when the update carries both
        ``guarantee_period_days`` and ``start_date``.
        """
        values = column_values(data.model_dump(exclude_unset=True))
        if values.get("guarantee_period_days") is not None and values.get("start_date") is not None:
            values["guarantee_expires_at"] = compute_guarantee_expiry(
                values["start_date"], values["guarantee_period_days"]
            )

        async with self.unit_of_work():
            placement = await self._get_placement(placement_id)
            if "salary" in values or "day_rate" in values:
                salary = values.get("salary", placement.salary)
                day_rate = values.get("day_rate", placement.day_rate)
                if salary is not None and day_rate is not None:
                    raise ValidationError("Provide either salary or day_rate, not both")

            placement = await self.repository.update(placement, values)
            changed = sorted(data.model_fields_set)
            await self.activity.append(
                placement.pipeline_id,
                ActivityAction.PLACEMENT_UPDATED,
                actor_id,
                note=f"Placement updated: {', '.join(changed) or 'no changes'}",
            )

        logger.info("Placement %s updated (%s)", placement_id, ", ".join(changed))
        self.publish("placement_updated", "placement", placement_id, actor_id, fields=changed)
        return placement

    @bounded
    async def mark_invoice_raised(
        self,
        placement_id: UUID,
        invoice_number: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> Placement:
        """Flag the invoice as raised. Raising again re-stamps the time and number."""
        async with self.unit_of_work():
            placement = await self._get_placement(placement_id)
            placement = await self.repository.update(
                placement,
                {
                    "invoice_raised": True,
                    "invoice_raised_at": utc_now(),
                    "invoice_number": invoice_number,
                },
            )
            await self.activity.append(
                placement.pipeline_id,
                ActivityAction.INVOICE_RAISED,
                actor_id,
                note=f"Invoice {invoice_number} raised" if invoice_number else "Invoice raised",
            )

        logger.info("Invoice raised for placement %s", placement_id)
        self.publish("placement_invoice_raised", "placement", placement_id, actor_id, invoice_number=invoice_number)
        return placement

    @bounded
    async def mark_invoice_paid(self, placement_id: UUID, actor_id: Optional[UUID] = None) -> Placement:
        """Flag the invoice as paid. Does not require the invoice to be marked raised."""
        async with self.unit_of_work():
            placement = await self._get_placement(placement_id)
            placement = await self.repository.update(
                placement,
                {"invoice_paid": True, "invoice_paid_at": utc_now()},
            )
            await self.activity.append(
                placement.pipeline_id,
                ActivityAction.INVOICE_PAID,
                actor_id,
                note="Invoice paid",
            )

        logger.info("Invoice paid for placement %s", placement_id)
        self.publish("placement_invoice_paid", "placement", placement_id, actor_id)
        return placement

    @bounded
    async def trigger_rebate(
        self,
        placement_id: UUID,
        reason: str,
        amount: Optional[Decimal] = None,
        percentage: Optional[Decimal] = None,
        actor_id: Optional[UUID] = None,
    ) -> Placement:
        """Move the placement to ``rebate`` from whatever status it is in."""
        async with self.unit_of_work():
            placement = await self._get_placement(placement_id)
            placement = await self.repository.update(
                placement,
                {
                    "rebate_triggered": True,
                    "rebate_trigger_date": utc_today(),
                    "rebate_reason": reason,
                    "rebate_amount": amount,
                    "rebate_percentage": percentage,
                    "status": PlacementStatus.REBATE.value,
                    "status_changed_at": utc_now(),
                },
            )
            await self.activity.append(
                placement.pipeline_id,
                ActivityAction.REBATE_TRIGGERED,
                actor_id,
                note=f"Rebate triggered: {reason}",
            )

        logger.warning("Rebate triggered for placement %s: %s", placement_id, reason)
        self.publish("placement_rebate_triggered", "placement", placement_id, actor_id, reason=reason)
        return placement

    @bounded
    async def update_status(
        self,
        placement_id: UUID,
        status: PlacementStatus,
        actor_id: Optional[UUID] = None,
    ) -> Placement:
        """Set the status directly. Moving to ``started`` records today as the actual start if none is set."""
        status = PlacementStatus(status)

        async with self.unit_of_work():
            placement = await self._get_placement(placement_id)
            previous = placement.status
            values = {"status": status.value, "status_changed_at": utc_now()}
            if status == PlacementStatus.STARTED and placement.actual_start_date is None:
                values["actual_start_date"] = utc_today()

            placement = await self.repository.update(placement, values)
            await self.activity.append(
                placement.pipeline_id,
                ActivityAction.PLACEMENT_STATUS_CHANGED,
                actor_id,
                note=f"Placement status changed from {previous} to {status.value}",
            )

        logger.info("Placement %s status %s -> %s", placement_id, previous, status.value)
        self.publish(
            "placement_status_changed",
            "placement",
            placement_id,
            actor_id,
            from_status=previous,
            to_status=status.value,
        )
        return placement

    @bounded
    async def get(self, placement_id: UUID) -> Placement:
        return await self._get_placement(placement_id)

    @bounded
    async def get_for_pipeline(self, pipeline_id: UUID) -> Optional[Placement]:
        return await self.repository.get_by_pipeline(pipeline_id)

    @bounded
    async def list(
        self,
        status: Optional[PlacementStatus] = None,
        placed_by: Optional[UUID] = None,
        start_date_from: Optional[date] = None,
        start_date_to: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Placement]:
        return await self.repository.list(
            status=PlacementStatus(status).value if status is not None else None,
            placed_by=placed_by,
            start_date_from=start_date_from,
            start_date_to=start_date_to,
            limit=limit,
            offset=offset,
        )

    @bounded
    async def stats(self, date_from: Optional[date] = None, date_to: Optional[date] = None) -> PlacementStats:
        """Aggregates over placements starting within the inclusive date range."""
        placements = await self.repository.list(start_date_from=date_from, start_date_to=date_to)
        return compute_stats(placements)
