"""
Placement repository - database operations for Placement.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.models.placement import Placement


class PlacementRepository:
    """Repository for Placement database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, placement_id: UUID) -> Optional[Placement]:
        result = await self.db.execute(
            select(Placement).where(Placement.id == placement_id)
        )
        return result.scalar_one_or_none()

    async def get_by_pipeline(self, pipeline_id: UUID) -> Optional[Placement]:
        result = await self.db.execute(
            select(Placement).where(Placement.pipeline_id == pipeline_id)
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        status: Optional[str] = None,
        placed_by: Optional[UUID] = None,
        start_date_from: Optional[date] = None,
        start_date_to: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Placement]:
        """List placements with filters, latest start date first. Date bounds are inclusive."""
        query = select(Placement)

        if status is not None:
            query = query.where(Placement.status == status)
        if placed_by is not None:
            query = query.where(Placement.placed_by == placed_by)
        if start_date_from is not None:
            query = query.where(Placement.start_date >= start_date_from)
        if start_date_to is not None:
            query = query.where(Placement.start_date <= start_date_to)

        query = query.order_by(Placement.start_date.desc(), Placement.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        query = query.offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create(self, values: Dict[str, Any]) -> Placement:
        """Insert a placement; the unique pipeline_id constraint fires on flush."""
        placement = Placement(**values)
        self.db.add(placement)
        await self.db.flush()
        await self.db.refresh(placement)
        return placement

    async def update(self, placement: Placement, values: Dict[str, Any]) -> Placement:
        for field, value in values.items():
            setattr(placement, field, value)

        await self.db.flush()
        await self.db.refresh(placement)
        return placement
