"""
Placement model.

The financial and contractual record for a placed candidate: fee, guarantee
window, rebate and invoicing state.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Index, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talent_pipeline.models.base_model import TimestampedModel
from talent_pipeline.models.enums import PlacementStatus


class Placement(TimestampedModel):
    """placements table - at most one row per pipeline entry."""

    __tablename__ = "placements"

    pipeline_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
    )

    # Placement details
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    actual_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    job_type: Mapped[str] = mapped_column(String(30), nullable=False)

    # Denormalised display info
    candidate_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    job_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Financials - salary for permanent roles, day rate for contracts
    salary: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    day_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    fee_percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    fee_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    fee_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="GBP")

    # Invoicing
    invoice_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    invoice_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    invoice_raised: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    invoice_raised_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    invoice_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    invoice_paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_terms_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)

    # Guarantee / rebate
    guarantee_period_days: Mapped[int] = mapped_column(Integer, nullable=False, default=90)
    guarantee_expires_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    rebate_triggered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rebate_trigger_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    rebate_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rebate_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    rebate_percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)

    # Ownership
    placed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
    sourced_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    split_with: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    split_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("100"))

    # Status
    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=PlacementStatus.CONFIRMED.value,
        index=True,
    )
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("pipeline_id", name="uq_placements_pipeline_id"),
        Index("ix_placements_start_date", "start_date"),
    )
