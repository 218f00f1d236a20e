"""
Placement Pydantic schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from talent_pipeline.models.enums import JobType, PlacementStatus
from talent_pipeline.schemas.base import TimestampedRead, reject_explicit_nulls


def _check_salary_or_day_rate(salary: Optional[Decimal], day_rate: Optional[Decimal]) -> None:
    if salary is not None and day_rate is not None:
        raise ValueError("Provide either salary or day_rate, not both")


class PlacementCreate(BaseModel):
    """Schema for recording a successful placement."""

    pipeline_id: UUID
    start_date: date
    job_type: JobType

    candidate_name: Optional[str] = Field(default=None, max_length=255)
    job_title: Optional[str] = Field(default=None, max_length=255)
    company_name: Optional[str] = Field(default=None, max_length=255)

    salary: Optional[Decimal] = Field(default=None, ge=0)
    day_rate: Optional[Decimal] = Field(default=None, ge=0)
    fee_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    fee_value: Optional[Decimal] = Field(default=None, ge=0)
    fee_currency: Optional[str] = Field(default=None, min_length=3, max_length=3)

    invoice_date: Optional[date] = None
    payment_terms_days: Optional[int] = Field(default=None, ge=0)
    guarantee_period_days: Optional[int] = Field(default=None, ge=0)

    placed_by: Optional[UUID] = None
    sourced_by: Optional[UUID] = None
    split_with: Optional[UUID] = None
    split_percentage: Optional[Decimal] = Field(default=None, gt=0, le=100)

    notes: Optional[str] = None
    internal_notes: Optional[str] = None

    @model_validator(mode="after")
    def salary_or_day_rate(self) -> "PlacementCreate":
        _check_salary_or_day_rate(self.salary, self.day_rate)
        return self


NON_NULLABLE_UPDATE_FIELDS = (
    "start_date",
    "job_type",
    "fee_currency",
    "payment_terms_days",
    "guarantee_period_days",
    "split_percentage",
)


class PlacementUpdate(BaseModel):
    """Partial update of a placement. Only fields that are sent are written."""

    start_date: Optional[date] = None
    actual_start_date: Optional[date] = None
    job_type: Optional[JobType] = None

    candidate_name: Optional[str] = Field(default=None, max_length=255)
    job_title: Optional[str] = Field(default=None, max_length=255)
    company_name: Optional[str] = Field(default=None, max_length=255)

    salary: Optional[Decimal] = Field(default=None, ge=0)
    day_rate: Optional[Decimal] = Field(default=None, ge=0)
    fee_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    fee_value: Optional[Decimal] = Field(default=None, ge=0)
    fee_currency: Optional[str] = Field(default=None, min_length=3, max_length=3)

    invoice_date: Optional[date] = None
    payment_terms_days: Optional[int] = Field(default=None, ge=0)
    guarantee_period_days: Optional[int] = Field(default=None, ge=0)

    placed_by: Optional[UUID] = None
    sourced_by: Optional[UUID] = None
    split_with: Optional[UUID] = None
    split_percentage: Optional[Decimal] = Field(default=None, gt=0, le=100)

    notes: Optional[str] = None
    internal_notes: Optional[str] = None

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "PlacementUpdate":
        reject_explicit_nulls(self, NON_NULLABLE_UPDATE_FIELDS)
        return self

    @model_validator(mode="after")
    def salary_or_day_rate(self) -> "PlacementUpdate":
        _check_salary_or_day_rate(self.salary, self.day_rate)
        return self


class PlacementRead(TimestampedRead):
    pipeline_id: UUID
    start_date: date
    actual_start_date: Optional[date] = None
    job_type: JobType

    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None

    salary: Optional[Decimal] = None
    day_rate: Optional[Decimal] = None
    fee_percentage: Optional[Decimal] = None
    fee_value: Optional[Decimal] = None
    fee_currency: str

    invoice_date: Optional[date] = None
    invoice_number: Optional[str] = None
    invoice_raised: bool
    invoice_raised_at: Optional[datetime] = None
    invoice_paid: bool
    invoice_paid_at: Optional[datetime] = None
    payment_terms_days: int

    guarantee_period_days: int
    guarantee_expires_at: Optional[date] = None
    rebate_triggered: bool
    rebate_trigger_date: Optional[date] = None
    rebate_reason: Optional[str] = None
    rebate_amount: Optional[Decimal] = None
    rebate_percentage: Optional[Decimal] = None

    placed_by: Optional[UUID] = None
    sourced_by: Optional[UUID] = None
    split_with: Optional[UUID] = None
    split_percentage: Decimal

    status: PlacementStatus
    status_changed_at: Optional[datetime] = None
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    created_by: Optional[UUID] = None


class InvoiceRaisedRequest(BaseModel):
    invoice_number: Optional[str] = Field(default=None, max_length=100)


class RebateRequest(BaseModel):
    reason: str = Field(..., min_length=1)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)


class PlacementStatusRequest(BaseModel):
    status: PlacementStatus


class PlacementStats(BaseModel):
    """Aggregates over placements whose start date falls in the period."""

    total: int
    confirmed: int
    started: int
    completed: int
    rebate: int
    rebates: int
    total_fee_value: Decimal
    invoiced_value: Decimal
    paid_value: Decimal
