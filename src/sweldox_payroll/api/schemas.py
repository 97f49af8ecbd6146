"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator


# ============================================================================
# Requests
# ============================================================================


class PayrollPeriodRequest(BaseModel):
    """Pay period shared by single and batch creation."""

    period_start_date: date
    period_end_date: date
    pay_date: date

    @model_validator(mode="after")
    def check_period(self) -> "PayrollPeriodRequest":
        if self.period_start_date > self.period_end_date:
            raise ValueError("period_start_date must be on or before period_end_date")
        return self


class PayrollCreate(PayrollPeriodRequest):
    """Schema for creating one employee's payroll."""

    employee_id: int


class PayrollBatchCreate(PayrollPeriodRequest):
    """Schema for creating payrolls for all active employees."""


# ============================================================================
# Responses
# ============================================================================


class DeductionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deduction_code: str
    description: str | None = None
    amount: Decimal


class PayrollBenefitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    benefit_type_id: int
    amount: Decimal


class PayrollResponse(BaseModel):
    """Schema for a payroll record."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID | None = None
    employee_id: int
    period_start_date: date | None
    period_end_date: date | None
    pay_date: date
    days_worked: int
    overtime_hours: Decimal
    monthly_rate: Decimal
    daily_rate: Decimal
    gross_pay: Decimal
    benefits: list[PayrollBenefitResponse]
    total_benefits: Decimal
    deductions: list[DeductionResponse]
    total_deductions: Decimal
    net_pay: Decimal


class PayrollListResponse(BaseModel):
    items: list[PayrollResponse]
    total: int


class BatchSkipResponse(BaseModel):
    employee_id: int
    status: str
    reason: str | None = None


class PayrollBatchResponse(BaseModel):
    """Schema for a batch run result."""

    created_count: int
    existing_count: int
    failed_count: int
    cancelled: bool = False
    skips: list[BatchSkipResponse]


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str
    code: str
    created_count: int | None = None
