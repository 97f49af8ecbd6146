"""Payroll API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from sweldox_payroll.api.dependencies import Runner
from sweldox_payroll.api.schemas import (
    BatchSkipResponse,
    ErrorResponse,
    PayrollBatchCreate,
    PayrollBatchResponse,
    PayrollCreate,
    PayrollListResponse,
    PayrollResponse,
)

router = APIRouter(prefix="/payrolls", tags=["payrolls"])


@router.post(
    "",
    response_model=PayrollResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_payroll(runner: Runner, payload: PayrollCreate) -> PayrollResponse:
    """Generate the payroll for one employee and period."""
    record = await runner.create_one(
        payload.employee_id,
        payload.period_start_date,
        payload.period_end_date,
        payload.pay_date,
    )
    return PayrollResponse.model_validate(record)


@router.post(
    "/batch",
    response_model=PayrollBatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"model": ErrorResponse}},
)
async def create_payroll_batch(
    runner: Runner, payload: PayrollBatchCreate
) -> PayrollBatchResponse:
    """Generate payrolls for every active employee."""
    summary = await runner.create_batch(
        payload.period_start_date,
        payload.period_end_date,
        payload.pay_date,
    )
    return PayrollBatchResponse(
        created_count=summary.created_count,
        existing_count=summary.existing_count,
        failed_count=summary.failed_count,
        cancelled=summary.cancelled,
        skips=[
            BatchSkipResponse(
                employee_id=r.employee_id, status=r.status.value, reason=r.reason
            )
            for r in summary.skips()
        ],
    )


@router.get("", response_model=PayrollListResponse)
async def list_payrolls(
    runner: Runner,
    period_start_date: date | None = None,
    period_end_date: date | None = None,
    employee_id: Annotated[int | None, Query(ge=1)] = None,
) -> PayrollListResponse:
    """List payrolls whose period starts within the given range."""
    records = await runner.list_payrolls(
        period_start_date, period_end_date, employee_id=employee_id
    )
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get(
    "/{payroll_id}",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(
    runner: Runner,
    payroll_id: Annotated[UUID, Path()],
) -> PayrollResponse:
    """Get a specific payroll by ID."""
    record = await runner.get_payroll(payroll_id)
    return PayrollResponse.model_validate(record)
