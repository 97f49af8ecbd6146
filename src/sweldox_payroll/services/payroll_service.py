"""Payroll runner - single and batch payroll creation."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from sweldox_payroll.calculators.assembler import PayrollAssembler
from sweldox_payroll.calculators.types import (
    MANDATORY_DEDUCTION_CODES,
    DeductionType,
    PayrollRecord,
)
from sweldox_payroll.config import get_settings
from sweldox_payroll.errors import (
    BatchAbortedError,
    PayrollConflictError,
    PayrollNotFoundError,
    PayrollValidationError,
)
from sweldox_payroll.services.batch import BatchItemResult, BatchRunSummary
from sweldox_payroll.services.repositories import (
    AttendanceLookup,
    CompensationLookup,
    DeductionTypeLookup,
    EmployeeDirectory,
    PayrollRepository,
    PayrollStore,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_WINDOW = timedelta(days=15)


def resolve_date_range(
    start: date | None, end: date | None, today: date | None = None
) -> tuple[date, date]:
    """Fill in missing bounds and order them.

    A missing start is today; a missing end is start + 15 days; an
    inverted range is swapped.
    """
    if start is None:
        start = today or date.today()
    if end is None:
        end = start + DEFAULT_LIST_WINDOW
    if start > end:
        start, end = end, start
    return start, end


class PayrollRunner:
    """Creates payroll records for one employee or every active employee.

    Operations:
    - create_one: existence check, assemble, persist; every fault surfaces
    - create_batch: create_one per active employee, skipping failures
      until the skip budget is exhausted
    - preview: assemble without persisting
    - get_payroll / list_payrolls: read persisted records
    """

    def __init__(
        self,
        compensation: CompensationLookup,
        attendance: AttendanceLookup,
        employees: EmployeeDirectory,
        deduction_types: DeductionTypeLookup,
        store: PayrollStore,
        skip_limit: int | None = None,
    ):
        self.compensation = compensation
        self.attendance = attendance
        self.employees = employees
        self.deduction_types = deduction_types
        self.store = store
        self.skip_limit = (
            skip_limit if skip_limit is not None else get_settings().batch_skip_limit
        )

    @classmethod
    def for_session(
        cls, session: AsyncSession, skip_limit: int | None = None
    ) -> PayrollRunner:
        """Build a runner backed by the SQLAlchemy repository."""
        repo = PayrollRepository(session)
        return cls(repo, repo, repo, repo, repo, skip_limit=skip_limit)

    async def create_one(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        pay_date: date,
    ) -> PayrollRecord:
        """Create and persist a payroll for one employee.

        Raises:
            PayrollConflictError: a payroll already exists for the period.
            PayrollValidationError: malformed period or corrupt attendance.
            DeductionTypeNotFoundError: deduction catalog is incomplete.
            CompensationNotFoundError: employee has no compensation.
            PersistenceError: storage failure.
        """
        self._validate_period(period_start, period_end)

        if await self.store.exists(employee_id, period_start, period_end):
            logger.warning(
                "Payroll already exists for employee %s for period %s to %s. Skipping...",
                employee_id,
                period_start,
                period_end,
            )
            raise PayrollConflictError(employee_id, period_start, period_end)

        record = await self._build(employee_id, period_start, period_end, pay_date)
        saved = await self.store.persist(record)
        logger.debug("Created payroll %s for employee %s", saved.payroll_id, employee_id)
        return saved

    async def preview(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        pay_date: date,
    ) -> PayrollRecord:
        """Assemble a payroll without the existence check or persisting it."""
        self._validate_period(period_start, period_end)
        return await self._build(employee_id, period_start, period_end, pay_date)

    async def create_batch(
        self,
        period_start: date,
        period_end: date,
        pay_date: date,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchRunSummary:
        """Create payrolls for every active employee.

        Each employee is processed independently: an existing payroll or a
        failure is recorded as a skip and the run continues. When failures
        exceed the skip limit the run stops with BatchAbortedError, whose
        summary holds the payrolls created so far. Setting ``cancel_event``
        stops the run before the next employee.
        """
        self._validate_period(period_start, period_end)

        employee_ids = await self.employees.active_employee_ids()
        summary = BatchRunSummary(
            period_start=period_start, period_end=period_end, pay_date=pay_date
        )
        logger.info(
            "Starting payroll batch for %d employee(s), period %s to %s",
            len(employee_ids),
            period_start,
            period_end,
        )

        for employee_id in employee_ids:
            if cancel_event is not None and cancel_event.is_set():
                summary.cancelled = True
                logger.info(
                    "Payroll batch cancelled after %d of %d employee(s)",
                    summary.processed_count,
                    len(employee_ids),
                )
                break

            result = await self._process_batch_item(
                employee_id, period_start, period_end, pay_date
            )
            summary.record(result)

            if summary.exceeds_skip_limit(self.skip_limit):
                summary.aborted = True
                logger.error(
                    "Payroll batch aborted: %d failure(s) exceed skip limit %d; "
                    "%d payroll(s) created",
                    summary.failed_count,
                    self.skip_limit,
                    summary.created_count,
                )
                raise BatchAbortedError(summary, self.skip_limit)

        logger.info(
            "Payroll batch finished: %d created, %d existing, %d failed",
            summary.created_count,
            summary.existing_count,
            summary.failed_count,
        )
        return summary

    async def get_payroll(self, payroll_id: UUID) -> PayrollRecord:
        record = await self.store.get(payroll_id)
        if record is None:
            raise PayrollNotFoundError(payroll_id)
        return record

    async def list_payrolls(
        self,
        period_start: date | None = None,
        period_end: date | None = None,
        employee_id: int | None = None,
    ) -> list[PayrollRecord]:
        """Payrolls whose period starts within the resolved date range."""
        start, end = resolve_date_range(period_start, period_end)
        return await self.store.list_payrolls(start, end, employee_id=employee_id)

    async def _process_batch_item(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        pay_date: date,
    ) -> BatchItemResult:
        try:
            record = await self.create_one(employee_id, period_start, period_end, pay_date)
        except PayrollConflictError as e:
            return BatchItemResult.existing(employee_id, str(e))
        except Exception as e:
            logger.error(
                "Failed to process payroll for employee %s. Reason: %s", employee_id, e
            )
            return BatchItemResult.failed(employee_id, f"{type(e).__name__}: {e}")
        return BatchItemResult.created(employee_id, record.payroll_id)

    async def _build(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        pay_date: date,
    ) -> PayrollRecord:
        profile = await self.compensation.get_compensation(employee_id)
        attendance = await self.attendance.get_attendance(
            employee_id, period_start, period_end
        )
        catalog = await self._load_deduction_catalog()

        assembler = PayrollAssembler(catalog)
        return assembler.assemble(
            profile,
            attendance,
            profile.benefits,
            period_start,
            period_end,
            pay_date,
        )

    async def _load_deduction_catalog(self) -> dict[str, DeductionType]:
        """Mandatory deduction types found in the catalog.

        Missing codes are left out; the assembler rejects an incomplete
        catalog.
        """
        catalog: dict[str, DeductionType] = {}
        for code in MANDATORY_DEDUCTION_CODES:
            deduction_type = await self.deduction_types.get_deduction_type(code.value)
            if deduction_type is not None:
                catalog[code.value] = deduction_type
        return catalog

    @staticmethod
    def _validate_period(period_start: date, period_end: date) -> None:
        if period_start > period_end:
            raise PayrollValidationError(
                f"Period start {period_start} is after period end {period_end}"
            )
