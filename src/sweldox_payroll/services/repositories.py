"""Data access for the payroll runner.

The runner depends only on the protocols below; ``PayrollRepository``
implements all of them over a single SQLAlchemy async session.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sweldox_payroll.calculators.types import (
    MANDATORY_DEDUCTION_CODES,
    AttendanceRecord,
    BenefitLine,
    CompensationProfile,
    DeductionLine,
    DeductionType,
    PayrollBenefit,
    PayrollRecord,
)
from sweldox_payroll.errors import (
    CompensationNotFoundError,
    DeductionTypeNotFoundError,
    PayrollConflictError,
    PersistenceError,
)
from sweldox_payroll.models import (
    INACTIVE_STATUSES,
    Attendance,
    Benefit,
    Compensation,
    Deduction,
    Employee,
    Payroll,
)
from sweldox_payroll.models import DeductionType as DeductionTypeRow
from sweldox_payroll.models import PayrollBenefit as PayrollBenefitRow


class CompensationLookup(Protocol):
    async def get_compensation(self, employee_id: int) -> CompensationProfile:
        """Return the employee's compensation or raise CompensationNotFoundError."""
        ...


class AttendanceLookup(Protocol):
    async def get_attendance(
        self, employee_id: int, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        """Attendance within [period_start, period_end], ordered by date."""
        ...


class EmployeeDirectory(Protocol):
    async def active_employee_ids(self) -> list[int]:
        """Ids of employees eligible for payroll."""
        ...


class DeductionTypeLookup(Protocol):
    async def get_deduction_type(self, code: str) -> DeductionType | None:
        ...


class PayrollStore(Protocol):
    """Persistence for payroll records."""

    async def exists(self, employee_id: int, period_start: date, period_end: date) -> bool:
        ...

    async def persist(self, record: PayrollRecord) -> PayrollRecord:
        """Save atomically; raise PayrollConflictError on a duplicate period."""
        ...

    async def get(self, payroll_id: UUID) -> PayrollRecord | None:
        ...

    async def list_payrolls(
        self,
        period_start: date,
        period_end: date,
        employee_id: int | None = None,
    ) -> list[PayrollRecord]:
        ...


class PayrollRepository:
    """SQLAlchemy implementation of every payroll collaborator."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        """Roll back and wrap driver failures as PersistenceError."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(str(e)) from e

    # === Lookups ===

    async def get_compensation(self, employee_id: int) -> CompensationProfile:
        async with self._guard():
            result = await self.session.execute(
                select(Compensation)
                .where(Compensation.employee_id == employee_id)
                .options(selectinload(Compensation.benefits).selectinload(Benefit.benefit_type))
                .execution_options(populate_existing=True)
            )
            compensation = result.scalar_one_or_none()

        if compensation is None:
            raise CompensationNotFoundError(employee_id)

        return CompensationProfile(
            employee_id=employee_id,
            basic_salary=compensation.basic_salary,
            hourly_rate=compensation.hourly_rate,
            benefits=tuple(
                BenefitLine(
                    benefit_type_id=b.benefit_type_id,
                    amount=b.amount,
                    description=b.benefit_type.description,
                )
                for b in sorted(compensation.benefits, key=lambda b: b.benefit_type_id)
            ),
        )

    async def get_attendance(
        self, employee_id: int, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        async with self._guard():
            result = await self.session.execute(
                select(Attendance)
                .where(
                    Attendance.employee_id == employee_id,
                    Attendance.work_date >= period_start,
                    Attendance.work_date <= period_end,
                )
                .order_by(Attendance.work_date)
            )
            rows = result.scalars().all()

        return [
            AttendanceRecord(
                date=row.work_date,
                total_hours=row.total_hours,
                overtime_hours=row.overtime_hours,
            )
            for row in rows
        ]

    async def active_employee_ids(self) -> list[int]:
        async with self._guard():
            result = await self.session.execute(
                select(Employee.employee_id)
                .where(Employee.status.notin_(INACTIVE_STATUSES))
                .order_by(Employee.employee_id)
            )
            return list(result.scalars().all())

    async def get_deduction_type(self, code: str) -> DeductionType | None:
        async with self._guard():
            result = await self.session.execute(
                select(DeductionTypeRow).where(DeductionTypeRow.code == code)
            )
            row = result.scalar_one_or_none()

        if row is None:
            return None
        return DeductionType(
            code=row.code,
            description=row.description,
            deduction_type_id=row.deduction_type_id,
        )

    async def missing_deduction_codes(self) -> list[str]:
        """Mandatory deduction codes absent from the catalog."""
        async with self._guard():
            result = await self.session.execute(select(DeductionTypeRow.code))
            present = set(result.scalars().all())
        return [c.value for c in MANDATORY_DEDUCTION_CODES if c.value not in present]

    # === Payroll store ===

    async def exists(self, employee_id: int, period_start: date, period_end: date) -> bool:
        async with self._guard():
            result = await self.session.execute(
                select(Payroll.payroll_id).where(
                    Payroll.employee_id == employee_id,
                    Payroll.period_start_date == period_start,
                    Payroll.period_end_date == period_end,
                )
            )
            return result.first() is not None

    async def persist(self, record: PayrollRecord) -> PayrollRecord:
        """Insert the payroll with its lines in one transaction."""
        type_ids = await self._deduction_type_ids(
            [line.deduction_code for line in record.deductions]
        )

        row = Payroll(
            employee_id=record.employee_id,
            period_start_date=record.period_start_date,
            period_end_date=record.period_end_date,
            pay_date=record.pay_date,
            days_worked=record.days_worked,
            overtime=record.overtime_hours,
            monthly_rate=record.monthly_rate,
            daily_rate=record.daily_rate,
            gross_pay=record.gross_pay,
            total_benefits=record.total_benefits,
            total_deductions=record.total_deductions,
            net_pay=record.net_pay,
            deductions=[
                Deduction(
                    deduction_type_id=type_ids[line.deduction_code],
                    amount=line.amount,
                )
                for line in record.deductions
            ],
            benefits=[
                PayrollBenefitRow(benefit_type_id=b.benefit_type_id, amount=b.amount)
                for b in record.benefits
            ],
        )
        self.session.add(row)

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            # Unique index lost a race with a concurrent insert
            if record.period_start_date is not None and await self.exists(
                record.employee_id, record.period_start_date, record.period_end_date
            ):
                raise PayrollConflictError(
                    record.employee_id, record.period_start_date, record.period_end_date
                ) from e
            raise PersistenceError(str(e)) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(str(e)) from e

        return replace(record, payroll_id=row.payroll_id)

    async def get(self, payroll_id: UUID) -> PayrollRecord | None:
        async with self._guard():
            result = await self.session.execute(
                self._payroll_query().where(Payroll.payroll_id == payroll_id)
            )
            row = result.scalar_one_or_none()
        return self._to_record(row) if row is not None else None

    async def list_payrolls(
        self,
        period_start: date,
        period_end: date,
        employee_id: int | None = None,
    ) -> list[PayrollRecord]:
        query = self._payroll_query().where(
            Payroll.period_start_date >= period_start,
            Payroll.period_start_date <= period_end,
        )
        if employee_id is not None:
            query = query.where(Payroll.employee_id == employee_id)
        query = query.order_by(Payroll.period_start_date, Payroll.employee_id)

        async with self._guard():
            result = await self.session.execute(query)
            rows = result.scalars().all()
        return [self._to_record(row) for row in rows]

    # === Helpers ===

    async def _deduction_type_ids(self, codes: Sequence[str]) -> dict[str, int]:
        async with self._guard():
            result = await self.session.execute(
                select(DeductionTypeRow.code, DeductionTypeRow.deduction_type_id).where(
                    DeductionTypeRow.code.in_(codes)
                )
            )
            ids = {code: type_id for code, type_id in result.all()}

        for code in codes:
            if code not in ids:
                raise DeductionTypeNotFoundError(code)
        return ids

    @staticmethod
    def _payroll_query():
        # Refresh rows this session already holds so nested lines get loaded
        return (
            select(Payroll)
            .options(
                selectinload(Payroll.deductions).selectinload(Deduction.deduction_type),
                selectinload(Payroll.benefits),
            )
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _to_record(row: Payroll) -> PayrollRecord:
        order = {code.value: i for i, code in enumerate(MANDATORY_DEDUCTION_CODES)}
        deductions = sorted(
            row.deductions,
            key=lambda d: order.get(d.deduction_type.code, len(order)),
        )
        return PayrollRecord(
            payroll_id=row.payroll_id,
            employee_id=row.employee_id,
            period_start_date=row.period_start_date,
            period_end_date=row.period_end_date,
            pay_date=row.pay_date,
            days_worked=row.days_worked,
            overtime_hours=row.overtime,
            monthly_rate=row.monthly_rate,
            daily_rate=row.daily_rate,
            gross_pay=row.gross_pay,
            benefits=tuple(
                PayrollBenefit(benefit_type_id=b.benefit_type_id, amount=b.amount)
                for b in sorted(row.benefits, key=lambda b: b.benefit_type_id)
            ),
            total_benefits=row.total_benefits,
            deductions=tuple(
                DeductionLine(
                    deduction_code=d.deduction_type.code,
                    amount=d.amount,
                    description=d.deduction_type.description,
                )
                for d in deductions
            ),
            total_deductions=row.total_deductions,
            net_pay=row.net_pay,
        )
