"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sweldox_payroll.calculators.types import (
    AttendanceRecord,
    BenefitLine,
    CompensationProfile,
    DeductionType,
    PayrollRecord,
)
from sweldox_payroll.errors import CompensationNotFoundError, PayrollConflictError
from sweldox_payroll.models import (
    Attendance,
    Base,
    Benefit,
    BenefitType,
    Compensation,
    Employee,
)
from sweldox_payroll.models import DeductionType as DeductionTypeRow

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PERIOD_START = date(2026, 1, 1)
PERIOD_END = date(2026, 1, 15)
PAY_DATE = date(2026, 1, 20)

RICE_SUBSIDY_ID = 1
PHONE_ALLOWANCE_ID = 2

DEDUCTION_CATALOG = {
    "SSS": DeductionType(code="SSS", description="Social Security System", deduction_type_id=1),
    "PHIC": DeductionType(code="PHIC", description="PhilHealth", deduction_type_id=2),
    "HDMF": DeductionType(code="HDMF", description="Pag-IBIG Fund", deduction_type_id=3),
    "TAX": DeductionType(code="TAX", description="Withholding Tax", deduction_type_id=4),
}

# employee_id -> (basic_salary, hourly_rate, status)
SEED_EMPLOYEES = {
    1: (Decimal("30000.00"), Decimal("178.57"), "regular"),
    2: (Decimal("20000.00"), Decimal("119.05"), "regular"),
    3: (Decimal("25000.00"), Decimal("148.81"), "probationary"),
    4: (Decimal("18000.00"), Decimal("107.14"), "regular"),
    5: (Decimal("45000.00"), Decimal("267.86"), "regular"),
    6: (Decimal("22000.00"), Decimal("130.95"), "separated"),
}


def work_days(start: date, count: int) -> list[date]:
    """Consecutive calendar days starting at ``start``."""
    return [start + timedelta(days=i) for i in range(count)]


# ============================================================================
# Database fixtures
# ============================================================================


@pytest_asyncio.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_db(session: AsyncSession) -> AsyncSession:
    """Catalogs, six employees (one separated) and employee 1's attendance."""
    session.add_all(
        DeductionTypeRow(
            deduction_type_id=dt.deduction_type_id,
            code=dt.code,
            description=dt.description,
        )
        for dt in DEDUCTION_CATALOG.values()
    )
    session.add_all(
        [
            BenefitType(benefit_type_id=RICE_SUBSIDY_ID, description="Rice Subsidy"),
            BenefitType(benefit_type_id=PHONE_ALLOWANCE_ID, description="Phone Allowance"),
        ]
    )

    for employee_id, (salary, hourly, status) in SEED_EMPLOYEES.items():
        session.add(
            Employee(
                employee_id=employee_id,
                first_name=f"Employee{employee_id}",
                last_name="Santos",
                status=status,
            )
        )
        benefits = []
        if employee_id == 1:
            benefits = [
                Benefit(benefit_type_id=RICE_SUBSIDY_ID, amount=Decimal("1500.00")),
                Benefit(benefit_type_id=PHONE_ALLOWANCE_ID, amount=Decimal("500.00")),
            ]
        session.add(
            Compensation(
                compensation_id=employee_id,
                employee_id=employee_id,
                basic_salary=salary,
                hourly_rate=hourly,
                benefits=benefits,
            )
        )

    # Ten 8-hour days inside the period, one outside it
    for day in work_days(PERIOD_START, 10):
        session.add(
            Attendance(
                employee_id=1,
                work_date=day,
                total_hours=Decimal("8.00"),
                overtime_hours=Decimal("0.00"),
            )
        )
    session.add(
        Attendance(
            employee_id=1,
            work_date=PERIOD_END + timedelta(days=1),
            total_hours=Decimal("8.00"),
            overtime_hours=Decimal("0.00"),
        )
    )

    await session.commit()
    return session


# ============================================================================
# In-memory collaborators
# ============================================================================


class InMemoryPayrollBackend:
    """Implements every runner collaborator over plain dicts."""

    def __init__(self) -> None:
        self.profiles: dict[int, CompensationProfile] = {}
        self.attendance: dict[int, list[AttendanceRecord]] = {}
        self.employee_ids: list[int] = []
        self.catalog: dict[str, DeductionType] = dict(DEDUCTION_CATALOG)
        self.payrolls: dict[UUID, PayrollRecord] = {}
        self.persist_calls = 0
        self.on_persist: Callable[[PayrollRecord], None] | None = None

    def add_employee(
        self,
        employee_id: int,
        basic_salary: Decimal = Decimal("30000.00"),
        hourly_rate: Decimal = Decimal("178.57"),
        benefits: tuple[BenefitLine, ...] = (),
        attendance: list[AttendanceRecord] | None = None,
    ) -> None:
        self.employee_ids.append(employee_id)
        self.profiles[employee_id] = CompensationProfile(
            employee_id=employee_id,
            basic_salary=basic_salary,
            hourly_rate=hourly_rate,
            benefits=benefits,
        )
        self.attendance[employee_id] = attendance or []

    async def get_compensation(self, employee_id: int) -> CompensationProfile:
        if employee_id not in self.profiles:
            raise CompensationNotFoundError(employee_id)
        return self.profiles[employee_id]

    async def get_attendance(
        self, employee_id: int, period_start: date, period_end: date
    ) -> list[AttendanceRecord]:
        return [
            r
            for r in self.attendance.get(employee_id, [])
            if period_start <= r.date <= period_end
        ]

    async def active_employee_ids(self) -> list[int]:
        return list(self.employee_ids)

    async def get_deduction_type(self, code: str) -> DeductionType | None:
        return self.catalog.get(code)

    async def exists(self, employee_id: int, period_start: date, period_end: date) -> bool:
        return any(
            (p.employee_id, p.period_start_date, p.period_end_date)
            == (employee_id, period_start, period_end)
            for p in self.payrolls.values()
        )

    async def persist(self, record: PayrollRecord) -> PayrollRecord:
        self.persist_calls += 1
        if self.on_persist is not None:
            self.on_persist(record)
        if await self.exists(
            record.employee_id, record.period_start_date, record.period_end_date
        ):
            raise PayrollConflictError(
                record.employee_id, record.period_start_date, record.period_end_date
            )
        saved = replace(record, payroll_id=uuid4())
        self.payrolls[saved.payroll_id] = saved
        return saved

    async def get(self, payroll_id: UUID) -> PayrollRecord | None:
        return self.payrolls.get(payroll_id)

    async def list_payrolls(
        self,
        period_start: date,
        period_end: date,
        employee_id: int | None = None,
    ) -> list[PayrollRecord]:
        return [
            p
            for p in self.payrolls.values()
            if period_start <= p.period_start_date <= period_end
            and (employee_id is None or p.employee_id == employee_id)
        ]


@pytest.fixture
def backend() -> InMemoryPayrollBackend:
    return InMemoryPayrollBackend()
