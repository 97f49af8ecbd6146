"""Payroll, deduction and payroll benefit models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sweldox_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from sweldox_payroll.models.employee import BenefitType, Employee


class DeductionType(Base):
    """Deduction catalog entry (SSS, PHIC, HDMF, TAX)."""

    __tablename__ = "deduction_type"

    deduction_type_id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String, nullable=False)


class Payroll(Base, TimestampMixin):
    """Generated payroll for one employee and period. Immutable once saved."""

    __tablename__ = "payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    period_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    period_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_worked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    overtime: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    monthly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_benefits: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "period_start_date",
            "period_end_date",
            name="payroll_employee_period_unique",
        ),
        CheckConstraint(
            "period_end_date IS NULL OR period_end_date >= period_start_date",
            name="payroll_period_dates_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship()
    deductions: Mapped[list[Deduction]] = relationship(
        back_populates="payroll", cascade="all, delete-orphan"
    )
    benefits: Mapped[list[PayrollBenefit]] = relationship(
        back_populates="payroll", cascade="all, delete-orphan"
    )


class Deduction(Base):
    """Deduction line on a payroll."""

    __tablename__ = "deduction"

    deduction_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
    )
    deduction_type_id: Mapped[int] = mapped_column(
        ForeignKey("deduction_type.deduction_type_id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    payroll: Mapped[Payroll] = relationship(back_populates="deductions")
    deduction_type: Mapped[DeductionType] = relationship()


class PayrollBenefit(Base):
    """Benefit snapshot taken when the payroll was generated."""

    __tablename__ = "payroll_benefit"

    payroll_benefit_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
    )
    benefit_type_id: Mapped[int] = mapped_column(
        ForeignKey("benefit_type.benefit_type_id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    payroll: Mapped[Payroll] = relationship(back_populates="benefits")
    benefit_type: Mapped[BenefitType] = relationship()
