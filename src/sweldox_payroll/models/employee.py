"""Employee, compensation and benefit models."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sweldox_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from sweldox_payroll.models.attendance import Attendance

# Statuses excluded from payroll runs
INACTIVE_STATUSES = ("separated", "terminated")


class Employee(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employee"

    employee_id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="regular")

    # Relationships
    compensation: Mapped[Compensation | None] = relationship(
        back_populates="employee", uselist=False
    )
    attendances: Mapped[list[Attendance]] = relationship(back_populates="employee")


class Compensation(Base, TimestampMixin):
    """Employee compensation (1:1 with employee)."""

    __tablename__ = "compensation"

    compensation_id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    basic_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("basic_salary > 0", name="compensation_basic_salary_positive"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="compensation")
    benefits: Mapped[list[Benefit]] = relationship(
        back_populates="compensation", cascade="all, delete-orphan"
    )


class BenefitType(Base):
    """Benefit catalog entry (meal, clothing, phone, rice allowance...)."""

    __tablename__ = "benefit_type"

    benefit_type_id: Mapped[int] = mapped_column(primary_key=True)
    description: Mapped[str] = mapped_column(String, nullable=False)


class Benefit(Base):
    """Recurring benefit on a compensation profile."""

    __tablename__ = "benefit"

    benefit_id: Mapped[int] = mapped_column(primary_key=True)
    compensation_id: Mapped[int] = mapped_column(
        ForeignKey("compensation.compensation_id", ondelete="CASCADE"),
        nullable=False,
    )
    benefit_type_id: Mapped[int] = mapped_column(
        ForeignKey("benefit_type.benefit_type_id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    compensation: Mapped[Compensation] = relationship(back_populates="benefits")
    benefit_type: Mapped[BenefitType] = relationship()
