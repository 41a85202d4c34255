"""Payroll period, payroll item, and payslip models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_pro.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_pro.models.employee import Employee


_STATUS_CHECK = "status IN ('pending', 'processing', 'completed', 'failed')"


# ===== Payroll Periods =====


class PayrollPeriod(Base, TimestampMixin):
    """Administrator-defined pay period."""

    __tablename__ = "payroll_periods"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="payroll_periods_status_check"),
        CheckConstraint("period_end > period_start", name="payroll_periods_dates_check"),
    )

    items: Mapped[list[PayrollItem]] = relationship(back_populates="period")


class PayrollItem(Base, TimestampMixin):
    """One employee's pay for one period, with derived totals."""

    __tablename__ = "payroll_items"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_periods.id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=0)
    overtime_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    overtime_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    allowances: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    bonuses: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    tax_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    insurance_deductions: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=0
    )
    other_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("period_id", "employee_id", name="payroll_items_period_employee_unique"),
        CheckConstraint(_STATUS_CHECK, name="payroll_items_status_check"),
    )

    period: Mapped[PayrollPeriod] = relationship(back_populates="items")
    employee: Mapped[Employee] = relationship()


# ===== Payslips =====


class Payslip(Base, TimestampMixin):
    """Monthly salary snapshot from the flat-rate payslip model.

    (employee_id, month, year) is deliberately not unique; see
    PayslipService.generate_payslip.
    """

    __tablename__ = "payslips"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    month: Mapped[str] = mapped_column(String, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    allowances: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    generated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    employee: Mapped[Employee] = relationship()
