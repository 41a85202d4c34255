"""Employee and user profile models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_pro.models.base import Base, TimestampMixin


class PayPeriod(str, Enum):
    """How often the stored gross salary is paid."""

    MONTHLY = "MONTHLY"
    BI_WEEKLY = "BI-WEEKLY"
    WEEKLY = "WEEKLY"


class Role(str, Enum):
    """Profile role; drives which screens the client exposes."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class Employee(Base, TimestampMixin):
    """Employee record maintained by administrators."""

    __tablename__ = "employees"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    gross_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    pay_period: Mapped[str] = mapped_column(
        String, nullable=False, default=PayPeriod.MONTHLY.value
    )
    tax_deduction: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    insurance_deduction: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    other_deductions: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint("gross_salary >= 0", name="employees_gross_salary_check"),
        CheckConstraint(
            "tax_deduction >= 0 AND insurance_deduction >= 0 AND other_deductions >= 0",
            name="employees_deductions_check",
        ),
        CheckConstraint(
            "pay_period IN ('MONTHLY', 'BI-WEEKLY', 'WEEKLY')",
            name="employees_pay_period_check",
        ),
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class Profile(Base, TimestampMixin):
    """Application user profile, keyed by the auth provider's identity id."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str] = mapped_column(String, nullable=False, default="")
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default=Role.EMPLOYEE.value)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')", name="profiles_role_check"),
    )
