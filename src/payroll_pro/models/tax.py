"""Tax rate reference data and per-employee tax details."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_pro.models.base import Base, TimestampMixin


class FilingStatus(str, Enum):
    """Tax filing status."""

    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_HOUSEHOLD = "head_household"


class TaxRate(Base, TimestampMixin):
    """Income bracket with a percentage rate (22 means 22%)."""

    __tablename__ = "tax_rates"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    tax_type: Mapped[str] = mapped_column(String, nullable=False)
    state_code: Mapped[str | None] = mapped_column(String, nullable=True)
    locality: Mapped[str | None] = mapped_column(String, nullable=True)
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    income_from: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    income_to: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "tax_type IN ('federal', 'state', 'local')",
            name="tax_rates_type_check",
        ),
        CheckConstraint("income_to >= income_from", name="tax_rates_range_check"),
    )


class EmployeeTaxDetails(Base, TimestampMixin):
    """Withholding details for one employee and tax year."""

    __tablename__ = "employee_tax_details"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    filing_status: Mapped[str] = mapped_column(
        String, nullable=False, default=FilingStatus.SINGLE.value
    )
    allowances: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    additional_withholding: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    state_code: Mapped[str | None] = mapped_column(String, nullable=True)
    locality: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "tax_year", name="employee_tax_details_year_unique"),
        CheckConstraint(
            "filing_status IN ('single', 'married_joint', 'married_separate', 'head_household')",
            name="employee_tax_details_filing_status_check",
        ),
        CheckConstraint("allowances >= 0", name="employee_tax_details_allowances_check"),
    )
