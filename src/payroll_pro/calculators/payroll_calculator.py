"""Gross and net pay for a single payroll item."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_pro.calculators.types import PayrollItemAmounts

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a form value to Decimal; missing or non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def compute_payroll_item(
    base_salary: Any,
    overtime_hours: Any = None,
    overtime_rate: Any = None,
    allowances: Any = None,
    bonuses: Any = None,
    tax_deductions: Any = None,
    insurance_deductions: Any = None,
    other_deductions: Any = None,
) -> PayrollItemAmounts:
    """Compute overtime, gross and net pay.

    Net pay is not floored at zero; a negative result is returned as is.
    """
    overtime_pay = to_decimal(overtime_hours) * to_decimal(overtime_rate)
    gross_pay = (
        to_decimal(base_salary)
        + overtime_pay
        + to_decimal(allowances)
        + to_decimal(bonuses)
    )
    net_pay = (
        gross_pay
        - to_decimal(tax_deductions)
        - to_decimal(insurance_deductions)
        - to_decimal(other_deductions)
    )
    return PayrollItemAmounts(
        overtime_pay=overtime_pay,
        gross_pay=gross_pay,
        net_pay=net_pay,
    )
