"""Flat-rate payslip model.

This is separate from the period-based payroll calculation and from the tax
resolver: allowances and deductions are fixed shares of gross salary and the
employee's stored deduction fields are ignored.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from payroll_pro.calculators.payroll_calculator import to_decimal
from payroll_pro.calculators.types import PayslipAmounts

ALLOWANCE_RATE = Decimal("0.10")
DEDUCTION_RATE = Decimal("0.15")


def calculate_payslip_amounts(gross_salary: Any) -> PayslipAmounts:
    """Allowances 10%, deductions 15%, net = gross + allowances - deductions."""
    basic = to_decimal(gross_salary)
    allowances = basic * ALLOWANCE_RATE
    deductions = basic * DEDUCTION_RATE
    return PayslipAmounts(
        basic_salary=basic,
        allowances=allowances,
        deductions=deductions,
        net_salary=basic + allowances - deductions,
    )
