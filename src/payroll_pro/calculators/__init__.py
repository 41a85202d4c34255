"""Payroll, tax and time calculations."""

from payroll_pro.calculators.payroll_calculator import compute_payroll_item, to_decimal
from payroll_pro.calculators.payslip import calculate_payslip_amounts
from payroll_pro.calculators.tax_resolver import DEFAULT_RATES, TaxRateResolver
from payroll_pro.calculators.time_utils import (
    calculate_duration,
    derive_attendance_status,
    leave_span_days,
)
from payroll_pro.calculators.types import (
    AttendanceStatus,
    PayrollItemAmounts,
    PayslipAmounts,
    ShiftDuration,
    TaxPreview,
    TaxType,
)

__all__ = [
    "AttendanceStatus",
    "DEFAULT_RATES",
    "PayrollItemAmounts",
    "PayslipAmounts",
    "ShiftDuration",
    "TaxPreview",
    "TaxRateResolver",
    "TaxType",
    "calculate_duration",
    "calculate_payslip_amounts",
    "compute_payroll_item",
    "derive_attendance_status",
    "leave_span_days",
    "to_decimal",
]
