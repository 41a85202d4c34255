"""Type definitions for the calculation core."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TaxType(str, Enum):
    """Tax jurisdiction levels."""

    FEDERAL = "federal"
    STATE = "state"
    LOCAL = "local"


class AttendanceStatus(str, Enum):
    """Attendance status values."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


@dataclass(frozen=True)
class PayrollItemAmounts:
    """Derived amounts for one payroll item."""

    overtime_pay: Decimal
    gross_pay: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class PayslipAmounts:
    """Flat-rate payslip breakdown."""

    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class TaxPreview:
    """Federal, state and local tax for one income figure."""

    federal: Decimal
    state: Decimal
    local: Decimal

    @property
    def total(self) -> Decimal:
        return self.federal + self.state + self.local


@dataclass(frozen=True)
class ShiftDuration:
    """Minutes worked between clock-in and clock-out.

    Negative when time_out precedes time_in (no overnight handling).
    """

    total_minutes: int

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60

    def __str__(self) -> str:
        return f"{self.hours}h {self.minutes}m"
