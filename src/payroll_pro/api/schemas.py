"""Pydantic schemas for API request/response models."""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payroll_pro.calculators.payroll_calculator import to_decimal


# ============================================================================
# Employees
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: date
    gross_salary: Decimal = Field(ge=0)
    pay_period: str = "MONTHLY"
    tax_deduction: Decimal = Field(default=Decimal("0"), ge=0)
    insurance_deduction: Decimal = Field(default=Decimal("0"), ge=0)
    other_deductions: Decimal = Field(default=Decimal("0"), ge=0)


class EmployeeUpdate(BaseModel):
    """Schema for editing an employee; only supplied fields change."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: date | None = None
    gross_salary: Decimal | None = None
    pay_period: str | None = None
    tax_deduction: Decimal | None = None
    insurance_deduction: Decimal | None = None
    other_deductions: Decimal | None = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: date
    gross_salary: Decimal
    pay_period: str
    tax_deduction: Decimal
    insurance_deduction: Decimal
    other_deductions: Decimal
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Attendance
# ============================================================================


class ClockRequest(BaseModel):
    """Clock-in or clock-out; `at` defaults to now."""

    employee_id: UUID
    at: datetime | None = None


class AbsentRequest(BaseModel):
    employee_id: UUID
    date: dt.date


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    date: dt.date
    time_in: datetime | None = None
    time_out: datetime | None = None
    status: str
    duration: str | None = None
    employee_name: str | None = None
    department: str | None = None


class DurationResponse(BaseModel):
    time_in: str
    time_out: str
    total_minutes: int
    hours: int
    minutes: int
    display: str


# ============================================================================
# Leaves
# ============================================================================


class LeaveCreate(BaseModel):
    """Leave request; validated by the service so errors carry its messages."""

    employee_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    type: str = "annual"
    reason: str | None = None


class LeaveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    start_date: date
    end_date: date
    type: str
    reason: str
    status: str
    days: int
    employee_name: str | None = None
    created_at: datetime


class LeaveAllotmentResponse(BaseModel):
    type: str
    available_days: int


# ============================================================================
# Payroll
# ============================================================================


class PayrollAmountsInput(BaseModel):
    """Payroll form amounts. Omitted values count as zero."""

    base_salary: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    bonuses: Decimal = Decimal("0")
    tax_deductions: Decimal = Decimal("0")
    insurance_deductions: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")
    notes: str = ""

    @field_validator(
        "base_salary",
        "overtime_hours",
        "overtime_rate",
        "allowances",
        "bonuses",
        "tax_deductions",
        "insurance_deductions",
        "other_deductions",
        mode="before",
    )
    @classmethod
    def coerce_amount(cls, value: Any) -> Decimal:
        """Blank, null or non-numeric form values count as zero."""
        return to_decimal(value)


class PayrollCreate(BaseModel):
    """Create a period and item; amounts default to the employee's record."""

    employee_id: UUID
    period_start: date | None = None
    period_end: date | None = None
    amounts: PayrollAmountsInput | None = None


class PayrollCalculation(BaseModel):
    overtime_pay: Decimal
    gross_pay: Decimal
    net_pay: Decimal


class PayrollItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    period_id: UUID
    employee_id: UUID
    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_pay: Decimal
    allowances: Decimal
    bonuses: Decimal
    tax_deductions: Decimal
    insurance_deductions: Decimal
    other_deductions: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    status: str
    notes: str


class PeriodStatusUpdate(BaseModel):
    status: str


class PayrollPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    period_start: date
    period_end: date
    status: str


class PayrollHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    period_id: UUID
    employee_id: UUID
    first_name: str
    last_name: str
    department: str | None = None
    position: str | None = None
    period_start: date
    period_end: date
    period_status: str
    base_salary: Decimal
    overtime_hours: Decimal
    overtime_rate: Decimal
    overtime_pay: Decimal
    allowances: Decimal
    bonuses: Decimal
    tax_deductions: Decimal
    insurance_deductions: Decimal
    other_deductions: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    status: str
    notes: str
    created_at: datetime


# ============================================================================
# Payslips
# ============================================================================


class PayslipCreate(BaseModel):
    employee_id: UUID
    month: str | None = None
    year: int | None = None


class PayslipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    month: str
    year: int
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    generated_date: datetime


# ============================================================================
# Tax
# ============================================================================


class TaxDetailsUpsert(BaseModel):
    employee_id: UUID
    tax_year: int
    filing_status: str = "single"
    allowances: int = 0
    additional_withholding: Decimal = Decimal("0")
    state_code: str | None = None
    locality: str | None = None


class TaxDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    tax_year: int
    filing_status: str
    allowances: int
    additional_withholding: Decimal
    state_code: str | None = None
    locality: str | None = None


class TaxPreviewRequest(BaseModel):
    income: Decimal


class TaxPreviewResponse(BaseModel):
    federal: Decimal
    state: Decimal
    local: Decimal
    total: Decimal


# ============================================================================
# Auth
# ============================================================================


class SignUpRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str
    full_name: str
    phone_number: str = ""
    department: str = ""
    role: str = "employee"


class SignInRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str


class SignOutRequest(BaseModel):
    access_token: str


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str
    phone_number: str
    department: str
    role: str


class SignInResponse(BaseModel):
    access_token: str
    expires_at: datetime | None = None
    profile: ProfileResponse


# ============================================================================
# Dashboard & common
# ============================================================================


class DashboardStatsResponse(BaseModel):
    total_employees: int
    total_payroll: Decimal
    average_salary: Decimal
    departments: int
    pending_payroll_periods: int


class ActivityItemResponse(BaseModel):
    """Activity feed entry; time is relative, e.g. "3 days ago"."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: str
    user: str
    time: str
    created_at: datetime


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
