"""Employee records and the employee self-service overview."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.calculators.payroll_calculator import to_decimal
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import NotFoundError, ValidationError
from payroll_pro.models import AttendanceRecord, Employee, LeaveRequest, PayPeriod, Payslip

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("gross_salary", "tax_deduction", "insurance_deduction", "other_deductions")
EDITABLE_FIELDS = frozenset({
    "first_name",
    "last_name",
    "email",
    "phone",
    "department",
    "position",
    "hire_date",
    "pay_period",
    *MONEY_FIELDS,
})


@dataclass
class EmployeeOverview:
    """Everything the employee dashboard shows for one employee."""

    employee: Employee
    attendance: list[AttendanceRecord] = field(default_factory=list)
    leaves: list[LeaveRequest] = field(default_factory=list)
    payslips: list[Payslip] = field(default_factory=list)


def _validate_fields(values: dict[str, Any]) -> dict[str, Any]:
    """Check and normalize employee fields, returning the cleaned copy."""
    cleaned = dict(values)

    for name in MONEY_FIELDS:
        if name in cleaned:
            amount = to_decimal(cleaned[name])
            if amount < 0:
                raise ValidationError(f"{name} must not be negative", field=name)
            cleaned[name] = amount

    if "pay_period" in cleaned:
        try:
            cleaned["pay_period"] = PayPeriod(cleaned["pay_period"]).value
        except ValueError:
            raise ValidationError(
                f"Invalid pay period: {cleaned['pay_period']}", field="pay_period"
            )

    for name in ("first_name", "last_name", "email"):
        if name in cleaned and not str(cleaned[name] or "").strip():
            raise ValidationError(f"{name} is required", field=name)

    if "email" in cleaned:
        cleaned["email"] = cleaned["email"].strip().lower()

    return cleaned


class EmployeeService:
    """Administrator maintenance of employee records.

    Employees are never hard-deleted.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_employee(
        self,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: date,
        gross_salary: Any,
        pay_period: str = PayPeriod.MONTHLY.value,
        phone: str | None = None,
        department: str | None = None,
        position: str | None = None,
        tax_deduction: Any = None,
        insurance_deduction: Any = None,
        other_deductions: Any = None,
    ) -> Employee:
        """Create an employee record."""
        values = _validate_fields({
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "gross_salary": gross_salary,
            "pay_period": pay_period,
            "tax_deduction": tax_deduction,
            "insurance_deduction": insurance_deduction,
            "other_deductions": other_deductions,
        })
        employee = Employee(
            hire_date=hire_date,
            phone=phone,
            department=department,
            position=position,
            **values,
        )
        self.session.add(employee)
        try:
            await commit_or_raise(self.session, "create employee")
        except IntegrityError:
            raise ValidationError(
                f"An employee with email {values['email']} already exists", field="email"
            )

        logger.info("Created employee %s (%s)", employee.id, employee.email)
        return employee

    async def update_employee(self, employee_id: UUID, **changes: Any) -> Employee:
        """Apply administrator edits to an employee."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown employee fields: {', '.join(sorted(unknown))}")

        employee = await self.get_employee(employee_id)
        for name, value in _validate_fields(changes).items():
            setattr(employee, name, value)

        try:
            await commit_or_raise(self.session, "update employee")
        except IntegrityError:
            raise ValidationError("An employee with this email already exists", field="email")

        logger.info("Updated employee %s: %s", employee_id, ", ".join(sorted(changes)))
        return employee

    async def get_employee(self, employee_id: UUID) -> Employee:
        """Get an employee by id."""
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def get_employee_by_email(self, email: str) -> Employee:
        """Get an employee by (case-insensitive) email."""
        result = await self.session.execute(
            select(Employee).where(Employee.email == email.strip().lower())
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError("Employee", email)
        return employee

    async def list_employees(self, search: str | None = None) -> list[Employee]:
        """List employees by last name, optionally filtered by name or position."""
        query = select(Employee)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Employee.first_name.ilike(pattern),
                    Employee.last_name.ilike(pattern),
                    Employee.position.ilike(pattern),
                )
            )
        result = await self.session.execute(
            query.order_by(Employee.last_name, Employee.first_name)
        )
        return list(result.scalars().all())

    async def get_employee_overview(self, email: str) -> EmployeeOverview:
        """Load an employee with attendance, leaves and payslips, newest first."""
        employee = await self.get_employee_by_email(email)

        attendance = await self.session.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.employee_id == employee.id)
            .order_by(AttendanceRecord.date.desc())
        )
        leaves = await self.session.execute(
            select(LeaveRequest)
            .where(LeaveRequest.employee_id == employee.id)
            .order_by(LeaveRequest.start_date.desc())
        )
        payslips = await self.session.execute(
            select(Payslip)
            .where(Payslip.employee_id == employee.id)
            .order_by(Payslip.year.desc(), Payslip.month.desc())
        )

        return EmployeeOverview(
            employee=employee,
            attendance=list(attendance.scalars().all()),
            leaves=list(leaves.scalars().all()),
            payslips=list(payslips.scalars().all()),
        )
