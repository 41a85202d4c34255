"""Payslip generation."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.calculators.payslip import calculate_payslip_amounts
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import NotFoundError, ValidationError
from payroll_pro.models import Employee, Payslip
from payroll_pro.services.dashboard_service import record_activity

logger = logging.getLogger(__name__)


def current_month(today: date | None = None) -> tuple[str, int]:
    """Full month name and year for a date, e.g. ("October", 2026)."""
    today = today or date.today()
    return today.strftime("%B"), today.year


def render_payslip(payslip: Payslip, employee: Employee) -> str:
    """Plain-text payslip."""
    return "\n".join([
        "PayrollPro - Payslip",
        "",
        f"Employee Name: {employee.full_name}",
        f"Department: {employee.department or ''}",
        f"Position: {employee.position or ''}",
        f"Period: {payslip.month} {payslip.year}",
        "",
        "Salary Breakdown:",
        f"  Basic Salary: ${payslip.basic_salary:.2f}",
        f"  Allowances: ${payslip.allowances:.2f}",
        f"  Deductions: ${payslip.deductions:.2f}",
        "",
        f"Net Salary: ${payslip.net_salary:.2f}",
    ])


class PayslipService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def generate_payslip(
        self,
        employee_id: UUID,
        month: str | None = None,
        year: int | None = None,
    ) -> Payslip:
        """Insert a payslip from the employee's current gross salary.

        Every call inserts a new row, so generating twice for the same
        month yields two payslips.
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)

        default_month, default_year = current_month()
        month = (month or default_month).strip()
        year = year if year is not None else default_year
        if not month:
            raise ValidationError("Month is required", field="month")

        amounts = calculate_payslip_amounts(employee.gross_salary)
        payslip = Payslip(
            employee_id=employee_id,
            month=month,
            year=year,
            basic_salary=amounts.basic_salary,
            allowances=amounts.allowances,
            deductions=amounts.deductions,
            net_salary=amounts.net_salary,
        )
        self.session.add(payslip)
        record_activity(
            self.session, f"Payslip generated for {employee.full_name} ({month} {year})"
        )
        await commit_or_raise(self.session, "generate payslip")

        logger.info(
            "Generated payslip %s for employee %s (%s %s): net=%s",
            payslip.id,
            employee_id,
            month,
            year,
            payslip.net_salary,
        )
        return payslip

    async def list_payslips(self, employee_id: UUID) -> list[Payslip]:
        """An employee's payslips, most recently generated first."""
        result = await self.session.execute(
            select(Payslip)
            .where(Payslip.employee_id == employee_id)
            .order_by(Payslip.generated_date.desc(), Payslip.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_payslip(self, payslip_id: UUID) -> Payslip:
        result = await self.session.execute(
            select(Payslip).options(selectinload(Payslip.employee)).where(Payslip.id == payslip_id)
        )
        payslip = result.scalar_one_or_none()
        if payslip is None:
            raise NotFoundError("Payslip", payslip_id)
        return payslip
