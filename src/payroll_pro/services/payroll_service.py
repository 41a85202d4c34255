"""Payroll period processing, payroll history and reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.calculators.payroll_calculator import compute_payroll_item, to_decimal
from payroll_pro.calculators.types import PayrollItemAmounts
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import BackendError, NotFoundError, ValidationError
from payroll_pro.models import Employee, PayrollItem, PayrollPeriod
from payroll_pro.services.dashboard_service import record_activity
from payroll_pro.services.state_machine import PayrollPeriodStateMachine, PayrollStatus

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PayrollInputs:
    """Form values for one payroll item, before derivation."""

    base_salary: Decimal
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    bonuses: Decimal = Decimal("0")
    tax_deductions: Decimal = Decimal("0")
    insurance_deductions: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")
    notes: str = ""

    def compute(self) -> PayrollItemAmounts:
        return compute_payroll_item(
            base_salary=self.base_salary,
            overtime_hours=self.overtime_hours,
            overtime_rate=self.overtime_rate,
            allowances=self.allowances,
            bonuses=self.bonuses,
            tax_deductions=self.tax_deductions,
            insurance_deductions=self.insurance_deductions,
            other_deductions=self.other_deductions,
        )


@dataclass(frozen=True)
class PayrollHistoryItem:
    """Read-only join of payroll item, period and employee."""

    id: UUID
    period_id: UUID
    employee_id: UUID
    first_name: str
    last_name: str
    department: str | None
    position: str | None
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

    @property
    def report_filename(self) -> str:
        return f"payroll-report-{self.first_name}-{self.last_name}-{self.period_start}.txt"


# Sortable history columns
HISTORY_SORT_FIELDS: dict[str, Any] = {
    "created_at": PayrollItem.created_at,
    "period_start": PayrollPeriod.period_start,
    "period_end": PayrollPeriod.period_end,
    "base_salary": PayrollItem.base_salary,
    "gross_pay": PayrollItem.gross_pay,
    "net_pay": PayrollItem.net_pay,
    "last_name": Employee.last_name,
}

HISTORY_PERIOD_FILTERS = ("all", "this_month", "last_month")


def validate_period(period_start: date | None, period_end: date | None) -> None:
    """Raise ValidationError unless period_end is strictly after period_start."""
    if period_start is None or period_end is None:
        raise ValidationError("Please select both period start and end dates")
    if period_end <= period_start:
        raise ValidationError("Period end date must be after start date", field="period_end")


def default_inputs(employee: Employee) -> PayrollInputs:
    """Prefill a payroll form from the employee's stored salary and deductions."""
    return PayrollInputs(
        base_salary=to_decimal(employee.gross_salary),
        tax_deductions=to_decimal(employee.tax_deduction),
        insurance_deductions=to_decimal(employee.insurance_deduction),
        other_deductions=to_decimal(employee.other_deductions),
    )


def _in_month(value: date, today: date, months_back: int) -> bool:
    month = today.month - months_back
    year = today.year
    if month < 1:
        month += 12
        year -= 1
    return value.year == year and value.month == month


def _to_cents(value: Any) -> Decimal:
    """Round to the two places payroll columns store."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _money(value: Decimal) -> str:
    return f"${value:.2f}"


def render_payroll_report(item: PayrollHistoryItem) -> str:
    """Plain-text payroll report for one history item."""
    lines = [
        "Payroll Report",
        "-------------",
        f"Employee: {item.first_name} {item.last_name}",
        f"Department: {item.department or ''}",
        f"Position: {item.position or ''}",
        f"Period: {item.period_start:%b} {item.period_start.day}, {item.period_start.year}"
        f" - {item.period_end:%b} {item.period_end.day}, {item.period_end.year}",
        "",
        "Earnings",
        "--------",
        f"Base Salary: {_money(item.base_salary)}",
        f"Overtime Hours: {item.overtime_hours}",
        f"Overtime Rate: {_money(item.overtime_rate)}",
        f"Overtime Pay: {_money(item.overtime_pay)}",
        f"Allowances: {_money(item.allowances)}",
        f"Bonuses: {_money(item.bonuses)}",
        "",
        "Deductions",
        "----------",
        f"Tax: {_money(item.tax_deductions)}",
        f"Insurance: {_money(item.insurance_deductions)}",
        f"Other: {_money(item.other_deductions)}",
        "",
        "Summary",
        "-------",
        f"Gross Pay: {_money(item.gross_pay)}",
        f"Net Pay: {_money(item.net_pay)}",
        "",
        f"Notes: {item.notes or 'N/A'}",
    ]
    return "\n".join(lines)


class PayrollService:
    """Service for payroll processing.

    A payroll entry is a period row plus one item row, written in two
    separate commits. If the item write fails the period stays behind
    without items.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def calculate(inputs: PayrollInputs) -> PayrollItemAmounts:
        """Derive overtime, gross and net pay without persisting."""
        return inputs.compute()

    async def create_payroll(
        self,
        employee_id: UUID,
        period_start: date,
        period_end: date,
        inputs: PayrollInputs | None = None,
    ) -> PayrollItem:
        """Create a pending period and the employee's item for it.

        Raises:
            ValidationError: If the period is invalid (nothing is written)
            NotFoundError: If the employee doesn't exist
            BackendError: If either write fails
        """
        validate_period(period_start, period_end)

        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        if inputs is None:
            inputs = default_inputs(employee)

        amounts = inputs.compute()

        period = PayrollPeriod(
            period_start=period_start,
            period_end=period_end,
            status=PayrollStatus.PENDING.value,
        )
        self.session.add(period)
        await commit_or_raise(self.session, "create payroll period")

        item = PayrollItem(
            period_id=period.id,
            employee_id=employee_id,
            base_salary=_to_cents(inputs.base_salary),
            overtime_hours=_to_cents(inputs.overtime_hours),
            overtime_rate=_to_cents(inputs.overtime_rate),
            overtime_pay=_to_cents(amounts.overtime_pay),
            allowances=_to_cents(inputs.allowances),
            bonuses=_to_cents(inputs.bonuses),
            tax_deductions=_to_cents(inputs.tax_deductions),
            insurance_deductions=_to_cents(inputs.insurance_deductions),
            other_deductions=_to_cents(inputs.other_deductions),
            gross_pay=_to_cents(amounts.gross_pay),
            net_pay=_to_cents(amounts.net_pay),
            status=PayrollStatus.PENDING.value,
            notes=inputs.notes or "",
        )
        self.session.add(item)
        record_activity(
            self.session,
            f"Payroll created for {employee.full_name} ({period_start} to {period_end})",
        )
        try:
            await commit_or_raise(self.session, "create payroll item")
        except (IntegrityError, BackendError) as e:
            logger.warning(
                "Payroll period %s was created but its item failed: %s", period.id, e
            )
            if isinstance(e, IntegrityError):
                raise BackendError("create payroll item", e) from e
            raise

        logger.info(
            "Created payroll item %s for employee %s (%s to %s): gross=%s net=%s",
            item.id,
            employee_id,
            period_start,
            period_end,
            item.gross_pay,
            item.net_pay,
        )
        return item

    async def get_period(self, period_id: UUID) -> PayrollPeriod:
        """Get a payroll period by id."""
        period = await self.session.get(PayrollPeriod, period_id)
        if period is None:
            raise NotFoundError("Payroll period", period_id)
        return period

    async def transition_period(
        self, period_id: UUID, to_status: PayrollStatus | str
    ) -> PayrollPeriod:
        """Move a period to a new status.

        Item statuses are not touched.

        Raises:
            ValidationError: If to_status is not a payroll status
            InvalidTransitionError: If the transition is not allowed
        """
        try:
            to_status = PayrollStatus(to_status)
        except ValueError:
            raise ValidationError(f"Invalid payroll status: {to_status}", field="status")

        period = await self.get_period(period_id)
        from_status = period.status
        PayrollPeriodStateMachine.validate_transition(from_status, to_status)

        period.status = to_status.value
        await commit_or_raise(self.session, "update payroll period status")

        logger.info("Payroll period %s: %s -> %s", period_id, from_status, to_status.value)
        return period

    async def list_history(
        self,
        employee_id: UUID | None = None,
        sort_field: str = "created_at",
        descending: bool = True,
        period_filter: str = "all",
        today: date | None = None,
    ) -> list[PayrollHistoryItem]:
        """Payroll history joined with period and employee.

        period_filter narrows by the month of period_start relative to
        today: "this_month" or "last_month".
        """
        column = HISTORY_SORT_FIELDS.get(sort_field)
        if column is None:
            raise ValidationError(f"Cannot sort payroll history by {sort_field}", field="sort")
        if period_filter not in HISTORY_PERIOD_FILTERS:
            raise ValidationError(f"Unknown period filter: {period_filter}", field="period")

        query = (
            select(PayrollItem, PayrollPeriod, Employee)
            .join(PayrollPeriod, PayrollItem.period_id == PayrollPeriod.id)
            .join(Employee, PayrollItem.employee_id == Employee.id)
        )
        if employee_id is not None:
            query = query.where(PayrollItem.employee_id == employee_id)
        query = query.order_by(column.desc() if descending else column.asc())

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise BackendError("load payroll history", e) from e

        history = [
            self._to_history_item(item, period, employee)
            for item, period, employee in result.all()
        ]

        if period_filter == "all":
            return history
        today = today or date.today()
        months_back = 0 if period_filter == "this_month" else 1
        return [h for h in history if _in_month(h.period_start, today, months_back)]

    async def get_history_item(self, item_id: UUID) -> PayrollHistoryItem:
        """One payroll item joined with its period and employee."""
        result = await self.session.execute(
            select(PayrollItem, PayrollPeriod, Employee)
            .join(PayrollPeriod, PayrollItem.period_id == PayrollPeriod.id)
            .join(Employee, PayrollItem.employee_id == Employee.id)
            .where(PayrollItem.id == item_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Payroll item", item_id)
        return self._to_history_item(*row)

    @staticmethod
    def _to_history_item(
        item: PayrollItem, period: PayrollPeriod, employee: Employee
    ) -> PayrollHistoryItem:
        return PayrollHistoryItem(
            id=item.id,
            period_id=period.id,
            employee_id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            department=employee.department,
            position=employee.position,
            period_start=period.period_start,
            period_end=period.period_end,
            period_status=period.status,
            base_salary=item.base_salary,
            overtime_hours=item.overtime_hours,
            overtime_rate=item.overtime_rate,
            overtime_pay=item.overtime_pay,
            allowances=item.allowances,
            bonuses=item.bonuses,
            tax_deductions=item.tax_deductions,
            insurance_deductions=item.insurance_deductions,
            other_deductions=item.other_deductions,
            gross_pay=item.gross_pay,
            net_pay=item.net_pay,
            status=item.status,
            notes=item.notes,
            created_at=item.created_at,
        )
