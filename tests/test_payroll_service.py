"""Tests for payroll processing, history and reports."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from payroll_pro.errors import NotFoundError, ValidationError
from payroll_pro.models import PayrollItem, PayrollPeriod
from payroll_pro.services.payroll_service import (
    PayrollInputs,
    PayrollService,
    default_inputs,
    render_payroll_report,
)
from payroll_pro.services.state_machine import InvalidTransitionError


async def count_rows(session, model) -> int:
    return await session.scalar(select(func.count(model.id)))


class TestCreatePayroll:
    """Test period + item creation."""

    @pytest.mark.asyncio
    async def test_create_with_explicit_amounts(self, session, test_employee):
        item = await PayrollService(session).create_payroll(
            employee_id=test_employee.id,
            period_start=date(2024, 3, 1),
            period_end=date(2024, 3, 31),
            inputs=PayrollInputs(
                base_salary=Decimal("4000.00"),
                overtime_hours=Decimal("5"),
                overtime_rate=Decimal("30.00"),
                allowances=Decimal("100.00"),
                bonuses=Decimal("250.00"),
                tax_deductions=Decimal("600.00"),
                insurance_deductions=Decimal("150.00"),
                other_deductions=Decimal("25.00"),
                notes="March run",
            ),
        )

        assert item.overtime_pay == Decimal("150.00")
        assert item.gross_pay == Decimal("4500.00")
        assert item.net_pay == Decimal("3725.00")
        assert item.status == "pending"

        period = await session.get(PayrollPeriod, item.period_id)
        assert period.status == "pending"

    @pytest.mark.asyncio
    async def test_defaults_come_from_employee(self, session, test_employee):
        inputs = default_inputs(test_employee)
        assert inputs.base_salary == Decimal("5000.00")
        assert inputs.tax_deductions == Decimal("500.00")

        item = await PayrollService(session).create_payroll(
            test_employee.id, date(2024, 4, 1), date(2024, 4, 30)
        )

        assert item.gross_pay == Decimal("5000.00")
        assert item.net_pay == Decimal("4250.00")

    @pytest.mark.asyncio
    async def test_negative_net_is_stored(self, session, test_employee):
        item = await PayrollService(session).create_payroll(
            test_employee.id,
            date(2024, 5, 1),
            date(2024, 5, 31),
            inputs=PayrollInputs(base_salary=Decimal("1000"), tax_deductions=Decimal("1200")),
        )

        assert item.net_pay == Decimal("-200")

    @pytest.mark.asyncio
    async def test_fractional_overtime_rounded_to_cents(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(
            test_employee.id,
            date(2024, 6, 1),
            date(2024, 6, 30),
            inputs=PayrollInputs(
                base_salary=Decimal("1000"),
                overtime_hours=Decimal("1.5"),
                overtime_rate=Decimal("20.25"),
            ),
        )

        assert str(item.overtime_pay) == "30.38"
        assert str(item.gross_pay) == "1030.38"
        assert str(item.net_pay) == "1030.38"

        [history] = await service.list_history(employee_id=test_employee.id)
        assert history.overtime_pay == item.overtime_pay
        assert history.gross_pay == item.gross_pay
        assert history.net_pay == item.net_pay

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "start,end",
        [
            (date(2024, 3, 31), date(2024, 3, 1)),
            (date(2024, 3, 1), date(2024, 3, 1)),
            (None, date(2024, 3, 1)),
        ],
    )
    async def test_invalid_period_writes_nothing(self, session, test_employee, start, end):
        with pytest.raises(ValidationError):
            await PayrollService(session).create_payroll(test_employee.id, start, end)

        assert await count_rows(session, PayrollPeriod) == 0
        assert await count_rows(session, PayrollItem) == 0

    @pytest.mark.asyncio
    async def test_unknown_employee(self, session):
        with pytest.raises(NotFoundError):
            await PayrollService(session).create_payroll(
                uuid4(), date(2024, 3, 1), date(2024, 3, 31)
            )
        assert await count_rows(session, PayrollPeriod) == 0

    def test_calculate_does_not_need_a_session(self):
        amounts = PayrollService.calculate(
            PayrollInputs(base_salary=Decimal("2000"), overtime_hours=Decimal("2"),
                          overtime_rate=Decimal("15.25"))
        )
        assert amounts.gross_pay == Decimal("2030.50")


class TestPeriodTransitions:
    @pytest.mark.asyncio
    async def test_lifecycle(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(test_employee.id, date(2024, 3, 1), date(2024, 3, 31))

        await service.transition_period(item.period_id, "processing")
        period = await service.transition_period(item.period_id, "completed")

        assert period.status == "completed"
        # Items keep their own status
        assert (await session.get(PayrollItem, item.id)).status == "pending"

    @pytest.mark.asyncio
    async def test_completed_is_final(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(test_employee.id, date(2024, 3, 1), date(2024, 3, 31))
        await service.transition_period(item.period_id, "completed")

        with pytest.raises(InvalidTransitionError):
            await service.transition_period(item.period_id, "processing")

    @pytest.mark.asyncio
    async def test_failed_can_retry(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(test_employee.id, date(2024, 3, 1), date(2024, 3, 31))
        await service.transition_period(item.period_id, "failed")

        period = await service.transition_period(item.period_id, "processing")
        assert period.status == "processing"

    @pytest.mark.asyncio
    async def test_unknown_status(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(test_employee.id, date(2024, 3, 1), date(2024, 3, 31))

        with pytest.raises(ValidationError):
            await service.transition_period(item.period_id, "archived")


class TestPayrollHistory:
    """Test the joined history view and reports."""

    @pytest.mark.asyncio
    async def test_history_join_filter_and_sort(self, session, test_employees):
        alice, bob, _ = test_employees
        service = PayrollService(session)
        await service.create_payroll(alice.id, date(2024, 1, 1), date(2024, 1, 31))
        await service.create_payroll(alice.id, date(2024, 2, 1), date(2024, 2, 29))
        await service.create_payroll(bob.id, date(2024, 1, 1), date(2024, 1, 31))

        history = await service.list_history(
            employee_id=alice.id, sort_field="period_start", descending=False
        )

        assert [h.period_start for h in history] == [date(2024, 1, 1), date(2024, 2, 1)]
        assert {h.first_name for h in history} == {"Alice"}
        assert history[0].department == "Engineering"

        by_pay = await service.list_history(sort_field="gross_pay", descending=True)
        assert by_pay[0].employee_id == bob.id

    @pytest.mark.asyncio
    async def test_unknown_sort_field_rejected(self, session):
        with pytest.raises(ValidationError):
            await PayrollService(session).list_history(sort_field="password")

    @pytest.mark.asyncio
    async def test_month_filters(self, session, test_employee):
        service = PayrollService(session)
        await service.create_payroll(test_employee.id, date(2024, 1, 1), date(2024, 1, 31))
        await service.create_payroll(test_employee.id, date(2023, 12, 1), date(2023, 12, 31))

        this_month = await service.list_history(period_filter="this_month", today=date(2024, 1, 20))
        last_month = await service.list_history(period_filter="last_month", today=date(2024, 1, 20))

        assert [h.period_start for h in this_month] == [date(2024, 1, 1)]
        assert [h.period_start for h in last_month] == [date(2023, 12, 1)]

    @pytest.mark.asyncio
    async def test_report(self, session, test_employee):
        service = PayrollService(session)
        item = await service.create_payroll(
            test_employee.id,
            date(2024, 3, 1),
            date(2024, 3, 31),
            inputs=PayrollInputs(
                base_salary=Decimal("3000"),
                overtime_hours=Decimal("4"),
                overtime_rate=Decimal("20"),
                tax_deductions=Decimal("300"),
            ),
        )

        history_item = await service.get_history_item(item.id)
        report = render_payroll_report(history_item)

        assert report.startswith("Payroll Report\n-------------\nEmployee: Alice Smith")
        assert "Period: Mar 1, 2024 - Mar 31, 2024" in report
        assert "Overtime Pay: $80.00" in report
        assert "Gross Pay: $3080.00" in report
        assert "Net Pay: $2780.00" in report
        assert report.endswith("Notes: N/A")
        assert history_item.report_filename == "payroll-report-Alice-Smith-2024-03-01.txt"
