"""Employee tax details and tax previews."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.calculators.payroll_calculator import to_decimal
from payroll_pro.calculators.tax_resolver import TaxRateResolver
from payroll_pro.calculators.types import TaxPreview
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import NotFoundError, ValidationError
from payroll_pro.models import Employee, EmployeeTaxDetails, FilingStatus

logger = logging.getLogger(__name__)


class TaxService:
    """Tax details per employee and year, plus bracket-based previews.

    Previews use the tax_rates brackets. They are unrelated to the flat
    payslip deductions and to the deductions stored on payroll items.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.resolver = TaxRateResolver(session)

    async def upsert_tax_details(
        self,
        employee_id: UUID,
        tax_year: int,
        filing_status: FilingStatus | str = FilingStatus.SINGLE,
        allowances: int = 0,
        additional_withholding: Any = None,
        state_code: str | None = None,
        locality: str | None = None,
    ) -> EmployeeTaxDetails:
        """Create or replace the details for (employee_id, tax_year)."""
        try:
            filing_status = FilingStatus(filing_status)
        except ValueError:
            raise ValidationError(
                f"Invalid filing status: {filing_status}", field="filing_status"
            )
        if allowances < 0:
            raise ValidationError("Allowances must not be negative", field="allowances")
        withholding = to_decimal(additional_withholding)
        if withholding < 0:
            raise ValidationError(
                "Additional withholding must not be negative", field="additional_withholding"
            )

        if await self.session.get(Employee, employee_id) is None:
            raise NotFoundError("Employee", employee_id)

        details = await self.get_tax_details(employee_id, tax_year)
        if details is None:
            details = EmployeeTaxDetails(employee_id=employee_id, tax_year=tax_year)
            self.session.add(details)

        details.filing_status = filing_status.value
        details.allowances = allowances
        details.additional_withholding = withholding
        details.state_code = state_code or None
        details.locality = locality or None

        await commit_or_raise(self.session, "save tax details")
        logger.info("Saved %s tax details for employee %s", tax_year, employee_id)
        return details

    async def get_tax_details(
        self, employee_id: UUID, tax_year: int
    ) -> EmployeeTaxDetails | None:
        """Get the details for one employee and tax year, if any."""
        result = await self.session.execute(
            select(EmployeeTaxDetails).where(
                EmployeeTaxDetails.employee_id == employee_id,
                EmployeeTaxDetails.tax_year == tax_year,
            )
        )
        return result.scalar_one_or_none()

    async def preview_tax(self, income: Any) -> TaxPreview:
        """Federal, state and local tax for a positive income."""
        amount = to_decimal(income)
        if amount <= Decimal("0"):
            raise ValidationError("Please enter a valid income amount", field="income")
        return await self.resolver.preview(amount)
