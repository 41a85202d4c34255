"""Tax rate resolution against the bracket table with a flat fallback."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.calculators.payroll_calculator import to_decimal
from payroll_pro.calculators.types import TaxPreview, TaxType
from payroll_pro.errors import BackendError
from payroll_pro.models import TaxRate

logger = logging.getLogger(__name__)

# Fallback rates are fractions; TaxRate.rate is a percentage.
DEFAULT_RATES: dict[TaxType, Decimal] = {
    TaxType.FEDERAL: Decimal("0.22"),
    TaxType.STATE: Decimal("0.05"),
    TaxType.LOCAL: Decimal("0.01"),
}

PERCENT = Decimal("100")


class AmbiguousTaxBracketError(Exception):
    """Raised when more than one bracket row covers an income."""

    def __init__(self, tax_type: TaxType, income: Decimal, matches: int):
        self.tax_type = tax_type
        self.income = income
        self.matches = matches
        super().__init__(
            f"{matches} {tax_type.value} tax brackets match income {income}"
        )


class TaxRateResolver:
    """Resolves tax for an income figure from the tax_rates table.

    Resolution:
    1. Find the bracket row with income_from <= income <= income_to for the
       tax type. Tax year is not part of the lookup.
    2. If one row matches, the rate is row.rate / 100.
    3. If none match, use DEFAULT_RATES (already fractions).
    4. More than one match is an error.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_bracket(self, income: Decimal, tax_type: TaxType) -> TaxRate | None:
        """Get the single bracket covering an income, if any."""
        try:
            result = await self.session.execute(
                select(TaxRate).where(
                    TaxRate.tax_type == tax_type.value,
                    TaxRate.income_from <= income,
                    TaxRate.income_to >= income,
                )
            )
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise BackendError(f"{tax_type.value} tax rate lookup", e) from e

        if len(rows) > 1:
            raise AmbiguousTaxBracketError(tax_type, income, len(rows))
        return rows[0] if rows else None

    async def resolve_rate(self, income: Any, tax_type: TaxType | str) -> Decimal:
        """Resolve the applicable rate as a fraction (0.22 for 22%)."""
        tax_type = TaxType(tax_type)
        bracket = await self.find_bracket(to_decimal(income), tax_type)
        if bracket is None:
            return DEFAULT_RATES[tax_type]
        return bracket.rate / PERCENT

    async def resolve_tax(self, income: Any, tax_type: TaxType | str) -> Decimal:
        """Tax amount for one tax type: income * resolved rate."""
        amount = to_decimal(income)
        rate = await self.resolve_rate(amount, tax_type)
        return amount * rate

    async def preview(self, income: Any) -> TaxPreview:
        """Federal, state and local tax for an income.

        Each type is resolved inside its own savepoint. A failed lookup is
        logged and counts as zero; rolling back to the savepoint keeps the
        transaction usable for the remaining types on PostgreSQL.
        """
        amounts: dict[TaxType, Decimal] = {}
        for tax_type in TaxType:
            try:
                async with self.session.begin_nested():
                    amounts[tax_type] = await self.resolve_tax(income, tax_type)
            except Exception:
                logger.exception("Error calculating %s tax", tax_type.value)
                amounts[tax_type] = Decimal("0")

        return TaxPreview(
            federal=amounts[TaxType.FEDERAL],
            state=amounts[TaxType.STATE],
            local=amounts[TaxType.LOCAL],
        )
