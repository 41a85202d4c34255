"""Tests for tax rate resolution."""

from contextlib import asynccontextmanager
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from payroll_pro.calculators.tax_resolver import (
    DEFAULT_RATES,
    AmbiguousTaxBracketError,
    TaxRateResolver,
)
from payroll_pro.calculators.types import TaxType
from payroll_pro.errors import BackendError
from payroll_pro.models import TaxRate


class FailingSession:
    """Session whose queries always fail."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT tax_rates", {}, Exception("connection lost"))

    @asynccontextmanager
    async def begin_nested(self):
        yield


class EmptyResult:
    def scalars(self):
        return self

    def all(self):
        return []


class AbortingSession:
    """Session that fails its first query and then behaves like PostgreSQL.

    After a failed statement every query raises until the transaction is
    rolled back to a savepoint.
    """

    def __init__(self):
        self.calls = 0
        self.aborted = False
        self.savepoints = 0

    async def execute(self, *args, **kwargs):
        self.calls += 1
        if self.aborted:
            raise OperationalError("SELECT tax_rates", {}, Exception("transaction aborted"))
        if self.calls == 1:
            self.aborted = True
            raise OperationalError("SELECT tax_rates", {}, Exception("statement timeout"))
        return EmptyResult()

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        try:
            yield
        except Exception:
            self.aborted = False
            raise


class TestTaxRateResolver:
    """Test bracket lookup and fallback rates."""

    @pytest.mark.asyncio
    async def test_fallback_rates_without_brackets(self, session):
        """Empty table: 22% federal, 5% state, 1% local."""
        preview = await TaxRateResolver(session).preview(Decimal("1000"))

        assert preview.federal == Decimal("220")
        assert preview.state == Decimal("50")
        assert preview.local == Decimal("10")
        assert preview.total == Decimal("280")

    @pytest.mark.asyncio
    async def test_bracket_hit(self, session, federal_bracket):
        """0..50000 at 10 gives 4000 on 40000."""
        resolver = TaxRateResolver(session)

        assert await resolver.resolve_rate(Decimal("40000"), TaxType.FEDERAL) == Decimal("0.1")
        assert await resolver.resolve_tax(Decimal("40000"), TaxType.FEDERAL) == Decimal("4000")

    @pytest.mark.asyncio
    async def test_bracket_bounds_are_inclusive(self, session, federal_bracket):
        resolver = TaxRateResolver(session)

        assert await resolver.resolve_tax(Decimal("50000"), "federal") == Decimal("5000")
        assert await resolver.resolve_tax(Decimal("50000.01"), "federal") == (
            Decimal("50000.01") * DEFAULT_RATES[TaxType.FEDERAL]
        )

    @pytest.mark.asyncio
    async def test_bracket_only_applies_to_its_type(self, session, federal_bracket):
        preview = await TaxRateResolver(session).preview(Decimal("40000"))

        assert preview.federal == Decimal("4000")
        assert preview.state == Decimal("2000")
        assert preview.local == Decimal("400")
        assert preview.total == Decimal("6400")

    @pytest.mark.asyncio
    async def test_lookup_ignores_tax_year(self, session):
        session.add(
            TaxRate(
                tax_type="state",
                tax_year=1999,
                income_from=Decimal("0"),
                income_to=Decimal("100000"),
                rate=Decimal("3"),
            )
        )
        await session.commit()

        tax = await TaxRateResolver(session).resolve_tax(Decimal("1000"), TaxType.STATE)
        assert tax == Decimal("30")

    @pytest.mark.asyncio
    async def test_overlapping_brackets_are_ambiguous(self, session, federal_bracket):
        session.add(
            TaxRate(
                tax_type="federal",
                tax_year=2024,
                income_from=Decimal("30000"),
                income_to=Decimal("60000"),
                rate=Decimal("12"),
            )
        )
        await session.commit()
        resolver = TaxRateResolver(session)

        with pytest.raises(AmbiguousTaxBracketError) as exc_info:
            await resolver.resolve_rate(Decimal("40000"), TaxType.FEDERAL)
        assert exc_info.value.matches == 2

        # Preview isolates the failure to the federal amount
        preview = await resolver.preview(Decimal("40000"))
        assert preview.federal == Decimal("0")
        assert preview.state == Decimal("2000")

    @pytest.mark.asyncio
    async def test_backend_failure(self):
        resolver = TaxRateResolver(FailingSession())

        with pytest.raises(BackendError):
            await resolver.resolve_rate(Decimal("1000"), TaxType.LOCAL)

        preview = await resolver.preview(Decimal("1000"))
        assert preview.total == Decimal("0")

    @pytest.mark.asyncio
    async def test_failed_lookup_does_not_poison_later_types(self):
        """Only federal fails; state and local still use the fallback rates."""
        session = AbortingSession()

        preview = await TaxRateResolver(session).preview(Decimal("1000"))

        assert preview.federal == Decimal("0")
        assert preview.state == Decimal("50")
        assert preview.local == Decimal("10")
        assert preview.total == Decimal("60")
        assert session.savepoints == 3
