"""Seed script for tax rate brackets.

Run with:
    python scripts/seed_tax_rates.py [--tax-year 2024]

Brackets that already exist for (tax_type, tax_year, income_from) are left
alone. Rates are percentages: 10 means 10%.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.database import create_tables, dispose_db, get_session
from payroll_pro.logging_config import configure_logging
from payroll_pro.models import TaxRate

logger = logging.getLogger("seed_tax_rates")

# (tax_type, state_code, locality, income_from, income_to, rate)
BRACKETS = [
    ("federal", None, None, "0", "11000", "10"),
    ("federal", None, None, "11000.01", "44725", "12"),
    ("federal", None, None, "44725.01", "95375", "22"),
    ("federal", None, None, "95375.01", "182100", "24"),
    ("federal", None, None, "182100.01", "231250", "32"),
    ("federal", None, None, "231250.01", "578125", "35"),
    ("federal", None, None, "578125.01", "99999999", "37"),
    ("state", "CA", None, "0", "10412", "1"),
    ("state", "CA", None, "10412.01", "24684", "2"),
    ("state", "CA", None, "24684.01", "38959", "4"),
    ("state", "CA", None, "38959.01", "54081", "6"),
    ("state", "CA", None, "54081.01", "99999999", "8"),
]


async def seed_brackets(session: AsyncSession, tax_year: int) -> int:
    """Insert missing brackets for a year; returns how many were created."""
    created = 0
    for tax_type, state_code, locality, income_from, income_to, rate in BRACKETS:
        result = await session.execute(
            select(TaxRate.id).where(
                TaxRate.tax_type == tax_type,
                TaxRate.tax_year == tax_year,
                TaxRate.income_from == Decimal(income_from),
            )
        )
        if result.scalar_one_or_none() is not None:
            continue

        session.add(
            TaxRate(
                tax_type=tax_type,
                state_code=state_code,
                locality=locality,
                tax_year=tax_year,
                income_from=Decimal(income_from),
                income_to=Decimal(income_to),
                rate=Decimal(rate),
            )
        )
        created += 1
        logger.info("Created %s bracket %s-%s at %s%%", tax_type, income_from, income_to, rate)
    return created


async def main(tax_year: int) -> None:
    """Run the seed script."""
    await create_tables()
    try:
        async with get_session() as session:
            created = await seed_brackets(session, tax_year)
        logger.info("Seeded %d tax brackets for %d", created, tax_year)
    finally:
        await dispose_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed tax rate brackets")
    parser.add_argument(
        "--tax-year",
        type=int,
        default=date.today().year,
        help="Tax year to seed (default: current year)",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(main(args.tax_year))
