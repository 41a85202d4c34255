"""Pytest fixtures for PayrollPro tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_pro.database import make_session_factory
from payroll_pro.models import Base, Employee, TaxRate

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_employee(session) -> Employee:
    """Salaried employee with stored deductions."""
    employee = Employee(
        first_name="Alice",
        last_name="Smith",
        email="alice@example.com",
        phone="555-0100",
        department="Engineering",
        position="Developer",
        hire_date=date(2023, 1, 15),
        gross_salary=Decimal("5000.00"),
        pay_period="MONTHLY",
        tax_deduction=Decimal("500.00"),
        insurance_deduction=Decimal("200.00"),
        other_deductions=Decimal("50.00"),
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest_asyncio.fixture
async def test_employees(session, test_employee) -> list[Employee]:
    """Three employees across two departments."""
    others = [
        Employee(
            first_name="Bob",
            last_name="Jones",
            email="bob@example.com",
            department="Engineering",
            position="Manager",
            hire_date=date(2022, 6, 1),
            gross_salary=Decimal("7000.00"),
            pay_period="BI-WEEKLY",
        ),
        Employee(
            first_name="Carol",
            last_name="Adams",
            email="carol@example.com",
            department="Finance",
            position="Accountant",
            hire_date=date(2021, 3, 10),
            gross_salary=Decimal("3000.00"),
            pay_period="WEEKLY",
        ),
    ]
    session.add_all(others)
    await session.commit()
    return [test_employee, *others]


@pytest_asyncio.fixture
async def federal_bracket(session) -> TaxRate:
    """Federal bracket 0..50000 at 10%."""
    bracket = TaxRate(
        tax_type="federal",
        tax_year=2024,
        income_from=Decimal("0"),
        income_to=Decimal("50000"),
        rate=Decimal("10"),
    )
    session.add(bracket)
    await session.commit()
    return bracket
