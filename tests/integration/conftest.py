"""API test fixtures: the FastAPI app over the in-memory test database."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.api.app import create_app
from payroll_pro.api.dependencies import get_db_session
from payroll_pro.auth.local_stub import LocalAuthProvider
from payroll_pro.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="WARNING",
        auth_rate_limit_seconds=60,
        auth_rate_limit_capacity=100,
        cors_origins=("http://localhost:5173",),
    )


@pytest.fixture
def app(session_factory, test_settings):
    """App whose sessions come from the test engine."""
    app = create_app(settings=test_settings, auth_provider=LocalAuthProvider())

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def employee_id(client: AsyncClient) -> str:
    """Create an employee through the API and return its id."""
    response = await client.post(
        "/api/v1/employees",
        json={
            "first_name": "Alice",
            "last_name": "Smith",
            "email": "alice@example.com",
            "department": "Engineering",
            "position": "Developer",
            "hire_date": "2023-01-15",
            "gross_salary": "5000.00",
            "tax_deduction": "500.00",
            "insurance_deduction": "200.00",
            "other_deductions": "50.00",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]
