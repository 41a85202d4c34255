"""API endpoint tests.

Exercises the FastAPI routes end to end against the in-memory database.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["version"]

    async def test_readiness_and_liveness(self, client: AsyncClient):
        assert (await client.get("/ready")).json()["status"] == "ready"
        assert (await client.get("/live")).json()["status"] == "alive"


class TestEmployeeEndpoints:
    async def test_create_and_get(self, client: AsyncClient, employee_id: str):
        response = await client.get(f"/api/v1/employees/{employee_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "alice@example.com"
        assert data["pay_period"] == "MONTHLY"
        assert Decimal(data["gross_salary"]) == Decimal("5000")

    async def test_duplicate_email_is_400(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/employees",
            json={
                "first_name": "Other",
                "last_name": "Person",
                "email": "alice@example.com",
                "hire_date": "2024-01-01",
                "gross_salary": "1000",
            },
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_malformed_body_uses_error_shape(self, client: AsyncClient):
        response = await client.post("/api/v1/employees", json={"first_name": "Only"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "REQUEST_INVALID"
        missing = {tuple(e["loc"]) for e in body["context"]["errors"]}
        assert ("body", "last_name") in missing

    async def test_unknown_employee_is_404(self, client: AsyncClient):
        response = await client.get(f"/api/v1/employees/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_patch(self, client: AsyncClient, employee_id: str):
        response = await client.patch(
            f"/api/v1/employees/{employee_id}", json={"position": "Lead"}
        )

        assert response.status_code == 200
        assert response.json()["position"] == "Lead"

    async def test_overview_by_email(self, client: AsyncClient, employee_id: str):
        await client.post(
            "/api/v1/payslips",
            json={"employee_id": employee_id, "month": "March", "year": 2024},
        )

        response = await client.get("/api/v1/employees/by-email/alice@example.com")

        assert response.status_code == 200
        data = response.json()
        assert data["employee"]["id"] == employee_id
        assert len(data["payslips"]) == 1

    async def test_stats(self, client: AsyncClient, employee_id: str):
        data = (await client.get("/api/v1/employees/stats")).json()

        assert data["total_employees"] == 1
        assert data["departments"] == 1


class TestAttendanceEndpoints:
    async def test_clock_in_and_out(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/attendance/clock-in",
            json={"employee_id": employee_id, "at": "2024-03-04T09:00:00"},
        )
        assert response.status_code == 201, response.text
        assert response.json()["status"] == "late"

        response = await client.post(
            "/api/v1/attendance/clock-out",
            json={"employee_id": employee_id, "at": "2024-03-04T17:30:00"},
        )
        assert response.status_code == 200
        assert response.json()["duration"] == "8h 30m"

        listing = (await client.get("/api/v1/attendance", params={"date": "2024-03-04"})).json()
        assert [r["employee_name"] for r in listing] == ["Alice Smith"]

    async def test_second_clock_in_is_400(self, client: AsyncClient, employee_id: str):
        payload = {"employee_id": employee_id, "at": "2024-03-04T08:00:00"}
        await client.post("/api/v1/attendance/clock-in", json=payload)

        response = await client.post("/api/v1/attendance/clock-in", json=payload)
        assert response.status_code == 400

    async def test_duration(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/attendance/duration", params={"time_in": "09:00", "time_out": "17:30"}
        )

        assert response.json()["display"] == "8h 30m"
        bad = await client.get(
            "/api/v1/attendance/duration", params={"time_in": "x", "time_out": "17:30"}
        )
        assert bad.status_code == 400
        assert bad.json()["code"] == "VALIDATION_ERROR"
        assert bad.json()["context"] == {"field": "time_in"}

        late = await client.get(
            "/api/v1/attendance/duration", params={"time_in": "09:00", "time_out": "25:00"}
        )
        assert late.json()["context"] == {"field": "time_out"}


class TestLeaveEndpoints:
    async def test_request_and_approve(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": employee_id,
                "start_date": "2024-07-01",
                "end_date": "2024-07-05",
                "type": "annual",
                "reason": "Holiday",
            },
        )
        assert response.status_code == 201, response.text
        leave = response.json()
        assert leave["status"] == "pending"
        assert leave["days"] == 4

        approved = await client.post(f"/api/v1/leaves/{leave['id']}/approve")
        assert approved.json()["status"] == "approved"

        again = await client.post(f"/api/v1/leaves/{leave['id']}/reject")
        assert again.status_code == 400
        assert again.json()["code"] == "INVALID_TRANSITION"

    async def test_end_before_start_is_400(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": employee_id,
                "start_date": "2024-07-05",
                "end_date": "2024-07-01",
                "reason": "Holiday",
            },
        )
        assert response.status_code == 400
        assert (await client.get("/api/v1/leaves")).json() == []

    async def test_allotments(self, client: AsyncClient):
        data = (await client.get("/api/v1/leaves/allotments")).json()
        assert {d["type"]: d["available_days"] for d in data} == {
            "annual": 15,
            "sick": 10,
            "personal": 5,
            "unpaid": 5,
        }


class TestPayrollEndpoints:
    async def test_create_transition_history_report(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/payroll",
            json={
                "employee_id": employee_id,
                "period_start": "2024-03-01",
                "period_end": "2024-03-31",
            },
        )
        assert response.status_code == 201, response.text
        item = response.json()
        assert Decimal(item["net_pay"]) == Decimal("4250")

        response = await client.post(
            f"/api/v1/payroll/periods/{item['period_id']}/status", json={"status": "completed"}
        )
        assert response.json()["status"] == "completed"

        history = (await client.get("/api/v1/payroll/history")).json()
        assert [h["period_status"] for h in history] == ["completed"]

        report = await client.get(f"/api/v1/payroll/history/{item['id']}/report")
        assert report.status_code == 200
        assert "Net Pay: $4250.00" in report.text

    async def test_invalid_period_is_400(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/payroll",
            json={
                "employee_id": employee_id,
                "period_start": "2024-03-31",
                "period_end": "2024-03-01",
            },
        )
        assert response.status_code == 400
        assert (await client.get("/api/v1/payroll/history")).json() == []

    async def test_calculate(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/calculate",
            json={"base_salary": "1000", "tax_deductions": "1200"},
        )

        assert Decimal(response.json()["net_pay"]) == Decimal("-200")

    async def test_calculate_blank_and_null_amounts_count_as_zero(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/calculate",
            json={"base_salary": "1000", "overtime_hours": "", "bonuses": None, "allowances": "abc"},
        )

        assert response.status_code == 200, response.text
        assert Decimal(response.json()["gross_pay"]) == Decimal("1000")

    async def test_created_amounts_match_history(self, client: AsyncClient, employee_id: str):
        response = await client.post(
            "/api/v1/payroll",
            json={
                "employee_id": employee_id,
                "period_start": "2024-06-01",
                "period_end": "2024-06-30",
                "amounts": {
                    "base_salary": "1000",
                    "overtime_hours": "1.5",
                    "overtime_rate": "20.25",
                    "tax_deductions": "",
                },
            },
        )
        assert response.status_code == 201, response.text
        created = response.json()

        [history] = (await client.get("/api/v1/payroll/history")).json()
        assert Decimal(created["overtime_pay"]) == Decimal("30.38")
        assert Decimal(created["gross_pay"]) == Decimal(history["gross_pay"]) == Decimal("1030.38")


class TestPayslipAndTaxEndpoints:
    async def test_payslip_twice(self, client: AsyncClient, employee_id: str):
        payload = {"employee_id": employee_id, "month": "March", "year": 2024}
        first = (await client.post("/api/v1/payslips", json=payload)).json()
        second = (await client.post("/api/v1/payslips", json=payload)).json()

        assert first["id"] != second["id"]
        assert Decimal(first["net_salary"]) == Decimal("4750")
        listing = (await client.get("/api/v1/payslips", params={"employee_id": employee_id})).json()
        assert len(listing) == 2

        text = await client.get(f"/api/v1/payslips/{first['id']}/text")
        assert text.status_code == 200
        assert text.headers["content-disposition"] == 'attachment; filename="payslip-March-2024.txt"'
        assert text.text.endswith("Net Salary: $4750.00")

    async def test_tax_details_and_preview(self, client: AsyncClient, employee_id: str):
        response = await client.put(
            "/api/v1/tax/details",
            json={"employee_id": employee_id, "tax_year": 2024, "filing_status": "single"},
        )
        assert response.status_code == 200, response.text

        fetched = await client.get(f"/api/v1/tax/details/{employee_id}/2024")
        assert fetched.json()["filing_status"] == "single"
        missing = await client.get(f"/api/v1/tax/details/{employee_id}/2023")
        assert missing.status_code == 404

        preview = (await client.post("/api/v1/tax/preview", json={"income": "1000"})).json()
        assert Decimal(preview["total"]) == Decimal("280")

        bad = await client.post("/api/v1/tax/preview", json={"income": "0"})
        assert bad.status_code == 400


class TestAuthEndpoints:
    async def test_sign_up_sign_in_sign_out(self, client: AsyncClient, app):
        response = await client.post(
            "/api/v1/auth/sign-up",
            json={"email": "admin@example.com", "password": "s3cret!", "full_name": "Ada Admin",
                  "role": "admin"},
        )
        assert response.status_code == 201, response.text
        assert response.json()["role"] == "admin"

        # Same email inside the window is throttled
        throttled = await client.post(
            "/api/v1/auth/sign-in", json={"email": "admin@example.com", "password": "s3cret!"}
        )
        assert throttled.status_code == 429
        assert throttled.headers["Retry-After"]

        app.state.auth_rate_limiter.reset()
        signed_in = await client.post(
            "/api/v1/auth/sign-in", json={"email": "admin@example.com", "password": "s3cret!"}
        )
        assert signed_in.status_code == 200
        body = signed_in.json()
        assert body["profile"]["full_name"] == "Ada Admin"

        activity = (await client.get("/api/v1/employees/activity")).json()
        assert {(a["action"], a["user"]) for a in activity} == {
            ("Signed up", "Ada Admin"),
            ("Signed in", "Ada Admin"),
        }

        signed_out = await client.post(
            "/api/v1/auth/sign-out", json={"access_token": body["access_token"]}
        )
        assert signed_out.status_code == 204

    async def test_bad_credentials_is_401(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/sign-in", json={"email": "ghost@example.com", "password": "nope"}
        )
        assert response.status_code == 401
