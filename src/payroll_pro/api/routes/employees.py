"""Employee API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import (
    ActivityItemResponse,
    AttendanceResponse,
    DashboardStatsResponse,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
    PayslipResponse,
)
from payroll_pro.api.routes.attendance import to_attendance_response
from payroll_pro.api.routes.leaves import to_leave_response
from payroll_pro.services.dashboard_service import DashboardService
from payroll_pro.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_employee(db: DbSession, payload: EmployeeCreate) -> EmployeeResponse:
    """Create an employee record."""
    employee = await EmployeeService(db).create_employee(**payload.model_dump())
    return EmployeeResponse.model_validate(employee)


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    db: DbSession,
    search: Annotated[str | None, Query()] = None,
) -> list[EmployeeResponse]:
    """List employees, optionally filtered by name or position."""
    employees = await EmployeeService(db).list_employees(search=search)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get("/stats", response_model=DashboardStatsResponse)
async def employee_stats(db: DbSession) -> DashboardStatsResponse:
    """Administrator dashboard statistics."""
    stats = await DashboardService(db).get_stats()
    return DashboardStatsResponse(
        total_employees=stats.total_employees,
        total_payroll=stats.total_payroll,
        average_salary=stats.average_salary,
        departments=stats.departments,
        pending_payroll_periods=stats.pending_payroll_periods,
    )


@router.get("/activity", response_model=list[ActivityItemResponse])
async def recent_activity(
    db: DbSession,
    limit: Annotated[int, Query(ge=1, le=50)] = 3,
) -> list[ActivityItemResponse]:
    """Latest dashboard activity, newest first."""
    items = await DashboardService(db).recent_activity(limit=limit)
    return [ActivityItemResponse.model_validate(item) for item in items]


@router.get(
    "/by-email/{email}",
    responses={404: {"model": ErrorResponse}},
)
async def get_employee_overview(db: DbSession, email: Annotated[str, Path()]) -> dict:
    """Employee self-service view: record, attendance, leaves and payslips."""
    overview = await EmployeeService(db).get_employee_overview(email)
    return {
        "employee": EmployeeResponse.model_validate(overview.employee),
        "attendance": [to_attendance_response(r) for r in overview.attendance],
        "leaves": [to_leave_response(leave) for leave in overview.leaves],
        "payslips": [PayslipResponse.model_validate(p) for p in overview.payslips],
    }


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(db: DbSession, employee_id: Annotated[UUID, Path()]) -> EmployeeResponse:
    """Get an employee by id."""
    employee = await EmployeeService(db).get_employee(employee_id)
    return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_employee(
    db: DbSession,
    employee_id: Annotated[UUID, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Apply administrator edits to an employee."""
    changes = payload.model_dump(exclude_unset=True)
    employee = await EmployeeService(db).update_employee(employee_id, **changes)
    return EmployeeResponse.model_validate(employee)
