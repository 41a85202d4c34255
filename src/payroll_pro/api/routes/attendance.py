"""Attendance API endpoints."""

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy import inspect

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import (
    AbsentRequest,
    AttendanceResponse,
    ClockRequest,
    DurationResponse,
    ErrorResponse,
)
from payroll_pro.calculators.time_utils import calculate_duration, parse_clock_time
from payroll_pro.errors import ValidationError
from payroll_pro.models import AttendanceRecord
from payroll_pro.services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance", tags=["attendance"])


def to_attendance_response(record: AttendanceRecord) -> AttendanceResponse:
    """Attendance row plus display duration and, when loaded, employee details."""
    duration = AttendanceService.shift_duration(record)
    employee = None if "employee" in inspect(record).unloaded else record.employee
    return AttendanceResponse(
        id=record.id,
        employee_id=record.employee_id,
        date=record.date,
        time_in=record.time_in,
        time_out=record.time_out,
        status=record.status,
        duration=str(duration) if duration is not None else None,
        employee_name=employee.full_name if employee is not None else None,
        department=employee.department if employee is not None else None,
    )


@router.post(
    "/clock-in",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def clock_in(db: DbSession, payload: ClockRequest) -> AttendanceResponse:
    """Record a clock-in; status is late from 09:00 onwards."""
    record = await AttendanceService(db).clock_in(
        payload.employee_id, payload.at or datetime.now()
    )
    return to_attendance_response(record)


@router.post(
    "/clock-out",
    response_model=AttendanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def clock_out(db: DbSession, payload: ClockRequest) -> AttendanceResponse:
    """Close today's record."""
    record = await AttendanceService(db).clock_out(
        payload.employee_id, payload.at or datetime.now()
    )
    return to_attendance_response(record)


@router.post(
    "/absent",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def mark_absent(db: DbSession, payload: AbsentRequest) -> AttendanceResponse:
    """Record an absence for a date without a clock-in."""
    record = await AttendanceService(db).mark_absent(payload.employee_id, payload.date)
    return to_attendance_response(record)


@router.get("", response_model=list[AttendanceResponse])
async def list_attendance(
    db: DbSession,
    on: Annotated[date | None, Query(alias="date")] = None,
) -> list[AttendanceResponse]:
    """Attendance for a date (default today) with employee details."""
    records = await AttendanceService(db).list_for_date(on or date.today())
    return [to_attendance_response(r) for r in records]


@router.get(
    "/duration",
    response_model=DurationResponse,
    responses={400: {"model": ErrorResponse}},
)
async def duration(
    time_in: Annotated[str, Query()],
    time_out: Annotated[str, Query()],
) -> DurationResponse:
    """Hours and minutes between two "HH:mm" times."""
    for field, value in (("time_in", time_in), ("time_out", time_out)):
        try:
            parse_clock_time(value)
        except ValueError as e:
            raise ValidationError(str(e), field=field) from e
    shift = calculate_duration(time_in, time_out)
    return DurationResponse(
        time_in=time_in,
        time_out=time_out,
        total_minutes=shift.total_minutes,
        hours=shift.hours,
        minutes=shift.minutes,
        display=str(shift),
    )
