"""Leave request API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status
from sqlalchemy import inspect

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import (
    ErrorResponse,
    LeaveAllotmentResponse,
    LeaveCreate,
    LeaveResponse,
)
from payroll_pro.calculators.time_utils import leave_span_days
from payroll_pro.models import LeaveRequest
from payroll_pro.services.leave_service import LEAVE_ALLOTMENTS, LeaveService

router = APIRouter(prefix="/leaves", tags=["leaves"])


def to_leave_response(leave: LeaveRequest) -> LeaveResponse:
    employee = None if "employee" in inspect(leave).unloaded else leave.employee
    return LeaveResponse(
        id=leave.id,
        employee_id=leave.employee_id,
        start_date=leave.start_date,
        end_date=leave.end_date,
        type=leave.type,
        reason=leave.reason,
        status=leave.status,
        days=leave_span_days(leave.start_date, leave.end_date),
        employee_name=employee.full_name if employee is not None else None,
        created_at=leave.created_at,
    )


@router.post(
    "",
    response_model=LeaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def request_leave(db: DbSession, payload: LeaveCreate) -> LeaveResponse:
    """Submit a leave request; it starts pending."""
    leave = await LeaveService(db).request_leave(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        leave_type=payload.type,
        reason=payload.reason,
    )
    return to_leave_response(leave)


@router.get("", response_model=list[LeaveResponse])
async def list_leaves(
    db: DbSession,
    employee_id: Annotated[UUID | None, Query()] = None,
) -> list[LeaveResponse]:
    """Leave requests, newest first."""
    leaves = await LeaveService(db).list_leaves(employee_id=employee_id)
    return [to_leave_response(leave) for leave in leaves]


@router.get("/allotments", response_model=list[LeaveAllotmentResponse])
async def leave_allotments() -> list[LeaveAllotmentResponse]:
    """Available days per leave type."""
    return [
        LeaveAllotmentResponse(type=leave_type.value, available_days=days)
        for leave_type, days in LEAVE_ALLOTMENTS.items()
    ]


@router.post(
    "/{leave_id}/approve",
    response_model=LeaveResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def approve_leave(db: DbSession, leave_id: Annotated[UUID, Path()]) -> LeaveResponse:
    """Approve a pending request."""
    return to_leave_response(await LeaveService(db).approve_leave(leave_id))


@router.post(
    "/{leave_id}/reject",
    response_model=LeaveResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def reject_leave(db: DbSession, leave_id: Annotated[UUID, Path()]) -> LeaveResponse:
    """Reject a pending request."""
    return to_leave_response(await LeaveService(db).reject_leave(leave_id))
