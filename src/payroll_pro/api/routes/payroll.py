"""Payroll API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status
from fastapi.responses import PlainTextResponse

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import (
    ErrorResponse,
    PayrollAmountsInput,
    PayrollCalculation,
    PayrollCreate,
    PayrollHistoryResponse,
    PayrollItemResponse,
    PayrollPeriodResponse,
    PeriodStatusUpdate,
)
from payroll_pro.services.payroll_service import (
    PayrollInputs,
    PayrollService,
    render_payroll_report,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _to_inputs(amounts: PayrollAmountsInput) -> PayrollInputs:
    return PayrollInputs(**amounts.model_dump())


@router.post(
    "",
    response_model=PayrollItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def create_payroll(db: DbSession, payload: PayrollCreate) -> PayrollItemResponse:
    """Create a pending payroll period with one employee's item."""
    item = await PayrollService(db).create_payroll(
        employee_id=payload.employee_id,
        period_start=payload.period_start,
        period_end=payload.period_end,
        inputs=_to_inputs(payload.amounts) if payload.amounts is not None else None,
    )
    return PayrollItemResponse.model_validate(item)


@router.post("/calculate", response_model=PayrollCalculation)
async def calculate_payroll(payload: PayrollAmountsInput) -> PayrollCalculation:
    """Derive overtime, gross and net pay without saving anything."""
    amounts = PayrollService.calculate(_to_inputs(payload))
    return PayrollCalculation(
        overtime_pay=amounts.overtime_pay,
        gross_pay=amounts.gross_pay,
        net_pay=amounts.net_pay,
    )


@router.post(
    "/periods/{period_id}/status",
    response_model=PayrollPeriodResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_period_status(
    db: DbSession,
    period_id: Annotated[UUID, Path()],
    payload: PeriodStatusUpdate,
) -> PayrollPeriodResponse:
    """Move a payroll period through its lifecycle."""
    period = await PayrollService(db).transition_period(period_id, payload.status)
    return PayrollPeriodResponse.model_validate(period)


@router.get(
    "/history",
    response_model=list[PayrollHistoryResponse],
    responses={400: {"model": ErrorResponse}},
)
async def payroll_history(
    db: DbSession,
    employee_id: Annotated[UUID | None, Query()] = None,
    sort: Annotated[str, Query()] = "created_at",
    direction: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
    period: Annotated[str, Query()] = "all",
) -> list[PayrollHistoryResponse]:
    """Payroll items joined with their period and employee."""
    history = await PayrollService(db).list_history(
        employee_id=employee_id,
        sort_field=sort,
        descending=direction == "desc",
        period_filter=period,
    )
    return [PayrollHistoryResponse.model_validate(h) for h in history]


@router.get(
    "/history/{item_id}/report",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse}},
)
async def payroll_report(db: DbSession, item_id: Annotated[UUID, Path()]) -> PlainTextResponse:
    """Plain-text report for one payroll item."""
    item = await PayrollService(db).get_history_item(item_id)
    return PlainTextResponse(
        render_payroll_report(item),
        headers={"Content-Disposition": f'attachment; filename="{item.report_filename}"'},
    )
