"""Payslip API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status
from fastapi.responses import PlainTextResponse

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import ErrorResponse, PayslipCreate, PayslipResponse
from payroll_pro.services.payslip_service import PayslipService, render_payslip

router = APIRouter(prefix="/payslips", tags=["payslips"])


@router.post(
    "",
    response_model=PayslipResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def generate_payslip(db: DbSession, payload: PayslipCreate) -> PayslipResponse:
    """Generate a payslip; each call inserts a new one."""
    payslip = await PayslipService(db).generate_payslip(
        payload.employee_id, month=payload.month, year=payload.year
    )
    return PayslipResponse.model_validate(payslip)


@router.get("", response_model=list[PayslipResponse])
async def list_payslips(
    db: DbSession,
    employee_id: Annotated[UUID, Query()],
) -> list[PayslipResponse]:
    """An employee's payslips, newest first."""
    payslips = await PayslipService(db).list_payslips(employee_id)
    return [PayslipResponse.model_validate(p) for p in payslips]


@router.get(
    "/{payslip_id}/text",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse}},
)
async def payslip_text(db: DbSession, payslip_id: Annotated[UUID, Path()]) -> PlainTextResponse:
    """Plain-text payslip as a download."""
    payslip = await PayslipService(db).get_payslip(payslip_id)
    filename = f"payslip-{payslip.month}-{payslip.year}.txt"
    return PlainTextResponse(
        render_payslip(payslip, payslip.employee),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
