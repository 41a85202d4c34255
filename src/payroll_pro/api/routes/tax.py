"""Tax details and tax preview endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from payroll_pro.api.dependencies import DbSession
from payroll_pro.api.schemas import (
    ErrorResponse,
    TaxDetailsResponse,
    TaxDetailsUpsert,
    TaxPreviewRequest,
    TaxPreviewResponse,
)
from payroll_pro.errors import NotFoundError
from payroll_pro.services.tax_service import TaxService

router = APIRouter(prefix="/tax", tags=["tax"])


@router.put(
    "/details",
    response_model=TaxDetailsResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def upsert_tax_details(db: DbSession, payload: TaxDetailsUpsert) -> TaxDetailsResponse:
    """Create or replace an employee's tax details for a year."""
    details = await TaxService(db).upsert_tax_details(**payload.model_dump())
    return TaxDetailsResponse.model_validate(details)


@router.get(
    "/details/{employee_id}/{tax_year}",
    response_model=TaxDetailsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_tax_details(
    db: DbSession,
    employee_id: Annotated[UUID, Path()],
    tax_year: Annotated[int, Path()],
) -> TaxDetailsResponse:
    details = await TaxService(db).get_tax_details(employee_id, tax_year)
    if details is None:
        raise NotFoundError("Tax details", f"{employee_id}/{tax_year}")
    return TaxDetailsResponse.model_validate(details)


@router.post(
    "/preview",
    response_model=TaxPreviewResponse,
    responses={400: {"model": ErrorResponse}},
)
async def preview_tax(db: DbSession, payload: TaxPreviewRequest) -> TaxPreviewResponse:
    """Federal, state and local tax for an income."""
    preview = await TaxService(db).preview_tax(payload.income)
    return TaxPreviewResponse(
        federal=preview.federal,
        state=preview.state,
        local=preview.local,
        total=preview.total,
    )
