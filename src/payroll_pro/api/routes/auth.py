"""Authentication endpoints."""

from fastapi import APIRouter, status

from payroll_pro.api.dependencies import AuthServiceDep
from payroll_pro.api.schemas import (
    ErrorResponse,
    ProfileResponse,
    SignInRequest,
    SignInResponse,
    SignOutRequest,
    SignUpRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sign-up",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
)
async def sign_up(auth: AuthServiceDep, payload: SignUpRequest) -> ProfileResponse:
    """Register a user and create their profile."""
    profile = await auth.sign_up(**payload.model_dump())
    return ProfileResponse.model_validate(profile)


@router.post(
    "/sign-in",
    response_model=SignInResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def sign_in(auth: AuthServiceDep, payload: SignInRequest) -> SignInResponse:
    """Authenticate and return a session with the caller's profile."""
    result = await auth.sign_in(payload.email, payload.password)
    return SignInResponse(
        access_token=result.session.access_token,
        expires_at=result.session.expires_at,
        profile=ProfileResponse.model_validate(result.profile),
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(auth: AuthServiceDep, payload: SignOutRequest) -> None:
    await auth.sign_out(payload.access_token)
