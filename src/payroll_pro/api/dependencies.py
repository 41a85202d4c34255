"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.database import init_db
from payroll_pro.services.auth_service import AuthService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_auth_service(request: Request, db: DbSession) -> AuthService:
    """Auth service over the app's provider and rate limiter."""
    return AuthService(
        session=db,
        provider=request.app.state.auth_provider,
        rate_limiter=request.app.state.auth_rate_limiter,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
