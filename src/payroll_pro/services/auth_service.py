"""Sign-up, sign-in and sign-out with per-email throttling."""

from __future__ import annotations

import logging
import math
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_pro.auth.base import AuthProvider, AuthSession
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import BackendError, NotFoundError, RateLimitError, ValidationError
from payroll_pro.models import Profile, Role
from payroll_pro.services.dashboard_service import record_activity

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allows one attempt per key per window.

    An attempt is recorded when it is checked, whether or not it later
    succeeds. At most `capacity` keys are tracked; the least recently
    seen key is evicted first.
    """

    def __init__(
        self,
        window_seconds: float = 60,
        capacity: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.window_seconds = window_seconds
        self.capacity = capacity
        self.clock = clock
        self._last_attempt: OrderedDict[str, float] = OrderedDict()

    def check(self, key: str) -> None:
        """Record an attempt for key.

        Raises:
            RateLimitError: If the previous attempt is inside the window
        """
        now = self.clock()
        last = self._last_attempt.get(key)
        if last is not None:
            elapsed = now - last
            if elapsed < self.window_seconds:
                retry_after = math.ceil(self.window_seconds - elapsed)
                logger.warning("Throttled auth attempt for %s (retry in %ss)", key, retry_after)
                raise RateLimitError(key, retry_after)

        self._last_attempt[key] = now
        self._last_attempt.move_to_end(key)
        while len(self._last_attempt) > self.capacity:
            self._last_attempt.popitem(last=False)

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._last_attempt.clear()
        else:
            self._last_attempt.pop(key, None)

    def __len__(self) -> int:
        return len(self._last_attempt)


@dataclass(frozen=True)
class SignInResult:
    session: AuthSession
    profile: Profile


class AuthService:
    """Wraps the auth provider and keeps profiles in step with identities."""

    def __init__(
        self,
        session: AsyncSession,
        provider: AuthProvider,
        rate_limiter: RateLimiter,
    ):
        self.session = session
        self.provider = provider
        self.rate_limiter = rate_limiter

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        phone_number: str = "",
        department: str = "",
        role: Role | str = Role.EMPLOYEE,
    ) -> Profile:
        """Register an identity with the provider and create its profile.

        Raises:
            RateLimitError: If this email tried inside the window
            ValidationError: If a profile already uses the email
            AuthenticationError: If the provider rejects the sign-up
            BackendError: If the profile cannot be written
        """
        email = email.strip().lower()
        self.rate_limiter.check(email)

        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Invalid role: {role}", field="role")
        if not full_name or not full_name.strip():
            raise ValidationError("Full name is required", field="full_name")

        if await self._find_profile_by_email(email) is not None:
            raise ValidationError("An account with this email already exists", field="email")

        identity = await self.provider.sign_up(
            email,
            password,
            metadata={
                "full_name": full_name,
                "phone_number": phone_number,
                "department": department,
                "role": role.value,
            },
        )

        profile = Profile(
            id=identity.id,
            email=email,
            full_name=full_name.strip(),
            phone_number=phone_number or "",
            department=department or "",
            role=role.value,
        )
        self.session.add(profile)
        record_activity(self.session, "Signed up", profile)
        try:
            await commit_or_raise(self.session, "create user profile")
        except IntegrityError as e:
            logger.error("Profile creation failed for identity %s: %s", identity.id, e)
            raise BackendError("create user profile", e) from e

        logger.info("Signed up %s as %s", email, role.value)
        return profile

    async def sign_in(self, email: str, password: str) -> SignInResult:
        """Authenticate and load the caller's profile."""
        email = email.strip().lower()
        self.rate_limiter.check(email)

        auth_session = await self.provider.sign_in(email, password)

        profile = await self.session.get(Profile, auth_session.identity.id)
        if profile is None:
            logger.error("No profile for identity %s", auth_session.identity.id)
            raise NotFoundError("Profile", auth_session.identity.id)

        record_activity(self.session, "Signed in", profile)
        await commit_or_raise(self.session, "record sign-in")

        logger.info("Signed in %s", email)
        return SignInResult(session=auth_session, profile=profile)

    async def sign_out(self, access_token: str) -> None:
        await self.provider.sign_out(access_token)

    async def _find_profile_by_email(self, email: str) -> Profile | None:
        result = await self.session.execute(select(Profile).where(Profile.email == email))
        return result.scalar_one_or_none()
