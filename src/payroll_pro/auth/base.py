"""Base protocol and types for authentication providers.

The provider owns credentials and sessions. Profiles live in our own
database and are keyed by the provider's identity id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID


@dataclass(frozen=True)
class AuthIdentity:
    """A user as known to the auth provider."""

    id: UUID
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    """An authenticated session issued by the provider."""

    access_token: str
    identity: AuthIdentity
    expires_at: datetime | None = None


class AuthProvider(Protocol):
    """Protocol for authentication provider adapters.

    Implementations raise AuthenticationError for rejected credentials
    or sign-ups, and BackendError when the provider itself is unreachable.
    """

    provider_name: str

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthIdentity:
        """Register a new identity."""
        ...

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Verify credentials and issue a session."""
        ...

    async def sign_out(self, access_token: str) -> None:
        """Invalidate a session. Unknown tokens are ignored."""
        ...
