"""In-memory auth provider for local development and testing.

Replace with a hosted identity provider adapter for production.
"""

from __future__ import annotations

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from payroll_pro.auth.base import AuthIdentity, AuthSession
from payroll_pro.errors import AuthenticationError

PBKDF2_ITERATIONS = 100_000


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


class LocalAuthProvider:
    """Stub auth provider.

    Identities are auto-confirmed on sign-up. Nothing survives a restart.
    """

    provider_name = "local_stub"

    def __init__(self, session_ttl: timedelta = timedelta(hours=1), min_password_length: int = 6):
        self.session_ttl = session_ttl
        self.min_password_length = min_password_length
        # email -> (identity, salt, password hash)
        self._users: dict[str, tuple[AuthIdentity, bytes, bytes]] = {}
        self._sessions: dict[str, AuthSession] = {}

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any] | None = None
    ) -> AuthIdentity:
        key = email.strip().lower()
        if key in self._users:
            raise AuthenticationError("User already registered")
        if len(password) < self.min_password_length:
            raise AuthenticationError(
                f"Password should be at least {self.min_password_length} characters"
            )

        identity = AuthIdentity(id=uuid.uuid4(), email=key, metadata=dict(metadata or {}))
        salt = secrets.token_bytes(16)
        self._users[key] = (identity, salt, _hash_password(password, salt))
        return identity

    async def sign_in(self, email: str, password: str) -> AuthSession:
        entry = self._users.get(email.strip().lower())
        if entry is None:
            raise AuthenticationError("Invalid login credentials")

        identity, salt, expected = entry
        if not secrets.compare_digest(_hash_password(password, salt), expected):
            raise AuthenticationError("Invalid login credentials")

        session = AuthSession(
            access_token=secrets.token_urlsafe(32),
            identity=identity,
            expires_at=datetime.now(timezone.utc) + self.session_ttl,
        )
        self._sessions[session.access_token] = session
        return session

    async def sign_out(self, access_token: str) -> None:
        self._sessions.pop(access_token, None)

    def get_session(self, access_token: str) -> AuthSession | None:
        """Look up a live session (stub only)."""
        return self._sessions.get(access_token)
