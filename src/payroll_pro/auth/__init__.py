"""Authentication provider adapters."""

from payroll_pro.auth.base import AuthIdentity, AuthProvider, AuthSession
from payroll_pro.auth.local_stub import LocalAuthProvider

__all__ = [
    "AuthIdentity",
    "AuthProvider",
    "AuthSession",
    "LocalAuthProvider",
]
