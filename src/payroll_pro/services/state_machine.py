"""Leave request and payroll period state machines."""

from __future__ import annotations

from enum import Enum

from payroll_pro.errors import PayrollProError


class LeaveStatus(str, Enum):
    """Leave request status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayrollStatus(str, Enum):
    """Payroll period and payroll item status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class InvalidTransitionError(PayrollProError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class _StateMachine:
    """Transition table lookups shared by the concrete machines."""

    VALID_TRANSITIONS: dict[str, list[str]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.get_next_statuses(status)


class LeaveStateMachine(_StateMachine):
    """State machine for leave requests.

    Allowed transitions:
    - pending → approved
    - pending → rejected

    Requests are created pending by the employee; only an administrator
    decides them, exactly once.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        LeaveStatus.PENDING: [LeaveStatus.APPROVED, LeaveStatus.REJECTED],
        LeaveStatus.APPROVED: [],  # Terminal state
        LeaveStatus.REJECTED: [],  # Terminal state
    }


class PayrollPeriodStateMachine(_StateMachine):
    """State machine for payroll periods.

    Allowed transitions:
    - pending → processing | completed | failed
    - processing → completed | failed
    - failed → processing (retry)

    Completed periods are historical records and never change again.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.PENDING: [
            PayrollStatus.PROCESSING,
            PayrollStatus.COMPLETED,
            PayrollStatus.FAILED,
        ],
        PayrollStatus.PROCESSING: [PayrollStatus.COMPLETED, PayrollStatus.FAILED],
        PayrollStatus.FAILED: [PayrollStatus.PROCESSING],
        PayrollStatus.COMPLETED: [],  # Terminal state
    }

    @classmethod
    def is_immutable(cls, status: str) -> bool:
        """Completed payroll is read-only history."""
        return status == PayrollStatus.COMPLETED
