"""Leave requests and their approval lifecycle."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_pro.database import commit_or_raise
from payroll_pro.errors import NotFoundError, ValidationError
from payroll_pro.models import Employee, LeaveRequest, LeaveType
from payroll_pro.services.dashboard_service import record_activity
from payroll_pro.services.state_machine import LeaveStateMachine, LeaveStatus

logger = logging.getLogger(__name__)

# Displayed as "available" days; never decremented by approved leave.
LEAVE_ALLOTMENTS: dict[LeaveType, int] = {
    LeaveType.ANNUAL: 15,
    LeaveType.SICK: 10,
    LeaveType.PERSONAL: 5,
    LeaveType.UNPAID: 5,
}


class LeaveService:
    """Service for leave requests.

    Operations:
    - request_leave: employee submission, always created pending
    - approve_leave / reject_leave: administrator decision, made once
    - list_leaves: newest first, with employee details loaded
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def request_leave(
        self,
        employee_id: UUID | None,
        start_date: date | None,
        end_date: date | None,
        leave_type: LeaveType | str,
        reason: str | None,
    ) -> LeaveRequest:
        """Submit a leave request after validating it.

        Raises:
            ValidationError: If any check fails; nothing is written
        """
        if employee_id is None or await self.session.get(Employee, employee_id) is None:
            raise ValidationError("Employee information not found", field="employee_id")

        if start_date is None or end_date is None:
            raise ValidationError("Please select both start and end dates")

        if end_date < start_date:
            raise ValidationError("End date cannot be before start date", field="end_date")

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for your leave", field="reason")

        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError(f"Invalid leave type: {leave_type}", field="type")

        leave = LeaveRequest(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            type=leave_type.value,
            reason=reason,
            status=LeaveStatus.PENDING.value,
        )
        self.session.add(leave)
        await commit_or_raise(self.session, "submit leave request")

        logger.info(
            "Leave %s requested by employee %s (%s, %s to %s)",
            leave.id,
            employee_id,
            leave.type,
            start_date,
            end_date,
        )
        return leave

    async def approve_leave(self, leave_id: UUID) -> LeaveRequest:
        """Approve a pending request."""
        return await self._decide(leave_id, LeaveStatus.APPROVED)

    async def reject_leave(self, leave_id: UUID) -> LeaveRequest:
        """Reject a pending request."""
        return await self._decide(leave_id, LeaveStatus.REJECTED)

    async def get_leave(self, leave_id: UUID) -> LeaveRequest:
        """Get a leave request by id."""
        leave = await self.session.get(LeaveRequest, leave_id)
        if leave is None:
            raise NotFoundError("Leave request", leave_id)
        return leave

    async def list_leaves(self, employee_id: UUID | None = None) -> list[LeaveRequest]:
        """List leave requests, newest first."""
        query = select(LeaveRequest).options(selectinload(LeaveRequest.employee))
        if employee_id is not None:
            query = query.where(LeaveRequest.employee_id == employee_id)
        result = await self.session.execute(
            query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.start_date.desc())
        )
        return list(result.scalars().all())

    async def _decide(self, leave_id: UUID, to_status: LeaveStatus) -> LeaveRequest:
        leave = await self.get_leave(leave_id)
        LeaveStateMachine.validate_transition(leave.status, to_status)

        leave.status = to_status.value
        employee = await self.session.get(Employee, leave.employee_id)
        record_activity(
            self.session,
            f"Leave request {to_status.value} for {employee.full_name} "
            f"({leave.start_date} to {leave.end_date})",
        )
        await commit_or_raise(self.session, f"{to_status.value} leave request")

        logger.info("Leave %s %s", leave_id, to_status.value)
        return leave
