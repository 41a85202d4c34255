"""Leave request model."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_pro.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_pro.models.employee import Employee


class LeaveType(str, Enum):
    """Leave request categories."""

    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    UNPAID = "unpaid"


class LeaveRequest(Base, TimestampMixin):
    """Employee leave request."""

    __tablename__ = "leaves"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="leaves_dates_check"),
        CheckConstraint(
            "type IN ('annual', 'sick', 'personal', 'unpaid')",
            name="leaves_type_check",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="leaves_status_check",
        ),
    )

    employee: Mapped[Employee] = relationship()
