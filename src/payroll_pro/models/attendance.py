"""Attendance model."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_pro.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_pro.models.employee import Employee


class AttendanceRecord(Base, TimestampMixin):
    """One clock-in/clock-out pair per employee per calendar date.

    time_in/time_out hold local wall-clock datetimes. Status is set at
    creation and never recomputed.
    """

    __tablename__ = "attendance"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time_in: Mapped[dt.datetime | None] = mapped_column(DateTime(), nullable=True)
    time_out: Mapped[dt.datetime | None] = mapped_column(DateTime(), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="attendance_employee_date_unique"),
        CheckConstraint(
            "status IN ('present', 'late', 'absent')",
            name="attendance_status_check",
        ),
        CheckConstraint(
            "time_out IS NULL OR time_out > time_in",
            name="attendance_time_order_check",
        ),
    )

    employee: Mapped[Employee] = relationship()

    @property
    def is_open(self) -> bool:
        """Clocked in but not yet out."""
        return self.time_in is not None and self.time_out is None
