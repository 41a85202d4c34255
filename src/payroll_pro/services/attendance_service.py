"""Attendance clock-in/clock-out."""

from __future__ import annotations

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_pro.calculators.time_utils import calculate_duration, derive_attendance_status
from payroll_pro.calculators.types import AttendanceStatus, ShiftDuration
from payroll_pro.database import commit_or_raise
from payroll_pro.errors import BackendError, NotFoundError, ValidationError
from payroll_pro.models import AttendanceRecord, Employee

logger = logging.getLogger(__name__)


def to_wall_clock(at: datetime) -> datetime:
    """Convert an aware datetime to naive local wall-clock time."""
    if at.tzinfo is None:
        return at
    return at.astimezone().replace(tzinfo=None)


class AttendanceService:
    """Records attendance, one row per employee per calendar date.

    The (employee_id, date) unique constraint is what stops a second
    clock-in for the same day; there is no read-then-insert check.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def clock_in(self, employee_id: UUID, at: datetime) -> AttendanceRecord:
        """Open today's record with a status derived from the clock-in hour."""
        at = to_wall_clock(at)
        await self._require_employee(employee_id)

        record = AttendanceRecord(
            employee_id=employee_id,
            date=at.date(),
            time_in=at,
            time_out=None,
            status=derive_attendance_status(at).value,
        )
        return await self._insert(record)

    async def clock_out(self, employee_id: UUID, at: datetime) -> AttendanceRecord:
        """Close the record for the clock-out date.

        Only time_out changes; the status set at clock-in stays.
        """
        at = to_wall_clock(at)
        record = await self.get_record(employee_id, at.date())
        if record is None or record.time_in is None:
            raise NotFoundError("Clock-in", f"{employee_id} on {at.date()}")
        if record.time_out is not None:
            raise ValidationError("Already clocked out for this date", field="time_out")
        if at <= record.time_in:
            raise ValidationError("Clock-out must be after clock-in", field="time_out")

        record.time_out = at
        await commit_or_raise(self.session, "clock out")
        logger.info("Employee %s clocked out at %s", employee_id, at.isoformat())
        return record

    async def mark_absent(self, employee_id: UUID, on: date) -> AttendanceRecord:
        """Administrator entry of an absence for a date with no clock-in."""
        await self._require_employee(employee_id)
        record = AttendanceRecord(
            employee_id=employee_id,
            date=on,
            time_in=None,
            time_out=None,
            status=AttendanceStatus.ABSENT.value,
        )
        return await self._insert(record)

    async def get_record(self, employee_id: UUID, on: date) -> AttendanceRecord | None:
        """Get the attendance record for an employee and date."""
        result = await self.session.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.date == on,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_date(self, on: date) -> list[AttendanceRecord]:
        """All records for a date with employees loaded, earliest clock-in first."""
        result = await self.session.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.date == on)
            .options(selectinload(AttendanceRecord.employee))
            .order_by(AttendanceRecord.time_in)
        )
        return list(result.scalars().all())

    async def list_for_employee(self, employee_id: UUID) -> list[AttendanceRecord]:
        """An employee's records, newest date first."""
        result = await self.session.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.employee_id == employee_id)
            .order_by(AttendanceRecord.date.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    def shift_duration(record: AttendanceRecord) -> ShiftDuration | None:
        """Worked duration for a closed record."""
        if record.time_in is None or record.time_out is None:
            return None
        return calculate_duration(record.time_in, record.time_out)

    async def _insert(self, record: AttendanceRecord) -> AttendanceRecord:
        employee_id, on = record.employee_id, record.date
        self.session.add(record)
        try:
            await commit_or_raise(self.session, "record attendance")
        except IntegrityError as e:
            # Only an existing row for the same day is a duplicate
            if await self.get_record(employee_id, on) is not None:
                raise ValidationError(f"Attendance already recorded for {on}", field="date") from e
            raise BackendError("record attendance", e) from e

        logger.info(
            "Recorded %s attendance for employee %s on %s",
            record.status,
            record.employee_id,
            record.date,
        )
        return record

    async def _require_employee(self, employee_id: UUID) -> None:
        if await self.session.get(Employee, employee_id) is None:
            raise NotFoundError("Employee", employee_id)
