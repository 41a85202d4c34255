"""Attendance and leave time derivations."""

from __future__ import annotations

from datetime import date, datetime, time

from payroll_pro.calculators.types import AttendanceStatus, ShiftDuration

# Clock-ins at or after this wall-clock hour are late
LATE_THRESHOLD_HOUR = 9


def parse_clock_time(value: str | time | datetime) -> time:
    """Parse an "HH:mm" (or "HH:mm:ss") string into a time.

    Raises:
        ValueError: If the string is not a valid clock time
    """
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid clock time: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    return time(hour, minute)


def derive_attendance_status(clock_in: str | time | datetime) -> AttendanceStatus:
    """Status for a clock-in, judged on the hour alone.

    08:59 is present; 09:00 and 09:01 are late. Absent is never derived here.
    """
    hour = parse_clock_time(clock_in).hour
    if hour >= LATE_THRESHOLD_HOUR:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def calculate_duration(
    time_in: str | time | datetime,
    time_out: str | time | datetime,
) -> ShiftDuration:
    """Duration of a same-day shift.

    A time_out before time_in gives a negative duration rather than wrapping
    past midnight.
    """
    start = parse_clock_time(time_in)
    end = parse_clock_time(time_out)
    total = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    return ShiftDuration(total_minutes=total)


def leave_span_days(start_date: date, end_date: date) -> int:
    """Whole days between start and end (a same-day leave is 0).

    Display only; leave allotments are not decremented.
    """
    return (end_date - start_date).days
