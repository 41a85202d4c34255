"""Administrator dashboard statistics and activity feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_pro.errors import BackendError
from payroll_pro.models import ActivityEntry, Employee, PayrollPeriod, Profile
from payroll_pro.services.state_machine import PayrollStatus

# Largest unit first; a unit is used only once more than one of it has passed.
_TIME_UNITS = (
    (31_536_000, "years"),
    (2_592_000, "months"),
    (86_400, "days"),
    (3_600, "hours"),
    (60, "minutes"),
)


def time_ago(moment: datetime, now: datetime | None = None) -> str:
    """Coarse relative time, e.g. "3 days ago" or "just now".

    Naive datetimes are taken as UTC.
    """
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - moment).total_seconds())
    for unit_seconds, label in _TIME_UNITS:
        interval = seconds // unit_seconds
        if interval > 1:
            return f"{interval} {label} ago"
    return "just now"


def record_activity(
    session: AsyncSession, action: str, profile: Profile | None = None
) -> ActivityEntry:
    """Add an activity entry to the session; the caller's commit saves it."""
    entry = ActivityEntry(action=action, profile=profile)
    session.add(entry)
    return entry


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    total_payroll: Decimal
    average_salary: Decimal
    departments: int
    pending_payroll_periods: int


@dataclass(frozen=True)
class ActivityItem:
    id: UUID
    action: str
    user: str
    time: str
    created_at: datetime


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stats(self) -> DashboardStats:
        """Headcount, salary totals, department count and pending periods."""
        try:
            row = (
                await self.session.execute(
                    select(
                        func.count(Employee.id),
                        func.coalesce(func.sum(Employee.gross_salary), 0),
                        func.count(func.distinct(Employee.department)),
                    )
                )
            ).one()
            pending = await self.session.scalar(
                select(func.count(PayrollPeriod.id)).where(
                    PayrollPeriod.status == PayrollStatus.PENDING.value
                )
            )
        except SQLAlchemyError as e:
            raise BackendError("load dashboard statistics", e) from e

        total_employees, total_payroll, departments = row
        total_payroll = Decimal(str(total_payroll))
        average = total_payroll / total_employees if total_employees else Decimal("0")

        return DashboardStats(
            total_employees=total_employees,
            total_payroll=total_payroll,
            average_salary=average,
            departments=departments,
            pending_payroll_periods=pending or 0,
        )

    async def recent_activity(
        self, limit: int = 3, now: datetime | None = None
    ) -> list[ActivityItem]:
        """Latest activity entries, newest first."""
        try:
            result = await self.session.execute(
                select(ActivityEntry)
                .options(selectinload(ActivityEntry.profile))
                .order_by(ActivityEntry.created_at.desc())
                .limit(limit)
            )
        except SQLAlchemyError as e:
            raise BackendError("load recent activity", e) from e

        return [
            ActivityItem(
                id=entry.id,
                action=entry.action,
                user=entry.profile.full_name if entry.profile else "System",
                time=time_ago(entry.created_at, now),
                created_at=entry.created_at,
            )
            for entry in result.scalars().all()
        ]
