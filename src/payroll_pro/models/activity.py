"""Activity log model."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_pro.models.base import Base, TimestampMixin
from payroll_pro.models.employee import Profile


class ActivityEntry(Base, TimestampMixin):
    """One line of the administrator dashboard's activity feed.

    profile_id is the acting user; entries written by background or
    administrative operations have none and show as "System".
    """

    __tablename__ = "activity_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    profile_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    action: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (Index("ix_activity_log_created_at", "created_at"),)

    profile: Mapped[Profile | None] = relationship()
