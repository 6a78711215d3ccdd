"""Job model for maintenance requests."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, String, Text, case
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class JobPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class JobStatus(str, Enum):
    """Job status values, in listing order."""

    SUBMITTED = "Submitted"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


def _in_clause(column: str, enum: type[Enum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum)
    return f"{column} IN ({values})"


class Job(Base):
    """Maintenance job model.

    Status Flow:
        Any status may follow any other; there is no enforced graph.

    Archival:
        archived only ever moves False -> True (see JobService.archive).
    """

    __tablename__ = "jobs"

    # Primary Key - UUID
    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        nullable=False,
    )

    # Request details
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=JobStatus.SUBMITTED.value,
    )
    date_submitted: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        CheckConstraint(_in_clause("priority", JobPriority), name="ck_jobs_priority"),
        CheckConstraint(_in_clause("status", JobStatus), name="ck_jobs_status"),
        Index("idx_jobs_archived_status", "archived", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Job(id={self.id}, location='{self.location}', "
            f"priority={self.priority}, status={self.status}, archived={self.archived})>"
        )


# Sort key mapping status to its declaration order (Submitted < In Progress < Completed)
status_rank = case(
    {member.value: rank for rank, member in enumerate(JobStatus)},
    value=Job.status,
    else_=len(JobStatus),
)
