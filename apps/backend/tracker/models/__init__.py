"""Database models for the maintenance tracker."""

from .base import Base
from .job import Job, JobPriority, JobStatus, status_rank

__all__ = [
    "Base",
    "Job",
    "JobPriority",
    "JobStatus",
    "status_rank",
]
