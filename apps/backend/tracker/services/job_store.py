"""Persistence for Job records.

Thin async wrapper over an ``AsyncSession``. Mutating calls only flush; the
session owner (``Database.session``) commits once per request, so a single
create/update/delete is atomic and the batch status update is one multi-row
UPDATE statement.
"""

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Job, status_rank

logger = logging.getLogger(__name__)


class JobStore:
    """CRUD and filtered-list operations over the ``jobs`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, job: Job) -> Job:
        """Persist a new job and return it with store-assigned fields."""
        self.db.add(job)
        await self.db.flush()
        await self.db.refresh(job)
        return job

    async def get(self, job_id: UUID) -> Job | None:
        result = await self.db.execute(select(Job).where(Job.id == job_id))
        return result.scalar_one_or_none()

    async def find_by_archived(self, archived: bool) -> Sequence[Job]:
        """Jobs with the given archived flag, by status order then submission date."""
        query = (
            select(Job)
            .where(Job.archived == archived)
            .order_by(status_rank, Job.date_submitted)
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def update(self, job_id: UUID, values: dict[str, Any]) -> Job | None:
        """Merge ``values`` into a stored job.

        Args:
            job_id: Job UUID
            values: Column name to new value

        Returns:
            The updated job, or None if no job has this ID
        """
        job = await self.get(job_id)
        if job is None:
            return None

        for column, value in values.items():
            setattr(job, column, value)

        await self.db.flush()
        await self.db.refresh(job)
        return job

    async def update_status_many(self, job_ids: Sequence[UUID], status: str) -> int:
        """Set ``status`` on the given jobs, skipping those already at it.

        Args:
            job_ids: Job UUIDs to update
            status: Target status value

        Returns:
            Number of rows actually modified
        """
        stmt = (
            update(Job)
            .where(Job.id.in_(job_ids), Job.status != status)
            .values(status=status)
        )
        result = await self.db.execute(stmt)
        logger.debug(f"Batch status update to {status!r} matched {result.rowcount} rows")
        return result.rowcount

    async def delete(self, job_id: UUID) -> bool:
        """Remove a job permanently.

        Returns:
            True if a row was deleted, False if no job had this ID
        """
        result = await self.db.execute(delete(Job).where(Job.id == job_id))
        return result.rowcount > 0
