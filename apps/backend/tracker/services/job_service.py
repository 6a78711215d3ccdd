"""Job lifecycle service.

Sits between the jobs router and the ``JobStore``: turns validated request
schemas into store calls, owns the batch-update and archive semantics, and
reports a missing job the same way for every operation.
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.database import get_db
from tracker.models import Job, JobStatus
from tracker.schemas.job import JobBatchStatusUpdate, JobCreate, JobUpdate
from tracker.services.job_store import JobStore

logger = logging.getLogger(__name__)


class JobServiceError(Exception):
    """Base class for job service failures."""


class JobNotFoundError(JobServiceError):
    def __init__(self, job_id: UUID):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class JobValidationError(JobServiceError):
    """Input that passed schema parsing but can't be acted on."""


class JobService:
    """Create, list, update, archive and delete maintenance jobs."""

    def __init__(self, store: JobStore):
        self.store = store

    async def create(self, data: JobCreate) -> Job:
        """Persist a new job in its initial state.

        New jobs always start as ``Submitted`` and not archived, whatever the
        caller sent.

        Args:
            data: Validated creation request

        Returns:
            Stored job including its assigned ID and submission date
        """
        job = Job(
            description=data.description,
            location=data.location,
            priority=data.priority.value,
            status=JobStatus.SUBMITTED.value,
            archived=False,
        )
        return await self.store.add(job)

    async def list_jobs(self, archived: bool = False) -> Sequence[Job]:
        return await self.store.find_by_archived(archived)

    async def update(self, job_id: UUID, data: JobUpdate) -> Job:
        """Apply a partial update (status plus optional text fields).

        Raises:
            JobNotFoundError: No job has this ID
        """
        job = await self.store.update(job_id, data.changes())
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    async def update_status_batch(self, data: JobBatchStatusUpdate) -> int:
        """Set one status on many jobs.

        Jobs already at the target status are left alone and not counted,
        so repeating the same call returns 0.

        Args:
            data: Validated batch request

        Returns:
            Number of jobs whose status changed

        Raises:
            JobValidationError: ids or status missing from the request
        """
        if data.ids is None or data.status is None:
            raise JobValidationError("Missing ids or status")

        modified = await self.store.update_status_many(data.ids, data.status.value)
        logger.info(
            f"Batch status update to {data.status.value!r}: "
            f"{modified}/{len(data.ids)} jobs modified"
        )
        return modified

    async def archive(self, job_id: UUID) -> Job:
        """Mark a job archived.

        Archiving an already-archived job succeeds and changes nothing.

        Raises:
            JobNotFoundError: No job has this ID
        """
        job = await self.store.update(job_id, {"archived": True})
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    async def delete(self, job_id: UUID) -> None:
        """Remove a job permanently.

        Raises:
            JobNotFoundError: No job has this ID
        """
        if not await self.store.delete(job_id):
            raise JobNotFoundError(job_id)


async def get_job_service(db: AsyncSession = Depends(get_db)) -> JobService:
    """FastAPI dependency building a service over the request's session."""
    return JobService(JobStore(db))
