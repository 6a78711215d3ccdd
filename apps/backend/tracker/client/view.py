"""Client-side view state for the job board.

``JobBoard`` holds what a list screen needs between requests: the last
fetched list, the status filter, the checkbox selection and the archived
toggle. It never patches the list locally; every successful mutation is
followed by a full re-fetch, and the server's ordering is kept as-is.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import UUID

import httpx

from tracker.client.api import ApiError, JobsApiClient
from tracker.models import JobPriority, JobStatus
from tracker.schemas.job import BatchUpdateResponse, JobResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_FILTER_ALL = "All"

# Called before a delete is sent; returning False cancels it.
ConfirmDelete = Callable[[UUID, JobResponse | None], bool]


def _decline(job_id: UUID, job: JobResponse | None) -> bool:
    return False


class JobBoard:
    """List/form state driven through a ``JobsApiClient``."""

    def __init__(self, api: JobsApiClient, confirm_delete: ConfirmDelete | None = None):
        """Initialize the board.

        Args:
            api: Client used for every request
            confirm_delete: Confirmation hook for deletes. Without one,
                every delete is declined.
        """
        self.api = api
        self.confirm_delete = confirm_delete or _decline
        self.jobs: list[JobResponse] = []
        self.status_filter = STATUS_FILTER_ALL
        self.selected: list[UUID] = []
        self.show_archived = False

    @property
    def visible_jobs(self) -> list[JobResponse]:
        """Fetched jobs narrowed by the status filter, in server order."""
        return [
            job for job in self.jobs
            if (self.status_filter == STATUS_FILTER_ALL or job.status.value == self.status_filter)
            and job.archived == self.show_archived
        ]

    async def refresh(self) -> bool:
        """Re-fetch the list for the current archived toggle.

        Returns:
            False if the request failed; the previous list is kept
        """
        try:
            self.jobs = await self.api.list_jobs(archived=self.show_archived)
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Error fetching jobs: {e}")
            return False
        return True

    async def load(self) -> bool:
        return await self.refresh()

    def set_status_filter(self, value: str) -> None:
        """Filter the fetched list by status. Does not call the server."""
        allowed = {STATUS_FILTER_ALL} | {member.value for member in JobStatus}
        if value not in allowed:
            raise ValueError(f"Unknown status filter: {value!r}")
        self.status_filter = value

    async def set_show_archived(self, show_archived: bool) -> bool:
        if show_archived == self.show_archived:
            return True
        self.show_archived = show_archived
        return await self.refresh()

    def toggle_selection(self, job_id: UUID) -> None:
        if job_id in self.selected:
            self.selected.remove(job_id)
        else:
            self.selected.append(job_id)

    def deselect_all(self) -> None:
        self.selected.clear()

    async def _perform(self, action: str, call: Awaitable[T]) -> T | None:
        try:
            result = await call
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Error {action}: {e}")
            return None
        await self.refresh()
        return result

    async def submit(
        self,
        description: str,
        location: str,
        priority: JobPriority | str = JobPriority.LOW,
    ) -> JobResponse | None:
        job = await self._perform(
            "creating job",
            self.api.create_job(description, location, priority),
        )
        if job is not None:
            logger.info(f"Job created: {job.id}")
        return job

    async def change_status(self, job_id: UUID, status: JobStatus | str) -> JobResponse | None:
        return await self._perform("updating status", self.api.update_job(job_id, status))

    async def batch_update(self, status: JobStatus | str) -> BatchUpdateResponse | None:
        """Apply ``status`` to every selected job.

        The selection is cleared only when the request succeeds.

        Returns:
            The batch result, or None if nothing was selected or the request failed
        """
        if not self.selected:
            return None
        result = await self._perform(
            "performing batch update",
            self.api.update_jobs_status(list(self.selected), status),
        )
        if result is not None:
            self.selected.clear()
        return result

    async def archive(self, job_id: UUID) -> JobResponse | None:
        return await self._perform("archiving job", self.api.archive_job(job_id))

    async def delete(self, job_id: UUID) -> bool:
        """Delete a job after the confirmation hook agrees.

        Returns:
            True if the job was deleted
        """
        job = next((j for j in self.jobs if j.id == job_id), None)
        if not self.confirm_delete(job_id, job):
            logger.info(f"Delete of job {job_id} cancelled")
            return False

        message = await self._perform("deleting job", self.api.delete_job(job_id))
        if message is None:
            return False
        if job_id in self.selected:
            self.selected.remove(job_id)
        return True
