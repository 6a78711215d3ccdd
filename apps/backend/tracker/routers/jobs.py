"""Jobs API router.

This module provides REST endpoints for the maintenance job lifecycle:
submission, listing, single and batch status updates, archiving and deletion.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from tracker.schemas.job import (
    BatchUpdateResponse,
    JobBatchStatusUpdate,
    JobCreate,
    JobResponse,
    JobUpdate,
    MessageResponse,
)
from tracker.services.job_service import (
    JobNotFoundError,
    JobService,
    JobValidationError,
    get_job_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _store_error(action: str, e: SQLAlchemyError) -> HTTPException:
    logger.error(f"Failed to {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Failed to {action}",
    )


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a maintenance job"
)
async def create_job(
    job_data: JobCreate,
    service: JobService = Depends(get_job_service)
) -> JobResponse:
    """Create a new job.

    The job starts as Submitted and not archived.

    Args:
        job_data: Description, location and priority
        service: Job service

    Returns:
        Created job record

    Raises:
        HTTPException 400: Validation or database error
    """
    try:
        job = await service.create(job_data)
    except SQLAlchemyError as e:
        raise _store_error("create job", e)

    logger.info(f"Created job {job.id}: {job.priority} priority at {job.location}")
    return JobResponse.model_validate(job)


@router.get(
    "",
    response_model=list[JobResponse],
    summary="List jobs"
)
async def list_jobs(
    archived: bool = Query(False, description="Return archived jobs instead of active ones"),
    service: JobService = Depends(get_job_service)
) -> list[JobResponse]:
    """List active or archived jobs.

    Ordered by status (Submitted, In Progress, Completed) and then by
    submission date, oldest first.

    Args:
        archived: Which side of the archive flag to return
        service: Job service

    Returns:
        Ordered list of jobs

    Raises:
        HTTPException 400: Database error
    """
    try:
        jobs = await service.list_jobs(archived=archived)
    except SQLAlchemyError as e:
        raise _store_error("list jobs", e)

    return [JobResponse.model_validate(job) for job in jobs]


# Registered ahead of PUT /{job_id} so "status" and "archive" aren't read as IDs
@router.put(
    "/status",
    response_model=BatchUpdateResponse,
    summary="Set the status of several jobs"
)
async def update_jobs_status(
    request: JobBatchStatusUpdate,
    service: JobService = Depends(get_job_service)
) -> BatchUpdateResponse:
    """Apply one status to a set of jobs.

    Jobs already at the requested status are skipped. When nothing changes
    the response is still 200, with an informational message and
    ``modifiedCount`` of 0.

    Args:
        request: Job IDs and target status
        service: Job service

    Returns:
        Message and number of jobs modified

    Raises:
        HTTPException 400: Missing ids/status, invalid status or ID, database error
    """
    try:
        modified = await service.update_status_batch(request)
    except JobValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        raise _store_error("update jobs", e)

    return BatchUpdateResponse.from_count(modified)


@router.put(
    "/archive/{job_id}",
    response_model=JobResponse,
    summary="Archive a job"
)
async def archive_job(
    job_id: UUID,
    service: JobService = Depends(get_job_service)
) -> JobResponse:
    """Archive a job by ID. Archiving twice is not an error.

    Raises:
        HTTPException 404: Job not found
        HTTPException 400: Database error
    """
    try:
        job = await service.archive(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError as e:
        raise _store_error(f"archive job {job_id}", e)

    logger.info(f"Archived job {job_id}")
    return JobResponse.model_validate(job)


@router.put(
    "/{job_id}",
    response_model=JobResponse,
    summary="Update a job"
)
async def update_job(
    job_id: UUID,
    job_data: JobUpdate,
    service: JobService = Depends(get_job_service)
) -> JobResponse:
    """Update a job's status, optionally with a new description or location.

    Args:
        job_id: Job UUID
        job_data: Status and optional text fields
        service: Job service

    Returns:
        Updated job record

    Raises:
        HTTPException 404: Job not found
        HTTPException 400: Invalid status or database error
    """
    try:
        job = await service.update(job_id, job_data)
    except JobNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError as e:
        raise _store_error(f"update job {job_id}", e)

    logger.info(f"Updated job {job_id}: status={job.status}")
    return JobResponse.model_validate(job)


@router.delete(
    "/{job_id}",
    response_model=MessageResponse,
    summary="Delete a job"
)
async def delete_job(
    job_id: UUID,
    service: JobService = Depends(get_job_service)
) -> MessageResponse:
    """Delete a job by ID.

    Raises:
        HTTPException 404: Job not found
        HTTPException 400: Database error
    """
    try:
        await service.delete(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError as e:
        raise _store_error(f"delete job {job_id}", e)

    logger.info(f"Deleted job {job_id}")
    return MessageResponse(message="Job deleted successfully")
