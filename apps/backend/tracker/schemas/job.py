"""Job-related Pydantic schemas.

This module defines request and response schemas for the Job endpoints:
job creation, single and batch status updates, and the job record itself.

Request schemas carry the field-level rules. Each rule raises a
``PydanticCustomError`` whose message is returned to the caller verbatim
(see ``main.validation_exception_handler``).
"""

import html
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from tracker.models import JobPriority, JobStatus

PRIORITY_MESSAGE = "Priority must be Low, Medium, or High"
STATUS_MESSAGE = "Invalid status value"


def sanitize_text(value: Any, message: str) -> str:
    """Trim and HTML-escape a required text field.

    Args:
        value: Raw input value
        message: Error message used when the value is missing or blank

    Returns:
        Sanitized text

    Raises:
        PydanticCustomError: If the value is not text or is blank after trimming
    """
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("required", message)
    return html.escape(value.strip())


def check_status(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
    if value not in {member.value for member in JobStatus}:
        raise PydanticCustomError("invalid_status", STATUS_MESSAGE)
    return value


class JobCreate(BaseModel):
    """Schema for submitting a new maintenance job."""

    model_config = ConfigDict(validate_default=True)

    description: str = Field("", description="What needs fixing")
    location: str = Field("", description="Where the job is (e.g., 'Building 1, Room 203')")
    priority: JobPriority = Field(None, description="Low, Medium or High")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Any) -> str:
        return sanitize_text(value, "Description is required")

    @field_validator("location", mode="before")
    @classmethod
    def validate_location(cls, value: Any) -> str:
        return sanitize_text(value, "Location is required")

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
        if value not in {member.value for member in JobPriority}:
            raise PydanticCustomError("invalid_priority", PRIORITY_MESSAGE)
        return value


class JobUpdate(BaseModel):
    """Schema for updating a single job.

    ``status`` is required. ``description`` and ``location`` may be merged in
    alongside it; any other key (priority, archived, id, dateSubmitted) is
    ignored, so those fields can't be changed through this schema.
    """

    model_config = ConfigDict(validate_default=True, extra="ignore")

    status: JobStatus = Field(None, description="New status")
    description: str | None = None
    location: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: Any) -> Any:
        return check_status(value)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Any) -> str | None:
        if value is None:
            return None
        return sanitize_text(value, "Description cannot be empty")

    @field_validator("location", mode="before")
    @classmethod
    def validate_location(cls, value: Any) -> str | None:
        if value is None:
            return None
        return sanitize_text(value, "Location cannot be empty")

    def changes(self) -> dict[str, str]:
        """Column values to merge into the stored job."""
        values = {"status": self.status.value}
        if self.description is not None:
            values["description"] = self.description
        if self.location is not None:
            values["location"] = self.location
        return values


class JobBatchStatusUpdate(BaseModel):
    """Schema for applying one status to many jobs.

    Both fields are optional at the schema level so that an absent value is
    reported by the service as "Missing ids or status" rather than as a
    generic field error.
    """

    ids: list[UUID] | None = Field(None, description="Job IDs to update")
    status: JobStatus | None = Field(None, description="Target status")

    @field_validator("ids", mode="before")
    @classmethod
    def validate_ids(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, list):
            raise PydanticCustomError("invalid_ids", "ids must be a list of job IDs")
        for job_id in value:
            try:
                UUID(str(job_id))
            except ValueError:
                raise PydanticCustomError(
                    "invalid_id",
                    "Invalid job ID: {job_id}",
                    {"job_id": str(job_id)},
                )
        return value

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value: Any) -> Any:
        if value is None:
            return None
        return check_status(value)


class JobResponse(BaseModel):
    """Schema for job response with all fields."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: UUID
    description: str
    location: str
    priority: JobPriority
    status: JobStatus
    date_submitted: datetime
    archived: bool


class BatchUpdateResponse(BaseModel):
    """Schema for batch status update result."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    modified_count: int = Field(description="Number of jobs whose status changed")

    @classmethod
    def from_count(cls, modified_count: int) -> "BatchUpdateResponse":
        """Build the response for a batch update.

        A zero count is still a success; it gets an informational message.

        Args:
            modified_count: Rows actually changed

        Returns:
            BatchUpdateResponse instance
        """
        if modified_count == 0:
            message = "No jobs were updated because they were already in the desired state"
        else:
            message = f"{modified_count} jobs updated successfully"
        return cls(message=message, modified_count=modified_count)


class MessageResponse(BaseModel):
    """Schema for plain informational responses."""

    message: str
