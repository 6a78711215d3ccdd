"""HTTP client and view state for the job board."""

from .api import ApiError, JobsApiClient
from .view import JobBoard

__all__ = ["ApiError", "JobsApiClient", "JobBoard"]
