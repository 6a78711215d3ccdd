"""Async HTTP client for the jobs API.

One method per endpoint. Responses are parsed into the same schemas the API
serves, and any non-2xx response raises ``ApiError``.
"""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

import httpx

from tracker.config import settings
from tracker.models import JobPriority, JobStatus
from tracker.schemas.job import BatchUpdateResponse, JobResponse


class ApiError(Exception):
    """Non-success response from the jobs API."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"HTTP {status_code}: {self.message}")

    @property
    def message(self) -> str:
        """Human-readable summary of the error payload."""
        if isinstance(self.payload, dict):
            if "errors" in self.payload:
                return "; ".join(err.get("msg", "") for err in self.payload["errors"])
            for key in ("detail", "message"):
                if key in self.payload:
                    return str(self.payload[key])
        return str(self.payload)


class JobsApiClient:
    """Async client for the maintenance jobs API.

    Usage:
        async with JobsApiClient("http://localhost:8080/api") as api:
            jobs = await api.list_jobs()
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        """Initialize the client.

        Args:
            base_url: API root including the ``/api`` prefix. Defaults to settings.api_base_url
            transport: Optional httpx transport (e.g. ``httpx.ASGITransport`` in tests)
            timeout: Per-request timeout in seconds
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "JobsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise ApiError(response.status_code, payload)
        return response.json()

    async def create_job(
        self,
        description: str,
        location: str,
        priority: JobPriority | str,
    ) -> JobResponse:
        data = await self._request(
            "POST",
            "/jobs",
            json={
                "description": description,
                "location": location,
                "priority": JobPriority(priority).value,
            },
        )
        return JobResponse.model_validate(data)

    async def list_jobs(self, archived: bool = False) -> list[JobResponse]:
        data = await self._request(
            "GET",
            "/jobs",
            params={"archived": "true" if archived else "false"},
        )
        return [JobResponse.model_validate(item) for item in data]

    async def update_job(
        self,
        job_id: UUID | str,
        status: JobStatus | str,
        **fields: str,
    ) -> JobResponse:
        """Update a job's status, optionally merging description/location."""
        body = {"status": JobStatus(status).value, **fields}
        data = await self._request("PUT", f"/jobs/{job_id}", json=body)
        return JobResponse.model_validate(data)

    async def update_jobs_status(
        self,
        job_ids: Iterable[UUID | str],
        status: JobStatus | str,
    ) -> BatchUpdateResponse:
        data = await self._request(
            "PUT",
            "/jobs/status",
            json={
                "ids": [str(job_id) for job_id in job_ids],
                "status": JobStatus(status).value,
            },
        )
        return BatchUpdateResponse.model_validate(data)

    async def archive_job(self, job_id: UUID | str) -> JobResponse:
        data = await self._request("PUT", f"/jobs/archive/{job_id}")
        return JobResponse.model_validate(data)

    async def delete_job(self, job_id: UUID | str) -> str:
        data = await self._request("DELETE", f"/jobs/{job_id}")
        return data["message"]
