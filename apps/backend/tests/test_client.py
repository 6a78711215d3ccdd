"""
Tests for the jobs API client and the JobBoard view state.

Requests go through httpx.ASGITransport to the in-process app.
"""

import uuid

import httpx
import pytest

from tracker.client.api import ApiError
from tracker.client.view import JobBoard
from tracker.models import JobStatus


class TestJobsApiClient:
    async def test_create_and_list(self, api):
        job = await api.create_job("Fix the leak", "Building 1, Room 203", "High")

        jobs = await api.list_jobs()

        assert job.status is JobStatus.SUBMITTED
        assert [j.id for j in jobs] == [job.id]

    async def test_validation_error_raises(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api.create_job("", "Lobby", "Low")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Description is required"

    async def test_not_found_raises(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api.delete_job(uuid.uuid4())

        assert exc_info.value.status_code == 404
        assert "not found" in exc_info.value.message

    async def test_batch_update(self, api):
        job = await api.create_job("Fix the leak", "Building 1, Room 203", "High")

        first = await api.update_jobs_status([job.id], JobStatus.COMPLETED)
        second = await api.update_jobs_status([job.id], JobStatus.COMPLETED)

        assert first.modified_count == 1
        assert second.modified_count == 0

    async def test_update_with_extra_fields(self, api):
        job = await api.create_job("Fix the leak", "Room 203", "Low")

        updated = await api.update_job(job.id, "In Progress", location="Room 204")

        assert updated.status is JobStatus.IN_PROGRESS
        assert updated.location == "Room 204"


class TestJobBoard:
    async def test_load_fetches_list(self, api):
        await api.create_job("Fix the leak", "Room 203", "High")
        board = JobBoard(api)

        assert await board.load() is True
        assert len(board.jobs) == 1

    async def test_mutations_refresh_list(self, api):
        board = JobBoard(api)
        await board.load()

        job = await board.submit("Fix the leak", "Room 203", "High")
        assert [j.id for j in board.jobs] == [job.id]

        await board.change_status(job.id, JobStatus.IN_PROGRESS)
        assert board.jobs[0].status is JobStatus.IN_PROGRESS

        await board.archive(job.id)
        assert board.jobs == []

    async def test_status_filter_is_client_side(self, api, monkeypatch):
        board = JobBoard(api)
        first = await board.submit("first", "Lobby", "Low")
        await board.submit("second", "Lobby", "Low")
        await board.change_status(first.id, JobStatus.COMPLETED)

        async def fail(*args, **kwargs):
            raise AssertionError("filter must not hit the server")

        monkeypatch.setattr(api, "list_jobs", fail)
        board.set_status_filter("Completed")

        assert [job.id for job in board.visible_jobs] == [first.id]
        board.set_status_filter("All")
        assert len(board.visible_jobs) == 2

    async def test_unknown_status_filter(self, api):
        board = JobBoard(api)

        with pytest.raises(ValueError):
            board.set_status_filter("Closed")

    async def test_archived_toggle_refetches(self, api):
        board = JobBoard(api)
        job = await board.submit("Old job", "Basement", "Low")
        await board.archive(job.id)

        await board.set_show_archived(True)

        assert [j.id for j in board.visible_jobs] == [job.id]
        assert board.visible_jobs[0].archived is True

    async def test_batch_update_clears_selection(self, api):
        board = JobBoard(api)
        first = await board.submit("first", "Lobby", "Low")
        second = await board.submit("second", "Lobby", "Low")
        board.toggle_selection(first.id)
        board.toggle_selection(second.id)

        result = await board.batch_update(JobStatus.IN_PROGRESS)

        assert result.modified_count == 2
        assert board.selected == []
        assert {job.status for job in board.jobs} == {JobStatus.IN_PROGRESS}

    async def test_batch_update_without_selection_sends_nothing(self, api):
        board = JobBoard(api)

        assert await board.batch_update(JobStatus.COMPLETED) is None

    async def test_failed_batch_keeps_selection(self, api, monkeypatch):
        board = JobBoard(api)
        job = await board.submit("first", "Lobby", "Low")
        board.toggle_selection(job.id)

        async def reject(*args, **kwargs):
            raise ApiError(400, {"detail": "Missing ids or status"})

        monkeypatch.setattr(api, "update_jobs_status", reject)

        assert await board.batch_update(JobStatus.COMPLETED) is None
        assert board.selected == [job.id]

    async def test_toggle_and_deselect(self, api):
        board = JobBoard(api)
        job_id = uuid.uuid4()

        board.toggle_selection(job_id)
        assert board.selected == [job_id]
        board.toggle_selection(job_id)
        assert board.selected == []

        board.toggle_selection(job_id)
        board.deselect_all()
        assert board.selected == []

    async def test_delete_declined_sends_nothing(self, api):
        asked = []

        def confirm(job_id, job):
            asked.append((job_id, job.description))
            return False

        board = JobBoard(api, confirm_delete=confirm)
        job = await board.submit("Fix the leak", "Room 203", "High")

        assert await board.delete(job.id) is False
        assert asked == [(job.id, "Fix the leak")]
        assert len(await api.list_jobs()) == 1

    async def test_delete_confirmed(self, api):
        board = JobBoard(api, confirm_delete=lambda job_id, job: True)
        job = await board.submit("Fix the leak", "Room 203", "High")
        board.toggle_selection(job.id)

        assert await board.delete(job.id) is True
        assert board.jobs == []
        assert board.selected == []

    async def test_failed_delete_reports_false(self, api):
        board = JobBoard(api, confirm_delete=lambda job_id, job: True)

        assert await board.delete(uuid.uuid4()) is False

    async def test_failed_refresh_keeps_last_list(self, api, monkeypatch):
        board = JobBoard(api)
        await board.submit("Fix the leak", "Room 203", "High")

        async def down(*args, **kwargs):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr(api, "list_jobs", down)

        assert await board.refresh() is False
        assert len(board.jobs) == 1
