"""Command-line front end for the maintenance job board."""

import argparse
import asyncio
from collections.abc import Callable
from uuid import UUID

from . import __version__
from .client.api import JobsApiClient
from .client.view import STATUS_FILTER_ALL, JobBoard
from .logger import configure_logging
from .models import JobPriority, JobStatus
from .schemas.job import JobResponse

PRIORITIES = [member.value for member in JobPriority]
STATUSES = [member.value for member in JobStatus]


def format_job(job: JobResponse) -> str:
    return (
        f"{job.id}  {job.description} - {job.location} - "
        f"{job.priority.value} - {job.status.value}"
    )


def prompt_delete(
    job_id: UUID,
    job: JobResponse | None,
    ask: Callable[[str], str] | None = None,
) -> bool:
    """Ask on the terminal before deleting a job."""
    ask = ask or input
    if job is None:
        details = f"ID: {job_id}"
    else:
        details = (
            f"Description: {job.description}\n"
            f"Location: {job.location}\n"
            f"Priority: {job.priority.value}"
        )
    answer = ask(f"Are you sure you want to delete the job:\n\n{details}\n[y/N] ")
    return answer.strip().lower() in ("y", "yes")


def print_jobs(board: JobBoard) -> None:
    jobs = board.visible_jobs
    if not jobs:
        print("No jobs.")
        return
    for job in jobs:
        print(format_job(job))


async def cmd_submit(board: JobBoard, args: argparse.Namespace) -> int:
    job = await board.submit(args.description, args.location, args.priority)
    if job is None:
        return 1
    print(f"Created: {format_job(job)}")
    return 0


async def cmd_list(board: JobBoard, args: argparse.Namespace) -> int:
    board.set_status_filter(args.status)
    if args.archived and not await board.set_show_archived(True):
        return 1
    print_jobs(board)
    return 0


async def cmd_status(board: JobBoard, args: argparse.Namespace) -> int:
    job = await board.change_status(args.id, args.status)
    if job is None:
        return 1
    print(f"Updated: {format_job(job)}")
    return 0


async def cmd_batch_status(board: JobBoard, args: argparse.Namespace) -> int:
    for job_id in dict.fromkeys(args.ids):
        board.toggle_selection(job_id)
    result = await board.batch_update(args.status)
    if result is None:
        return 1
    print(result.message)
    return 0


async def cmd_archive(board: JobBoard, args: argparse.Namespace) -> int:
    job = await board.archive(args.id)
    if job is None:
        return 1
    print(f"Archived: {format_job(job)}")
    return 0


async def cmd_delete(board: JobBoard, args: argparse.Namespace) -> int:
    if args.yes:
        board.confirm_delete = lambda job_id, job: True
    if not await board.delete(args.id):
        return 1
    print("Job deleted successfully")
    return 0


async def run(args: argparse.Namespace, api: JobsApiClient | None = None) -> int:
    """Load the board, then run the selected command against it."""
    api = api or JobsApiClient(args.api_url)
    async with api:
        board = JobBoard(api, confirm_delete=prompt_delete)
        if not await board.load():
            return 1
        return await args.func(board, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracker", description="Maintenance job tracker client")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--api-url", help="API root, e.g. http://localhost:8080/api (or set API_BASE_URL)")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sub = subparsers.add_parser("submit", help="Submit a new maintenance job")
    sub.add_argument("--description", required=True, help="What needs fixing")
    sub.add_argument("--location", required=True, help="Where, e.g. \"Building 1, Room 203\"")
    sub.add_argument("--priority", choices=PRIORITIES, default=JobPriority.LOW.value, help="Priority (default: Low)")
    sub.set_defaults(func=cmd_submit)

    lst = subparsers.add_parser("list", help="List jobs")
    lst.add_argument("--archived", action="store_true", help="Show archived jobs instead of active ones")
    lst.add_argument("--status", choices=[STATUS_FILTER_ALL, *STATUSES], default=STATUS_FILTER_ALL, help="Only show jobs in this status")
    lst.set_defaults(func=cmd_list)

    st = subparsers.add_parser("status", help="Set the status of one job")
    st.add_argument("id", type=UUID, help="Job ID")
    st.add_argument("status", choices=STATUSES, help="New status")
    st.set_defaults(func=cmd_status)

    bst = subparsers.add_parser("batch-status", help="Set the status of several jobs")
    bst.add_argument("status", choices=STATUSES, help="New status")
    bst.add_argument("ids", nargs="+", type=UUID, help="Job IDs")
    bst.set_defaults(func=cmd_batch_status)

    arc = subparsers.add_parser("archive", help="Archive a job")
    arc.add_argument("id", type=UUID, help="Job ID")
    arc.set_defaults(func=cmd_archive)

    dele = subparsers.add_parser("delete", help="Delete a job (asks for confirmation)")
    dele.add_argument("id", type=UUID, help="Job ID")
    dele.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    dele.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
