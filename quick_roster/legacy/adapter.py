from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any

from quick_roster.models.records import Job, Operative
from quick_roster.models.roster import RosterJob, RosterLocation, RosterRequest, RosterResponse
from quick_roster.normalizers.timeparse import format_legacy_time

"""Translation between roster models and the scheduling service's wire shapes.

The service calls operatives "salesmen", needs synthetic ids, and answers
with assigned jobs grouped by salesman id plus a separate list of unassigned
job ids. Both directions are pure functions; ids are derived from position:
jobs "1".."n", salesmen "101".."100+m".

The service has no notion of an operative's working date, so every shift
window is built on the calendar date of the first job in the batch. Multi-day
batches therefore get first-day shift windows for all operatives.
"""

__all__ = [
    "LEGACY_DATETIME_FORMAT",
    "format_legacy_datetime",
    "job_ids",
    "salesman_ids",
    "transform_request",
    "transform_response",
]

logger = logging.getLogger(__name__)

LEGACY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
FIRST_JOB_ID = 1
FIRST_SALESMAN_ID = 101
DEFAULT_SHIFT_START = "09:00:00"
DEFAULT_SHIFT_END = "17:00:00"


def format_legacy_datetime(value: datetime) -> str:
    """``YYYY-MM-DD HH:MM:SS`` in local time (seconds always present)."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.strftime(LEGACY_DATETIME_FORMAT)


def job_ids(jobs: Sequence[Job]) -> list[tuple[str, Job]]:
    return [(str(FIRST_JOB_ID + i), job) for i, job in enumerate(jobs)]


def salesman_ids(operatives: Sequence[Operative]) -> list[tuple[str, Operative]]:
    return [(str(FIRST_SALESMAN_ID + i), op) for i, op in enumerate(operatives)]


def _legacy_job(job_id: str, job: Job) -> dict[str, Any]:
    entry = format_legacy_datetime(job.entry_time)
    return {
        "job_id": job_id,
        "client_name": job.client or "",
        "date": entry,
        "location": {"address": job.location or ""},
        "duration_mins": job.duration_min,
        "entry_time": entry,
        "exit_time": format_legacy_datetime(job.exit_time),
    }


def _legacy_salesman(salesman_id: str, operative: Operative, shift_date: str) -> dict[str, Any]:
    start = format_legacy_time(operative.default_start_time or DEFAULT_SHIFT_START)
    end = format_legacy_time(operative.default_end_time or DEFAULT_SHIFT_END)
    return {
        "salesman_id": salesman_id,
        "salesman_name": operative.full_name,
        "location": {"address": operative.location or ""},
        "start_time": f"{shift_date} {start}",
        "end_time": f"{shift_date} {end}",
    }


def transform_request(request: RosterRequest) -> dict[str, Any]:
    """RosterRequest -> ``{"jobs": [...], "salesmen": [...]}``.

    Raises:
        ValueError: operatives were given without any job to borrow a date from
    """
    jobs = [_legacy_job(job_id, job) for job_id, job in job_ids(request.jobs)]
    if request.operatives and not request.jobs:
        raise ValueError("at least one job is required to build operative shift windows")

    salesmen: list[dict[str, Any]] = []
    if request.jobs:
        shift_date = request.jobs[0].entry_time.strftime("%Y-%m-%d")
        salesmen = [
            _legacy_salesman(salesman_id, op, shift_date)
            for salesman_id, op in salesman_ids(request.operatives)
        ]
    return {"jobs": jobs, "salesmen": salesmen}


def _roster_job(item: Mapping[str, Any]) -> RosterJob:
    location = item.get("location") or {}
    address = location.get("address") or ""
    return RosterJob(
        id=str(item["job_id"]),
        entry_time=item.get("entry_time") or "",
        exit_time=item.get("exit_time") or "",
        duration_min=int(item.get("duration_mins") or 0),
        location=RosterLocation(
            name=address,
            address=address,
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
        ),
        client=item.get("client_name"),
        operative_name=item.get("salesman_name"),
        start_time=item.get("start_time"),
    )


def _merge_sent(jobs: list[RosterJob], sent_jobs: Sequence[Mapping[str, Any]]) -> list[RosterJob]:
    # request order; jobs the service left out come back unassigned
    by_id: dict[str, RosterJob] = {}
    for job in jobs:
        by_id.setdefault(job.id, job)
    merged: list[RosterJob] = []
    for item in sent_jobs:
        job_id = str(item["job_id"])
        decoded = by_id.pop(job_id, None)
        if decoded is None:
            decoded = replace(_roster_job(item), operative_name=None, start_time=None)
        merged.append(decoded)
    if by_id:
        logger.debug(f"service returned job ids that were not sent: {sorted(by_id)}")
    return merged + list(by_id.values())


def transform_response(
    payload: Mapping[str, Any],
    sent_jobs: Sequence[Mapping[str, Any]] | None = None,
) -> RosterResponse:
    """Service reply -> RosterResponse with one flat job list.

    Jobs listed in ``unassigned_jobs`` keep their place in the list with the
    assignment (operative name, start time) cleared. A job id listed more than
    once is kept once (first occurrence).

    With ``sent_jobs`` (the ``jobs`` list of transform_request's payload) the
    result holds every sent job exactly once, in request order: a job the
    service only names in ``unassigned_jobs``, or drops altogether, is rebuilt
    from what was sent.

    Raises:
        ValueError: the payload does not have the expected shape
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    grouped = payload.get("jobs") or {}
    if not isinstance(grouped, Mapping):
        raise ValueError("'jobs' must map salesman ids to job lists")

    jobs: list[RosterJob] = []
    seen: set[str] = set()
    try:
        for assigned in grouped.values():
            for item in assigned:
                job = _roster_job(item)
                if job.id in seen:
                    logger.debug(f"job {job.id} listed more than once, keeping the first entry")
                    continue
                seen.add(job.id)
                jobs.append(job)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed assigned job entry: {e}") from e

    unassigned = {str(job_id) for job_id in payload.get("unassigned_jobs") or []}
    jobs = [
        replace(job, operative_name=None, start_time=None) if job.id in unassigned else job
        for job in jobs
    ]

    if sent_jobs is not None:
        jobs = _merge_sent(jobs, sent_jobs)
    else:
        unknown = unassigned - seen
        if unknown:
            logger.debug(f"unassigned job ids not present in assigned list: {sorted(unknown)}")

    return RosterResponse(jobs=jobs, message=str(payload.get("message") or ""))
