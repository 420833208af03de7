from __future__ import annotations

from ..models.import_result import ImportResult
from ..models.roster import RosterResponse

"""SUMMARY line rendering.

The CLI ends every run with exactly one SUMMARY line; the ``SUMMARY`` label
itself is added by the logging formatter.
"""


def render_summary_line(results: list[ImportResult]) -> str:
    """One line over every upload of the run.

    Examples:
        >>> from quick_roster.models import DataType, ImportResult, RowOutcome
        >>> r = ImportResult(DataType.JOB, "jobs.csv", [RowOutcome(2, record=object()), RowOutcome(3, error="x")])
        >>> render_summary_line([r])
        'files=1 rows=2 accepted=1 rejected=1 types=job'
    """
    rows = sum(r.total_rows for r in results)
    accepted = sum(len(r.records) for r in results)
    rejected = sum(len(r.errors) for r in results)
    types = ",".join(sorted({r.data_type.value for r in results})) or "-"
    return (
        f"files={len(results)} "
        f"rows={rows} "
        f"accepted={accepted} "
        f"rejected={rejected} "
        f"types={types}"
    )


def render_roster_summary(response: RosterResponse) -> str:
    return (
        f"jobs={len(response.jobs)} "
        f"assigned={len(response.assigned_jobs)} "
        f"unassigned={len(response.unassigned_jobs)}"
    )
