"""
Due-date classification shared by maintenance tasks and metrology tools.

Every function here is a pure function of its inputs: callers pass ``now``
explicitly, and nothing raises on bad input. A missing or unparseable due
date lands in ``unscheduled`` and is never reported as healthy.
"""

from datetime import timedelta
from typing import Optional

from utils import parse_date

UNSCHEDULED = "unscheduled"
OVERDUE = "overdue"
DUE_SOON = "due_soon"
ON_TRACK = "on_track"
CALIBRATED = "calibrated"

DEFAULT_LEAD_DAYS = 7

TERMINAL_TASK_STATUSES = frozenset({"completed", "skipped"})


def classify(next_due, now, lead_days: int = DEFAULT_LEAD_DAYS, good: str = ON_TRACK) -> str:
    """
    Bucket a due date relative to ``now``; time of day is ignored.

    >>> classify("2024-01-01", "2024-01-02")
    'overdue'
    >>> classify("2024-01-05", "2024-01-02")
    'due_soon'
    """
    due = parse_date(next_due)
    today = parse_date(now)
    if due is None or today is None:
        return UNSCHEDULED
    if due < today:
        return OVERDUE
    if due <= today + timedelta(days=max(lead_days, 0)):
        return DUE_SOON
    return good


# ---------- maintenance tasks ----------

def maintenance_bucket(task, now, lead_days: int = DEFAULT_LEAD_DAYS) -> str:
    return classify(getattr(task, "next_due_date", None), now, lead_days, good=ON_TRACK)


def recommended_task_status(task, now, lead_days: int = DEFAULT_LEAD_DAYS) -> Optional[str]:
    """``overdue`` for an open task past its due date, otherwise None."""
    status = getattr(task, "status", None)
    if status in TERMINAL_TASK_STATUSES or status == "overdue":
        return None
    if maintenance_bucket(task, now, lead_days) == OVERDUE:
        return "overdue"
    return None


# ---------- metrology tools ----------

def calibration_bucket(tool, now, lead_days: int = DEFAULT_LEAD_DAYS) -> str:
    return classify(getattr(tool, "next_calibration_date", None), now, lead_days, good=CALIBRATED)


_TOOL_STATUS_BY_BUCKET = {
    OVERDUE: "due_calibration",
    DUE_SOON: "due_calibration",
    CALIBRATED: "calibrated",
    UNSCHEDULED: "awaiting_calibration",
}


def tool_status_for(next_calibration_date, now, lead_days: int = DEFAULT_LEAD_DAYS) -> str:
    """Status an in-service tool should carry for the given next calibration date."""
    return _TOOL_STATUS_BY_BUCKET[classify(next_calibration_date, now, lead_days, good=CALIBRATED)]


def recommended_tool_status(tool, now, lead_days: int = DEFAULT_LEAD_DAYS) -> Optional[str]:
    """Tool status implied by its calibration dates, or None when nothing should change."""
    status = getattr(tool, "status", None)
    if status == "out_of_service":
        return None
    recommended = tool_status_for(getattr(tool, "next_calibration_date", None), now, lead_days)
    return None if recommended == status else recommended
