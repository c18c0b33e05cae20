"""Calibration bookkeeping: keeping a tool's dates and status in line with its log."""

import logging
from datetime import date, timedelta

from due_dates import DEFAULT_LEAD_DAYS, recommended_tool_status, tool_status_for
from repository import NotFoundError

logger = logging.getLogger(__name__)


def derive_tool_fields(fields: dict, now: date, lead_days: int = DEFAULT_LEAD_DAYS) -> dict:
    """
    Fill in what a new tool record can infer: the next calibration date from
    the last one plus the interval, and the status from those dates.
    """
    fields = dict(fields)
    last = fields.get("last_calibration_date")
    if fields.get("next_calibration_date") is None and last is not None:
        fields["next_calibration_date"] = last + timedelta(days=fields["calibration_interval_days"])
    if fields.get("status") is None:
        fields["status"] = tool_status_for(fields.get("next_calibration_date"), now, lead_days)
    return fields


def rederive_tool_patch(tool, patch: dict, now: date, lead_days: int = DEFAULT_LEAD_DAYS) -> dict:
    """
    Apply ``derive_tool_fields`` to an edit of an existing tool.

    Only a change to the last calibration date or the interval moves the next
    date, and an explicit next date or status in the patch always wins. Tools
    that are out of service keep that status until someone sets another one.
    """
    date_fields = ("last_calibration_date", "calibration_interval_days", "next_calibration_date")
    if not any(name in patch for name in date_fields):
        return patch

    patch = dict(patch)
    if "next_calibration_date" not in patch:
        last = patch.get("last_calibration_date", tool.last_calibration_date)
        interval = patch.get("calibration_interval_days", tool.calibration_interval_days)
        if last is not None:
            patch["next_calibration_date"] = last + timedelta(days=interval)
    if "status" not in patch and tool.status != "out_of_service":
        next_due = patch.get("next_calibration_date", tool.next_calibration_date)
        patch["status"] = tool_status_for(next_due, now, lead_days)
    return patch


def record_calibration(uow, tool_id: str, payload, now: date, lead_days: int = DEFAULT_LEAD_DAYS):
    """
    Append a calibration log and move the tool's dates forward.

    A failed calibration takes the tool out of service; otherwise its status
    follows the classifier for the new due date.
    """
    with uow.transaction():
        tool = uow.metrology_tools.find_by_id(tool_id, lock=True)
        if tool is None:
            raise NotFoundError("Metrology tool", tool_id)

        next_due = payload.next_due_date or payload.date + timedelta(days=tool.calibration_interval_days)
        log = uow.calibration_logs.create({
            "metrology_tool_id": tool_id,
            "date": payload.date,
            "performed_by": payload.performed_by,
            "result": payload.result,
            "notes": payload.notes,
            "certificate_url": payload.certificate_url,
            "next_due_date": next_due,
        })

        if payload.result == "fail":
            status = "out_of_service"
        else:
            status = tool_status_for(next_due, now, lead_days)
        uow.metrology_tools.update(tool_id, {
            "last_calibration_date": payload.date,
            "next_calibration_date": next_due,
            "status": status,
        })

    logger.info("Calibration %s recorded for tool %s (%s), next due %s",
                log.id, tool_id, payload.result, next_due.isoformat())
    return log, tool


def refresh_calibration_statuses(uow, now: date, lead_days: int = DEFAULT_LEAD_DAYS) -> int:
    """Write the classifier's recommended status on every tool that disagrees with it."""
    changed = 0
    with uow.transaction():
        for tool in uow.metrology_tools.find_in_service():
            status = recommended_tool_status(tool, now, lead_days)
            if status is None:
                continue
            uow.metrology_tools.update(tool.id, {"status": status})
            changed += 1
    if changed:
        logger.info("Updated calibration status of %d tool(s)", changed)
    return changed
