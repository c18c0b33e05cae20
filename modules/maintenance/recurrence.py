"""
Maintenance recurrence rules.

A task that moves *into* ``completed`` with a positive frequency spawns a
sibling task in ``pending``, due ``frequency_days`` calendar days after the
date the work was performed. The completed task stays in place as history.

``schedule_next_occurrence`` is the pure rule. ``apply_task_update`` and
``complete_task`` run it against a unit of work so the status change and the
sibling creation commit or roll back together.
"""

import logging
from datetime import date, timedelta
from typing import Optional, Tuple

from due_dates import DEFAULT_LEAD_DAYS, recommended_task_status
from modules.maintenance.schemas import TaskUpdate
from repository import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

COMPLETED = "completed"
PENDING = "pending"

# previous status -> statuses it may move to (staying put is always allowed)
TRANSITIONS = {
    "pending": frozenset({"in_progress", "completed", "skipped", "overdue"}),
    "in_progress": frozenset({"completed", "skipped", "overdue"}),
    "overdue": frozenset({"in_progress", "completed", "skipped"}),
    "completed": frozenset(),
    "skipped": frozenset(),
}


class RecurrenceSchedulingError(DatabaseError):
    """The next occurrence could not be stored; the whole update was rolled back."""

    def __init__(self, task_id: str, cause: Exception):
        super().__init__(f"Failed to schedule next occurrence of maintenance task {task_id}: {cause}")
        self.task_id = task_id


class InvalidTransitionError(ValueError):
    def __init__(self, previous: str, new: str):
        super().__init__(f"Cannot move a maintenance task from '{previous}' to '{new}'")
        self.previous = previous
        self.new = new


def check_transition(previous: str, new: Optional[str]) -> None:
    if new is None or new == previous:
        return
    if new not in TRANSITIONS.get(previous, frozenset()):
        raise InvalidTransitionError(previous, new)


def effective_frequency(task, update) -> Optional[int]:
    if update.frequency_days is not None:
        return update.frequency_days
    return getattr(task, "frequency_days", None)


def performed_on(update, today: date) -> date:
    """Date the work was done: the update's value, else the completion date."""
    return update.last_performed_date or today


def schedule_next_occurrence(task, update, today: date) -> Optional[dict]:
    """
    Draft of the next occurrence, or None when the update doesn't call for one.

    ``task`` is the state *before* the update is applied; ``update`` is an
    already validated ``TaskUpdate``.
    """
    if getattr(task, "status", None) == COMPLETED or update.status != COMPLETED:
        return None

    frequency = effective_frequency(task, update)
    if not frequency or frequency <= 0:
        return None

    last_performed = performed_on(update, today)
    return {
        "equipment_id": update.equipment_id or task.equipment_id,
        "description": update.description or task.description,
        "frequency_days": frequency,
        "last_performed_date": last_performed,
        "next_due_date": last_performed + timedelta(days=frequency),
        "status": PENDING,
        "parts_used": [],
    }


def apply_task_update(uow, task_id: str, update, today: date) -> Tuple[object, Optional[object]]:
    """
    Apply ``update`` to the task and spawn its next occurrence when due.

    Returns ``(updated_task, spawned_task_or_None)``.
    """
    with uow.transaction():
        return _apply(uow, task_id, update, today)


def _apply(uow, task_id, update, today):
    task = uow.maintenance_tasks.find_by_id(task_id, lock=True)
    if task is None:
        raise NotFoundError("Maintenance task", task_id)

    check_transition(task.status, update.status)
    draft = schedule_next_occurrence(task, update, today)

    patch = update.patch()
    if update.status == COMPLETED and task.status != COMPLETED and update.last_performed_date is None:
        patch["last_performed_date"] = today
    updated = uow.maintenance_tasks.update(task_id, patch)

    spawned = None
    if draft is not None:
        try:
            spawned = uow.maintenance_tasks.create(draft)
        except DatabaseError as exc:
            logger.exception("Next occurrence of task %s could not be created", task_id)
            raise RecurrenceSchedulingError(task_id, exc) from exc
        logger.info("Task %s completed; next occurrence %s due %s",
                    task_id, spawned.id, draft["next_due_date"].isoformat())
    return updated, spawned


def complete_task(uow, task_id: str, record, today: date):
    """
    Record the service performed and mark the task completed in one transaction.

    Returns ``(service_record, updated_task, spawned_task_or_None)``.
    """
    performed = record.date or today
    with uow.transaction():
        task = uow.maintenance_tasks.find_by_id(task_id, lock=True)
        if task is None:
            raise NotFoundError("Maintenance task", task_id)
        if task.status == COMPLETED:
            raise InvalidTransitionError(task.status, COMPLETED)
        check_transition(task.status, COMPLETED)
        service_record = uow.service_records.create({
            "maintenance_task_id": task_id,
            "date": performed,
            "performed_by": record.performed_by,
            "description_of_work": record.description_of_work,
            "cost": record.cost,
            "notes": record.notes,
        })
        update = TaskUpdate(status=COMPLETED, last_performed_date=performed)
        updated, spawned = _apply(uow, task_id, update, today)
    return service_record, updated, spawned


def refresh_overdue_tasks(uow, now: date, lead_days: int = DEFAULT_LEAD_DAYS) -> int:
    """Write ``overdue`` on every open task the classifier flags. Returns the count."""
    changed = 0
    with uow.transaction():
        for task in uow.maintenance_tasks.find_overdue(now):
            status = recommended_task_status(task, now, lead_days)
            if status is None:
                continue
            uow.maintenance_tasks.update(task.id, {"status": status})
            changed += 1
    if changed:
        logger.info("Marked %d maintenance task(s) overdue", changed)
    return changed
