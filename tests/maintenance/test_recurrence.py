from contextlib import contextmanager
from datetime import date
from types import SimpleNamespace

import pytest

from extensions import db
from modules.maintenance.models import MaintenanceTask
from modules.maintenance.recurrence import (
    InvalidTransitionError,
    RecurrenceSchedulingError,
    apply_task_update,
    check_transition,
    complete_task,
    refresh_overdue_tasks,
    schedule_next_occurrence,
)
from modules.maintenance.repository import MaintenanceTaskRepository
from modules.maintenance.schemas import ServiceRecordCreate, TaskUpdate
from repository import DatabaseError, NotFoundError, UnitOfWork

TODAY = date(2024, 1, 15)


def _task(**fields):
    fields.setdefault("status", "in_progress")
    fields.setdefault("equipment_id", "eq-1")
    fields.setdefault("description", "Change spindle coolant")
    fields.setdefault("frequency_days", 30)
    return SimpleNamespace(**fields)


# ---------- pure rule ----------

def test_completion_schedules_next_occurrence():
    draft = schedule_next_occurrence(
        _task(), TaskUpdate(status="completed", last_performed_date=date(2024, 1, 10)), TODAY
    )
    assert draft["next_due_date"] == date(2024, 2, 9)
    assert draft["last_performed_date"] == date(2024, 1, 10)
    assert draft["status"] == "pending"
    assert draft["equipment_id"] == "eq-1"
    assert draft["parts_used"] == []


def test_ninety_day_cycle_from_new_year():
    draft = schedule_next_occurrence(
        _task(frequency_days=90), TaskUpdate(status="completed", last_performed_date=date(2024, 1, 1)), TODAY
    )
    assert draft["next_due_date"] == date(2024, 3, 31)


def test_missing_performed_date_falls_back_to_today():
    draft = schedule_next_occurrence(_task(frequency_days=7), TaskUpdate(status="completed"), TODAY)
    assert draft["last_performed_date"] == TODAY
    assert draft["next_due_date"] == date(2024, 1, 22)


@pytest.mark.parametrize("frequency", [None, 0, -5])
def test_no_frequency_no_sibling(frequency):
    assert schedule_next_occurrence(_task(frequency_days=frequency), TaskUpdate(status="completed"), TODAY) is None


def test_update_frequency_wins_over_stored_one():
    draft = schedule_next_occurrence(
        _task(frequency_days=None),
        TaskUpdate(status="completed", frequency_days=14, last_performed_date=date(2024, 1, 1)),
        TODAY,
    )
    assert draft["frequency_days"] == 14
    assert draft["next_due_date"] == date(2024, 1, 15)


def test_resubmitting_completed_spawns_nothing():
    assert schedule_next_occurrence(_task(status="completed"), TaskUpdate(status="completed"), TODAY) is None


@pytest.mark.parametrize("update", [
    TaskUpdate(),
    TaskUpdate(notes="checked"),
    TaskUpdate(status="in_progress"),
    TaskUpdate(status="skipped"),
    TaskUpdate(status="overdue"),
])
def test_only_completion_fires(update):
    assert schedule_next_occurrence(_task(status="pending"), update, TODAY) is None


def test_changed_description_carries_over():
    draft = schedule_next_occurrence(
        _task(), TaskUpdate(status="completed", description="Flush and refill coolant"), TODAY
    )
    assert draft["description"] == "Flush and refill coolant"


# ---------- state machine ----------

@pytest.mark.parametrize("previous,new", [
    ("pending", "in_progress"),
    ("pending", "completed"),
    ("pending", "overdue"),
    ("in_progress", "completed"),
    ("in_progress", "skipped"),
    ("overdue", "in_progress"),
    ("overdue", "completed"),
    ("completed", "completed"),
    ("skipped", "skipped"),
    ("pending", None),
])
def test_allowed_transitions(previous, new):
    check_transition(previous, new)


@pytest.mark.parametrize("previous,new", [
    ("completed", "pending"),
    ("completed", "in_progress"),
    ("skipped", "pending"),
    ("skipped", "completed"),
    ("in_progress", "pending"),
    ("overdue", "pending"),
])
def test_rejected_transitions(previous, new):
    with pytest.raises(InvalidTransitionError):
        check_transition(previous, new)


# ---------- against an in-memory store ----------

class FakeTasks:
    def __init__(self, *tasks, fail_create=False):
        self.rows = {t.id: t for t in tasks}
        self.fail_create = fail_create
        self.locked = []

    def find_by_id(self, task_id, lock=False):
        if lock:
            self.locked.append(task_id)
        return self.rows.get(task_id)

    def update(self, task_id, patch):
        task = self.rows[task_id]
        for name, value in patch.items():
            setattr(task, name, value)
        return task

    def create(self, fields):
        if self.fail_create:
            raise DatabaseError("disk full")
        task = SimpleNamespace(id=f"task-{len(self.rows) + 1}", **fields)
        self.rows[task.id] = task
        return task


class FakeUnitOfWork:
    def __init__(self, tasks):
        self.maintenance_tasks = tasks
        self.committed = 0
        self.rolled_back = 0

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.committed += 1
        except Exception:
            self.rolled_back += 1
            raise


def test_apply_update_with_fake_store():
    tasks = FakeTasks(_task(id="t1", frequency_days=90))
    uow = FakeUnitOfWork(tasks)

    updated, spawned = apply_task_update(
        uow, "t1", TaskUpdate(status="completed", last_performed_date=date(2024, 1, 1)), TODAY
    )

    assert updated.status == "completed"
    assert spawned.next_due_date == date(2024, 3, 31)
    assert spawned.status == "pending"
    assert tasks.locked == ["t1"]
    assert uow.committed == 1


def test_apply_update_writes_fallback_date_on_original():
    tasks = FakeTasks(_task(id="t1"))
    updated, spawned = apply_task_update(FakeUnitOfWork(tasks), "t1", TaskUpdate(status="completed"), TODAY)
    assert updated.last_performed_date == TODAY
    assert spawned.last_performed_date == TODAY


def test_apply_update_failing_create_raises_scheduling_error():
    uow = FakeUnitOfWork(FakeTasks(_task(id="t1"), fail_create=True))
    with pytest.raises(RecurrenceSchedulingError):
        apply_task_update(uow, "t1", TaskUpdate(status="completed"), TODAY)
    assert uow.rolled_back == 1
    assert uow.committed == 0


def test_apply_update_missing_task():
    with pytest.raises(NotFoundError):
        apply_task_update(FakeUnitOfWork(FakeTasks()), "nope", TaskUpdate(status="completed"), TODAY)


# ---------- against the SQL store ----------

def test_sql_store_completion_persists_both_tasks(app, make_equipment, make_task):
    eq_id = make_equipment()
    task_id = make_task(eq_id, status="in_progress", frequency_days=90)

    with app.app_context():
        updated, spawned = apply_task_update(
            UnitOfWork(), task_id,
            TaskUpdate(status="completed", last_performed_date=date(2024, 1, 1)), TODAY,
        )
        spawned_id = spawned.id

    with app.app_context():
        original = db.session.get(MaintenanceTask, task_id)
        sibling = db.session.get(MaintenanceTask, spawned_id)
        assert original.status == "completed"
        assert original.last_performed_date == date(2024, 1, 1)
        assert sibling.status == "pending"
        assert sibling.next_due_date == date(2024, 3, 31)
        assert sibling.parts_used == []
        assert MaintenanceTask.query.count() == 2


def test_sql_store_rolls_back_status_when_sibling_fails(app, make_equipment, make_task, monkeypatch):
    eq_id = make_equipment()
    task_id = make_task(eq_id, status="in_progress", frequency_days=30)

    def broken_create(self, fields):
        raise DatabaseError("constraint violated")

    monkeypatch.setattr(MaintenanceTaskRepository, "create", broken_create)

    with app.app_context():
        with pytest.raises(RecurrenceSchedulingError):
            apply_task_update(UnitOfWork(), task_id, TaskUpdate(status="completed"), TODAY)

    with app.app_context():
        task = db.session.get(MaintenanceTask, task_id)
        assert task.status == "in_progress"
        assert task.last_performed_date is None
        assert MaintenanceTask.query.count() == 1


def test_complete_task_writes_service_record(app, make_equipment, make_task):
    eq_id = make_equipment()
    task_id = make_task(eq_id, status="pending", frequency_days=10)
    record = ServiceRecordCreate(performed_by="J. Ortiz", description_of_work="Replaced filter",
                                 date=date(2024, 1, 12), cost=42.5)

    with app.app_context():
        service_record, task, spawned = complete_task(UnitOfWork(), task_id, record, TODAY)
        assert service_record.maintenance_task_id == task_id
        assert task.status == "completed"
        assert task.last_performed_date == date(2024, 1, 12)
        assert spawned.next_due_date == date(2024, 1, 22)


def test_complete_task_rejects_completed_task(app, make_equipment, make_task):
    eq_id = make_equipment()
    task_id = make_task(eq_id, status="completed", frequency_days=10)
    record = ServiceRecordCreate(performed_by="J. Ortiz", description_of_work="Again")

    with app.app_context():
        with pytest.raises(InvalidTransitionError):
            complete_task(UnitOfWork(), task_id, record, TODAY)


def test_refresh_marks_open_past_due_tasks(app, make_equipment, make_task):
    eq_id = make_equipment()
    late = make_task(eq_id, status="pending", next_due_date=date(2024, 1, 1))
    make_task(eq_id, status="completed", next_due_date=date(2024, 1, 1))
    make_task(eq_id, status="pending", next_due_date=date(2024, 2, 1))

    with app.app_context():
        assert refresh_overdue_tasks(UnitOfWork(), TODAY) == 1
        assert db.session.get(MaintenanceTask, late).status == "overdue"
        assert refresh_overdue_tasks(UnitOfWork(), TODAY) == 0
