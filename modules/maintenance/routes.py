# modules/maintenance/routes.py
import logging

from flask import abort, request

from due_dates import maintenance_bucket
from modules.maintenance.recurrence import (
    apply_task_update,
    complete_task,
    refresh_overdue_tasks,
)
from modules.maintenance.schemas import (
    ServiceRecordCreate,
    ServiceRecordNew,
    ServiceRecordUpdate,
    TaskCreate,
    TaskUpdate,
)
from permissions import current_user_can, permission_required
from repository import NotFoundError, get_unit_of_work
from utils import api_response, bool_arg, int_arg, lead_days, page_args, paginated, parse_date, today

from . import bp

logger = logging.getLogger(__name__)


def _task_dict(task, now=None):
    return task.to_dict(due_status=maintenance_bucket(task, now or today(), lead_days()))


def _get_or_404(uow, task_id: str):
    task = uow.maintenance_tasks.find_by_id(task_id)
    if task is None:
        raise NotFoundError("Maintenance task", task_id)
    return task


# =================== TASKS ===================
@bp.route("/tasks", methods=["GET"])
@permission_required("read", "Maintenance")
def tasks_list():
    uow = get_unit_of_work()
    repo = uow.maintenance_tasks
    limit, offset = page_args()
    now = today()

    upcoming = int_arg("upcoming")
    equipment_id = request.args.get("equipmentId")
    status = request.args.get("status")
    assigned_to = request.args.get("assignedTo")
    search = (request.args.get("search") or "").strip()

    if bool_arg("overdue"):
        tasks = repo.find_overdue(now)
    elif upcoming is not None:
        tasks = repo.find_upcoming(now, upcoming)
    elif equipment_id:
        tasks = repo.find_by_equipment_id(equipment_id)
    elif status:
        tasks = repo.find_by_status(status)
    elif assigned_to:
        tasks = repo.find_by_assignee(assigned_to)
    elif search:
        tasks = repo.search(search)
    else:
        tasks = repo.find_all(limit, offset)
        return paginated([_task_dict(t, now) for t in tasks], repo.count(), limit, offset)

    return paginated([_task_dict(t, now) for t in tasks], len(tasks), limit, offset)


@bp.route("/tasks", methods=["POST"])
@permission_required("create", "Maintenance")
def task_create():
    payload = TaskCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        if uow.equipment.find_by_id(payload.equipment_id) is None:
            raise NotFoundError("Equipment", payload.equipment_id)
        task = uow.maintenance_tasks.create(payload.model_dump())
    logger.info("Maintenance task %s scheduled for equipment %s", task.id, task.equipment_id)
    return api_response(_task_dict(task), 201)


@bp.route("/tasks/<string:task_id>", methods=["GET"])
@permission_required("read", "Maintenance")
def task_view(task_id: str):
    task = _get_or_404(get_unit_of_work(), task_id)
    return api_response(_task_dict(task))


@bp.route("/tasks/<string:task_id>", methods=["PUT"])
@permission_required("update", "Maintenance")
def task_update(task_id: str):
    update = TaskUpdate.model_validate(request.get_json(silent=True) or {})
    if update.status == "completed" and not current_user_can("complete", "Maintenance"):
        abort(403)

    uow = get_unit_of_work()
    if update.equipment_id is not None and uow.equipment.find_by_id(update.equipment_id) is None:
        raise NotFoundError("Equipment", update.equipment_id)

    task, spawned = apply_task_update(uow, task_id, update, today())
    extra = {"nextTask": _task_dict(spawned)} if spawned is not None else {}
    return api_response(_task_dict(task), **extra)


@bp.route("/tasks/<string:task_id>", methods=["DELETE"])
@permission_required("delete", "Maintenance")
def task_delete(task_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.maintenance_tasks.delete(task_id):
            raise NotFoundError("Maintenance task", task_id)
    logger.info("Maintenance task %s deleted", task_id)
    return api_response(message="Maintenance task deleted successfully")


@bp.route("/tasks/<string:task_id>/complete", methods=["POST"])
@permission_required("complete", "Maintenance")
def task_complete(task_id: str):
    record = ServiceRecordCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    service_record, task, spawned = complete_task(uow, task_id, record, today())
    return api_response({
        "task": _task_dict(task),
        "serviceRecord": service_record.to_dict(),
        "nextTask": _task_dict(spawned) if spawned is not None else None,
    })


@bp.route("/tasks/refresh", methods=["POST"])
@permission_required("schedule", "Maintenance")
def tasks_refresh():
    changed = refresh_overdue_tasks(get_unit_of_work(), today(), lead_days())
    return api_response({"updated": changed})


# =================== SERVICE RECORDS ===================
@bp.route("/tasks/<string:task_id>/service-records", methods=["GET"])
@permission_required("read", "Maintenance")
def task_service_records(task_id: str):
    uow = get_unit_of_work()
    _get_or_404(uow, task_id)
    records = uow.service_records.find_by_task_id(task_id)
    return api_response([r.to_dict() for r in records])


def _record_or_404(uow, record_id: str):
    record = uow.service_records.find_by_id(record_id)
    if record is None:
        raise NotFoundError("Service record", record_id)
    return record


@bp.route("/service-records", methods=["GET"])
@permission_required("read", "Maintenance")
def service_records_list():
    uow = get_unit_of_work()
    repo = uow.service_records
    limit, offset = page_args()
    task_id = request.args.get("taskId")
    performer = request.args.get("performer")
    start = request.args.get("startDate")
    end = request.args.get("endDate")
    equipment_id = request.args.get("equipmentId")

    if task_id:
        records = repo.find_by_task_id(task_id)
    elif performer:
        records = repo.find_by_performer(performer)
    elif start and end:
        start_date, end_date = parse_date(start), parse_date(end)
        records = repo.find_by_date_range(start_date, end_date) if start_date and end_date else []
    elif equipment_id:
        records = repo.find_by_equipment_id(equipment_id)
    else:
        records = repo.find_all(limit, offset)
        return paginated([r.to_dict() for r in records], repo.count(), limit, offset)

    return paginated([r.to_dict() for r in records], len(records), limit, offset)


@bp.route("/service-records", methods=["POST"])
@permission_required("complete", "Maintenance")
def service_record_create():
    payload = ServiceRecordNew.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        _get_or_404(uow, payload.maintenance_task_id)
        record = uow.service_records.create(payload.model_dump())
    logger.info("Service record %s logged for task %s", record.id, record.maintenance_task_id)
    return api_response(record.to_dict(), 201)


@bp.route("/service-records/<string:record_id>", methods=["GET"])
@permission_required("read", "Maintenance")
def service_record_view(record_id: str):
    return api_response(_record_or_404(get_unit_of_work(), record_id).to_dict())


@bp.route("/service-records/<string:record_id>", methods=["PUT"])
@permission_required("update", "Maintenance")
def service_record_update(record_id: str):
    payload = ServiceRecordUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        record = uow.service_records.update(record_id, payload.patch())
        if record is None:
            raise NotFoundError("Service record", record_id)
    return api_response(record.to_dict())


@bp.route("/service-records/<string:record_id>", methods=["DELETE"])
@permission_required("delete", "Maintenance")
def service_record_delete(record_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.service_records.delete(record_id):
            raise NotFoundError("Service record", record_id)
    logger.info("Service record %s deleted", record_id)
    return api_response(message="Service record deleted successfully")
