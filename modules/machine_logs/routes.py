"""HTTP routes for machine log entries."""

import logging
from datetime import timedelta, timezone

from flask import request

from modules.machine_logs.schemas import LogEntryCreate, LogEntryUpdate
from permissions import permission_required
from repository import NotFoundError, get_unit_of_work
from utils import api_response, bool_arg, int_arg, page_args, paginated, parse_datetime, utcnow

from . import bp

logger = logging.getLogger(__name__)

RECENT_HOURS = 24


def _query_time(raw: str):
    value = parse_datetime(raw)
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _range_end(raw: str):
    """A bare date as the end of a range covers that whole day."""
    end = _query_time(raw)
    if end is not None and len(raw.strip()) == 10:
        end += timedelta(days=1) - timedelta(microseconds=1)
    return end


@bp.route("/", methods=["GET"])
@permission_required("read", "Equipment")
def logs_list():
    uow = get_unit_of_work()
    repo = uow.machine_logs
    limit, offset = page_args()
    equipment_id = request.args.get("equipmentId")
    start = request.args.get("startDate")
    end = request.args.get("endDate")
    error_code = request.args.get("errorCode")
    metric_name = request.args.get("metricName")

    if equipment_id and start and end:
        start_at, end_at = _query_time(start), _range_end(end)
        entries = repo.find_by_date_range(equipment_id, start_at, end_at) if start_at and end_at else []
    elif equipment_id and bool_arg("recent"):
        entries = repo.find_recent(equipment_id, int_arg("hours", RECENT_HOURS, minimum=1), utcnow())
    elif equipment_id:
        entries = repo.find_by_equipment_id(equipment_id, limit)
    elif error_code:
        entries = repo.find_by_error_code(error_code)
    elif metric_name:
        entries = repo.find_by_metric(metric_name)
    else:
        entries = repo.find_all(limit, offset)
        return paginated([e.to_dict() for e in entries], repo.count(), limit, offset)

    return paginated([e.to_dict() for e in entries], len(entries), limit, offset)


@bp.route("/", methods=["POST"])
@permission_required("update", "Equipment")
def log_create():
    payload = LogEntryCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        if uow.equipment.find_by_id(payload.equipment_id) is None:
            raise NotFoundError("Equipment", payload.equipment_id)
        entry = uow.machine_logs.create(payload.model_dump())
    if entry.error_code:
        logger.warning("Equipment %s reported error %s", entry.equipment_id, entry.error_code)
    return api_response(entry.to_dict(), 201)


@bp.route("/<string:entry_id>", methods=["GET"])
@permission_required("read", "Equipment")
def log_view(entry_id: str):
    entry = get_unit_of_work().machine_logs.find_by_id(entry_id)
    if entry is None:
        raise NotFoundError("Machine log entry", entry_id)
    return api_response(entry.to_dict())


@bp.route("/<string:entry_id>", methods=["PUT"])
@permission_required("update", "Equipment")
def log_update(entry_id: str):
    payload = LogEntryUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        entry = uow.machine_logs.update(entry_id, payload.patch())
        if entry is None:
            raise NotFoundError("Machine log entry", entry_id)
    return api_response(entry.to_dict())


@bp.route("/<string:entry_id>", methods=["DELETE"])
@permission_required("delete", "Equipment")
def log_delete(entry_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.machine_logs.delete(entry_id):
            raise NotFoundError("Machine log entry", entry_id)
    logger.info("Machine log entry %s deleted", entry_id)
    return api_response(message="Machine log entry deleted successfully")
