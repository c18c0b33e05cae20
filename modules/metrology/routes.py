"""HTTP routes for metrology tools and calibration logs."""

import logging

from flask import request

from due_dates import calibration_bucket
from modules.metrology.calibration import (
    derive_tool_fields,
    record_calibration,
    rederive_tool_patch,
    refresh_calibration_statuses,
)
from modules.metrology.schemas import CalibrationCreate, ToolCreate, ToolUpdate
from permissions import permission_required
from repository import DuplicateError, NotFoundError, get_unit_of_work
from utils import api_response, bool_arg, lead_days, page_args, paginated, parse_date, today

from . import bp

logger = logging.getLogger(__name__)


def _tool_dict(tool, now=None):
    return tool.to_dict(due_status=calibration_bucket(tool, now or today(), lead_days()))


def _get_or_404(uow, tool_id: str):
    tool = uow.metrology_tools.find_by_id(tool_id)
    if tool is None:
        raise NotFoundError("Metrology tool", tool_id)
    return tool


def _ensure_unique_serial(uow, serial_number, tool_id=None):
    if serial_number is None:
        return
    existing = uow.metrology_tools.find_by_serial_number(serial_number)
    if existing is not None and existing.id != tool_id:
        raise DuplicateError("Metrology tool", "serial number")


# ---------- Tools ----------
@bp.route("/tools", methods=["GET"])
@permission_required("read", "Metrology")
def tools_list():
    uow = get_unit_of_work()
    repo = uow.metrology_tools
    limit, offset = page_args()
    now = today()
    status = request.args.get("status")
    search = (request.args.get("search") or "").strip()

    if bool_arg("dueSoon"):
        tools = repo.find_due_for_calibration(now, lead_days())
    elif bool_arg("overdue"):
        tools = repo.find_overdue_calibration(now)
    elif status:
        tools = repo.find_by_status(status)
    elif search:
        tools = repo.search(search)
    else:
        tools = repo.find_all(limit, offset)
        return paginated([_tool_dict(t, now) for t in tools], repo.count(), limit, offset)

    return paginated([_tool_dict(t, now) for t in tools], len(tools), limit, offset)


@bp.route("/tools", methods=["POST"])
@permission_required("create", "Metrology")
def tool_create():
    payload = ToolCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        _ensure_unique_serial(uow, payload.serial_number)
        tool = uow.metrology_tools.create(derive_tool_fields(payload.model_dump(), today(), lead_days()))
    logger.info("Metrology tool %s registered (%s)", tool.id, tool.serial_number)
    return api_response(_tool_dict(tool), 201)


@bp.route("/tools/<string:tool_id>", methods=["GET"])
@permission_required("read", "Metrology")
def tool_view(tool_id: str):
    return api_response(_tool_dict(_get_or_404(get_unit_of_work(), tool_id)))


@bp.route("/tools/<string:tool_id>", methods=["PUT"])
@permission_required("update", "Metrology")
def tool_update(tool_id: str):
    payload = ToolUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        current = _get_or_404(uow, tool_id)
        patch = rederive_tool_patch(current, payload.patch(), today(), lead_days())
        _ensure_unique_serial(uow, patch.get("serial_number"), tool_id)
        tool = uow.metrology_tools.update(tool_id, patch)
    return api_response(_tool_dict(tool))


@bp.route("/tools/<string:tool_id>", methods=["DELETE"])
@permission_required("delete", "Metrology")
def tool_delete(tool_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.metrology_tools.delete(tool_id):
            raise NotFoundError("Metrology tool", tool_id)
    logger.info("Metrology tool %s deleted", tool_id)
    return api_response(message="Metrology tool deleted successfully")


@bp.route("/tools/refresh", methods=["POST"])
@permission_required("calibrate", "Metrology")
def tools_refresh():
    changed = refresh_calibration_statuses(get_unit_of_work(), today(), lead_days())
    return api_response({"updated": changed})


# ---------- Calibration logs ----------
@bp.route("/tools/<string:tool_id>/calibrations", methods=["GET"])
@permission_required("read", "Metrology")
def tool_calibrations(tool_id: str):
    uow = get_unit_of_work()
    _get_or_404(uow, tool_id)
    return api_response([log.to_dict() for log in uow.calibration_logs.find_by_tool_id(tool_id)])


@bp.route("/tools/<string:tool_id>/calibrations", methods=["POST"])
@permission_required("calibrate", "Metrology")
def tool_calibrate(tool_id: str):
    payload = CalibrationCreate.model_validate(request.get_json(silent=True) or {})
    log, tool = record_calibration(get_unit_of_work(), tool_id, payload, today(), lead_days())
    return api_response({"log": log.to_dict(), "tool": _tool_dict(tool)}, 201)


@bp.route("/calibrations", methods=["GET"])
@permission_required("read", "Metrology")
def calibrations_list():
    uow = get_unit_of_work()
    repo = uow.calibration_logs
    limit, offset = page_args()
    tool_id = request.args.get("toolId")
    performed_by = request.args.get("performedBy")
    start = request.args.get("startDate")
    end = request.args.get("endDate")
    result = request.args.get("result")

    if tool_id:
        logs = repo.find_by_tool_id(tool_id)
    elif performed_by:
        logs = repo.find_by_performer(performed_by)
    elif start and end:
        start_date, end_date = parse_date(start), parse_date(end)
        logs = repo.find_by_date_range(start_date, end_date) if start_date and end_date else []
    elif result:
        logs = repo.find_by_result(result)
    else:
        logs = repo.find_all(limit, offset)
        return paginated([log.to_dict() for log in logs], repo.count(), limit, offset)

    return paginated([log.to_dict() for log in logs], len(logs), limit, offset)
