"""HTTP routes for the equipment registry."""

import logging

from flask import request

from due_dates import maintenance_bucket
from modules.equipment.schemas import EquipmentCreate, EquipmentUpdate
from permissions import permission_required
from repository import DuplicateError, NotFoundError, get_unit_of_work
from utils import api_response, lead_days, page_args, paginated, today

from . import bp

logger = logging.getLogger(__name__)


def _get_or_404(uow, equipment_id: str):
    item = uow.equipment.find_by_id(equipment_id)
    if item is None:
        raise NotFoundError("Equipment", equipment_id)
    return item


def _ensure_unique_serial(uow, serial_number, equipment_id=None):
    if serial_number is None:
        return
    existing = uow.equipment.find_by_serial_number(serial_number)
    if existing is not None and existing.id != equipment_id:
        raise DuplicateError("Equipment", "serial number")


@bp.route("/", methods=["GET"])
@permission_required("read", "Equipment")
def list_equipment():
    uow = get_unit_of_work()
    limit, offset = page_args()
    status = request.args.get("status")
    location = request.args.get("location")
    search = (request.args.get("search") or "").strip()

    if status:
        items = uow.equipment.find_by_status(status)
    elif location:
        items = uow.equipment.find_by_location(location)
    elif search:
        items = uow.equipment.search(search)
    else:
        items = uow.equipment.find_all(limit, offset)
        return paginated([e.to_dict() for e in items], uow.equipment.count(), limit, offset)

    return paginated([e.to_dict() for e in items], len(items), limit, offset)


@bp.route("/", methods=["POST"])
@permission_required("create", "Equipment")
def create_equipment():
    payload = EquipmentCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        _ensure_unique_serial(uow, payload.serial_number)
        item = uow.equipment.create(payload.model_dump())
    logger.info("Equipment %s created (%s)", item.id, item.serial_number)
    return api_response(item.to_dict(), 201)


@bp.route("/<string:equipment_id>", methods=["GET"])
@permission_required("read", "Equipment")
def get_equipment(equipment_id: str):
    item = _get_or_404(get_unit_of_work(), equipment_id)
    return api_response(item.to_dict())


@bp.route("/<string:equipment_id>", methods=["PUT"])
@permission_required("update", "Equipment")
def update_equipment(equipment_id: str):
    payload = EquipmentUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        _get_or_404(uow, equipment_id)
        patch = payload.patch()
        _ensure_unique_serial(uow, patch.get("serial_number"), equipment_id)
        item = uow.equipment.update(equipment_id, patch)
    return api_response(item.to_dict())


@bp.route("/<string:equipment_id>", methods=["DELETE"])
@permission_required("delete", "Equipment")
def delete_equipment(equipment_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.equipment.delete(equipment_id):
            raise NotFoundError("Equipment", equipment_id)
    logger.info("Equipment %s deleted", equipment_id)
    return api_response(message="Equipment deleted successfully")


@bp.route("/<string:equipment_id>/maintenance-tasks", methods=["GET"])
@permission_required("read", "Maintenance")
def equipment_tasks(equipment_id: str):
    uow = get_unit_of_work()
    _get_or_404(uow, equipment_id)
    tasks = uow.maintenance_tasks.find_by_equipment_id(equipment_id)
    now = today()
    return api_response([t.to_dict(due_status=maintenance_bucket(t, now, lead_days())) for t in tasks])
