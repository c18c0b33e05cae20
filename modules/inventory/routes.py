"""HTTP routes for the consumable inventory."""

import logging
from io import BytesIO

from flask import request, send_file
from openpyxl import Workbook

from modules.inventory.schemas import ConsumableCreate, ConsumableUpdate, QuantityUpdate
from permissions import permission_required
from repository import NotFoundError, get_unit_of_work
from utils import api_response, bool_arg, page_args, paginated, today

from . import bp

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    ("Name", "name"),
    ("Type", "type"),
    ("Material", "material"),
    ("Size", "size"),
    ("Quantity", "quantity"),
    ("Min quantity", "min_quantity"),
    ("Location", "location"),
    ("Supplier", "supplier"),
    ("Cost per unit", "cost_per_unit"),
    ("End of life", "end_of_life_date"),
)


def _get_or_404(uow, consumable_id: str):
    item = uow.consumables.find_by_id(consumable_id)
    if item is None:
        raise NotFoundError("Consumable", consumable_id)
    return item


@bp.route("/consumables", methods=["GET"])
@permission_required("read", "Inventory")
def consumables_list():
    uow = get_unit_of_work()
    repo = uow.consumables
    limit, offset = page_args()
    location = request.args.get("location")
    type_ = request.args.get("type")
    search = (request.args.get("search") or "").strip()

    if bool_arg("lowStock"):
        items = repo.find_low_inventory()
    elif location:
        items = repo.find_by_location(location)
    elif type_:
        items = repo.find_by_type(type_)
    elif search:
        items = repo.search(search)
    else:
        items = repo.find_all(limit, offset)
        return paginated([i.to_dict() for i in items], repo.count(), limit, offset)

    return paginated([i.to_dict() for i in items], len(items), limit, offset)


@bp.route("/consumables/low-stock", methods=["GET"])
@permission_required("read", "Inventory")
def consumables_low_stock():
    return api_response([i.to_dict() for i in get_unit_of_work().consumables.find_low_inventory()])


@bp.route("/consumables", methods=["POST"])
@permission_required("create", "Inventory")
def consumable_create():
    payload = ConsumableCreate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        item = uow.consumables.create(payload.model_dump())
    logger.info("Consumable %s added (%s x%d)", item.id, item.name, item.quantity)
    return api_response(item.to_dict(), 201)


@bp.route("/consumables/<string:consumable_id>", methods=["GET"])
@permission_required("read", "Inventory")
def consumable_view(consumable_id: str):
    return api_response(_get_or_404(get_unit_of_work(), consumable_id).to_dict())


@bp.route("/consumables/<string:consumable_id>", methods=["PUT"])
@permission_required("update", "Inventory")
def consumable_update(consumable_id: str):
    payload = ConsumableUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        item = uow.consumables.update(consumable_id, payload.patch())
        if item is None:
            raise NotFoundError("Consumable", consumable_id)
    return api_response(item.to_dict())


@bp.route("/consumables/<string:consumable_id>/quantity", methods=["PATCH"])
@permission_required("update", "Inventory")
def consumable_quantity(consumable_id: str):
    payload = QuantityUpdate.model_validate(request.get_json(silent=True) or {})
    uow = get_unit_of_work()
    with uow.transaction():
        item = uow.consumables.update_quantity(consumable_id, payload.quantity)
        if item is None:
            raise NotFoundError("Consumable", consumable_id)
    if item.is_low_stock:
        logger.warning("Consumable %s is low on stock (%d <= %d)", item.id, item.quantity, item.min_quantity)
    return api_response(item.to_dict())


@bp.route("/consumables/<string:consumable_id>", methods=["DELETE"])
@permission_required("delete", "Inventory")
def consumable_delete(consumable_id: str):
    uow = get_unit_of_work()
    with uow.transaction():
        if not uow.consumables.delete(consumable_id):
            raise NotFoundError("Consumable", consumable_id)
    logger.info("Consumable %s deleted", consumable_id)
    return api_response(message="Consumable deleted successfully")


@bp.route("/export", methods=["GET"])
@permission_required("read", "Inventory")
def export():
    repo = get_unit_of_work().consumables
    items = repo.find_all(limit=max(repo.count(), 1))

    wb = Workbook()
    ws = wb.active
    ws.title = "Consumables"
    ws.append([header for header, _ in EXPORT_COLUMNS])
    for item in items:
        row = []
        for _, attr in EXPORT_COLUMNS:
            value = getattr(item, attr)
            if attr == "cost_per_unit" and value is not None:
                value = float(value)
            row.append(value)
        ws.append(row)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return send_file(
        buffer,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"consumables_{today().isoformat()}.xlsx",
    )
