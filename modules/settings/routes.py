"""HTTP routes for the settings lookup tables (locations, manufacturers, ...)."""

import logging

from flask import abort, request

from modules.settings.schemas import LookupName
from permissions import permission_required
from repository import DuplicateError, NotFoundError, get_unit_of_work
from utils import api_response

from . import bp

logger = logging.getLogger(__name__)


def _repo_or_404(uow, kind: str):
    repo = uow.lookups.get(kind)
    if repo is None:
        abort(404, description=f"Unknown settings table: {kind}")
    return repo


def _ensure_unique_name(repo, name: str, entry_id=None):
    existing = repo.find_by_name(name)
    if existing is not None and existing.id != entry_id:
        raise DuplicateError(repo.label, "name")


@bp.route("/<string:kind>", methods=["GET"])
@permission_required("read", "Settings")
def lookup_list(kind: str):
    repo = _repo_or_404(get_unit_of_work(), kind)
    return api_response([entry.to_dict() for entry in repo.filter()])


@bp.route("/<string:kind>", methods=["POST"])
@permission_required("create", "Settings")
def lookup_create(kind: str):
    uow = get_unit_of_work()
    repo = _repo_or_404(uow, kind)
    payload = LookupName.model_validate(request.get_json(silent=True) or {})
    with uow.transaction():
        _ensure_unique_name(repo, payload.name)
        entry = repo.create(payload.model_dump())
    logger.info("%s '%s' added", repo.label, entry.name)
    return api_response(entry.to_dict(), 201)


@bp.route("/<string:kind>/<string:entry_id>", methods=["PUT"])
@permission_required("update", "Settings")
def lookup_update(kind: str, entry_id: str):
    uow = get_unit_of_work()
    repo = _repo_or_404(uow, kind)
    payload = LookupName.model_validate(request.get_json(silent=True) or {})
    with uow.transaction():
        _ensure_unique_name(repo, payload.name, entry_id)
        entry = repo.update(entry_id, payload.model_dump())
        if entry is None:
            raise NotFoundError(repo.label, entry_id)
    return api_response(entry.to_dict())


@bp.route("/<string:kind>/<string:entry_id>", methods=["DELETE"])
@permission_required("delete", "Settings")
def lookup_delete(kind: str, entry_id: str):
    uow = get_unit_of_work()
    repo = _repo_or_404(uow, kind)
    with uow.transaction():
        if not repo.delete(entry_id):
            raise NotFoundError(repo.label, entry_id)
    logger.info("%s %s deleted", repo.label, entry_id)
    return api_response(message=f"{repo.label} deleted successfully")
