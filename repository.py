"""
Store layer: thin repositories over the shared SQLAlchemy session plus the
unit of work that owns the transaction boundary for one request.

Repositories flush but never commit; ``UnitOfWork.transaction()`` commits on
success and rolls everything back on any exception.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from flask import g
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from extensions import db

logger = logging.getLogger(__name__)

M = TypeVar("M")


class DatabaseError(Exception):
    """Store failure surfaced to callers."""


class NotFoundError(DatabaseError):
    def __init__(self, resource: str, entity_id: str):
        super().__init__(f"{resource} with id {entity_id} not found")
        self.resource = resource
        self.entity_id = entity_id


class DuplicateError(DatabaseError):
    def __init__(self, resource: str, field: str):
        super().__init__(f"{resource} with this {field} already exists")


class BaseRepository(Generic[M]):
    model: Type[M]
    label = "record"
    order_by = None
    search_columns: tuple = ()

    def __init__(self, session):
        self.session = session

    @property
    def query(self):
        return self.session.query(self.model)

    def _ordered(self, query):
        if self.order_by is not None:
            return query.order_by(self.order_by)
        return query

    def find_by_id(self, entity_id: str, lock: bool = False) -> Optional[M]:
        try:
            query = self.query.filter_by(id=entity_id)
            if lock:
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to find {self.label} by id: {exc}") from exc

    def find_all(self, limit: int = 100, offset: int = 0) -> List[M]:
        try:
            return self._ordered(self.query).offset(offset).limit(limit).all()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to list {self.label}s: {exc}") from exc

    def filter(self, *criteria) -> List[M]:
        try:
            return self._ordered(self.query.filter(*criteria)).all()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to query {self.label}s: {exc}") from exc

    def search(self, text: str) -> List[M]:
        like = f"%{text.strip()}%"
        return self.filter(or_(*(column.ilike(like) for column in self.search_columns)))

    def create(self, fields: Dict[str, Any]) -> M:
        entity = self.model(**fields)
        try:
            self.session.add(entity)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to create {self.label}: {exc}") from exc
        return entity

    def update(self, entity_id: str, patch: Dict[str, Any]) -> Optional[M]:
        entity = self.find_by_id(entity_id)
        if entity is None:
            return None
        for name, value in patch.items():
            setattr(entity, name, value)
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to update {self.label}: {exc}") from exc
        return entity

    def delete(self, entity_id: str) -> bool:
        entity = self.find_by_id(entity_id)
        if entity is None:
            return False
        try:
            self.session.delete(entity)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to delete {self.label}: {exc}") from exc
        return True

    def count(self, *criteria) -> int:
        try:
            return self.query.filter(*criteria).count()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to count {self.label}s: {exc}") from exc


class UnitOfWork:
    """Groups the repositories used by one request around one session."""

    def __init__(self, session=None):
        # Module repositories import their models; keep the imports local so
        # extensions.py and models.py stay importable on their own.
        from modules.dashboard.repository import DashboardRepository
        from modules.equipment.repository import EquipmentRepository
        from modules.inventory.repository import ConsumableRepository
        from modules.machine_logs.repository import MachineLogRepository
        from modules.maintenance.repository import MaintenanceTaskRepository, ServiceRecordRepository
        from modules.metrology.repository import CalibrationLogRepository, MetrologyToolRepository
        from modules.settings.repository import lookup_repositories

        self.session = session if session is not None else db.session
        self.equipment = EquipmentRepository(self.session)
        self.metrology_tools = MetrologyToolRepository(self.session)
        self.calibration_logs = CalibrationLogRepository(self.session)
        self.consumables = ConsumableRepository(self.session)
        self.maintenance_tasks = MaintenanceTaskRepository(self.session)
        self.service_records = ServiceRecordRepository(self.session)
        self.machine_logs = MachineLogRepository(self.session)
        self.lookups = lookup_repositories(self.session)
        self.dashboard = DashboardRepository(self.session)

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Transaction rolled back: %s", exc)
            raise DatabaseError(str(exc)) from exc
        except Exception:
            self.session.rollback()
            logger.warning("Transaction rolled back")
            raise


def get_unit_of_work() -> UnitOfWork:
    """Unit of work for the current request, created on first use."""
    if "uow" not in g:
        g.uow = UnitOfWork()
    return g.uow
