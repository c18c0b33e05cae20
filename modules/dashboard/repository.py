"""Read-only aggregates for the dashboard."""

from datetime import date, timedelta
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from modules.equipment.models import Equipment
from modules.inventory.models import Consumable
from modules.maintenance.models import MaintenanceTask, ServiceRecord
from modules.metrology.models import CalibrationLog, MetrologyTool
from repository import DatabaseError
from utils import iso

CLOSED_TASK_STATUSES = ("completed", "skipped")


class DashboardRepository:
    def __init__(self, session):
        self.session = session

    def summary(self, on: date, upcoming_days: int = 30) -> Dict[str, int]:
        """
        Headline counts: open maintenance due within ``upcoming_days`` of ``on``,
        consumables at or below their minimum, and in-service tools past their
        calibration date.
        """
        try:
            upcoming = self.session.query(func.count(MaintenanceTask.id)).filter(
                MaintenanceTask.next_due_date >= on,
                MaintenanceTask.next_due_date <= on + timedelta(days=upcoming_days),
                MaintenanceTask.status.notin_(CLOSED_TASK_STATUSES),
            ).scalar()
            low_inventory = self.session.query(func.count(Consumable.id)).filter(
                Consumable.quantity <= Consumable.min_quantity,
            ).scalar()
            overdue_calibrations = self.session.query(func.count(MetrologyTool.id)).filter(
                MetrologyTool.next_calibration_date < on,
                MetrologyTool.status != "out_of_service",
            ).scalar()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to get dashboard summary: {exc}") from exc

        return {
            "upcomingMaintenanceCount": upcoming or 0,
            "lowInventoryCount": low_inventory or 0,
            "overdueCalibrationsCount": overdue_calibrations or 0,
        }

    def _status_counts(self, column) -> Dict[str, int]:
        try:
            rows = self.session.query(column, func.count()).group_by(column).all()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to count statuses: {exc}") from exc
        return {status: count for status, count in rows}

    def equipment_status_counts(self) -> Dict[str, int]:
        return self._status_counts(Equipment.status)

    def maintenance_status_counts(self) -> Dict[str, int]:
        return self._status_counts(MaintenanceTask.status)

    def recent_activity(self, limit: int = 10) -> List[dict]:
        """Latest changes across equipment, tasks, calibrations and service records, newest first."""
        activities = []
        try:
            for item in (self.session.query(Equipment)
                         .order_by(Equipment.updated_at.desc()).limit(limit)):
                activities.append(("equipment", item.id, item.name, item.updated_at,
                                   f"Updated equipment: {item.name}"))
            for task in (self.session.query(MaintenanceTask)
                         .order_by(MaintenanceTask.updated_at.desc()).limit(limit)):
                activities.append(("maintenance", task.id, task.description, task.updated_at,
                                   f"Maintenance task: {task.description}"))
            for log, tool_name in (self.session.query(CalibrationLog, MetrologyTool.name)
                                   .join(MetrologyTool, CalibrationLog.metrology_tool_id == MetrologyTool.id)
                                   .order_by(CalibrationLog.created_at.desc()).limit(limit)):
                activities.append(("calibration", log.id, tool_name, log.created_at,
                                   f"Calibration completed for: {tool_name}"))
            for record in (self.session.query(ServiceRecord)
                           .order_by(ServiceRecord.created_at.desc()).limit(limit)):
                activities.append(("service", record.id, record.performed_by, record.created_at,
                                   f"Service performed by: {record.performed_by}"))
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Failed to get recent activity: {exc}") from exc

        activities.sort(key=lambda a: a[3], reverse=True)
        return [
            {"type": kind, "id": entity_id, "title": title, "timestamp": iso(ts), "description": text}
            for kind, entity_id, title, ts, text in activities[:limit]
        ]
