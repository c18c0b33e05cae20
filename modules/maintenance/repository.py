from datetime import date, timedelta
from typing import List

from modules.maintenance.models import MaintenanceTask, ServiceRecord
from repository import BaseRepository

OPEN_STATUSES = ("pending", "in_progress", "overdue")


class MaintenanceTaskRepository(BaseRepository[MaintenanceTask]):
    model = MaintenanceTask
    label = "maintenance task"
    order_by = MaintenanceTask.updated_at.desc()
    search_columns = (MaintenanceTask.description, MaintenanceTask.notes, MaintenanceTask.assigned_to)

    def find_by_equipment_id(self, equipment_id: str) -> List[MaintenanceTask]:
        return self.session.query(MaintenanceTask) \
            .filter_by(equipment_id=equipment_id) \
            .order_by(MaintenanceTask.next_due_date.asc()) \
            .all()

    def find_by_status(self, status: str) -> List[MaintenanceTask]:
        return self.filter(MaintenanceTask.status == status)

    def find_by_assignee(self, assigned_to: str) -> List[MaintenanceTask]:
        return self.filter(MaintenanceTask.assigned_to == assigned_to)

    def find_upcoming(self, on: date, days: int = 7) -> List[MaintenanceTask]:
        """Open tasks due between ``on`` and ``on + days`` inclusive."""
        return self.session.query(MaintenanceTask).filter(
            MaintenanceTask.next_due_date >= on,
            MaintenanceTask.next_due_date <= on + timedelta(days=days),
            MaintenanceTask.status.in_(OPEN_STATUSES),
        ).order_by(MaintenanceTask.next_due_date.asc()).all()

    def find_overdue(self, on: date) -> List[MaintenanceTask]:
        """Open tasks whose due date is before ``on``."""
        return self.session.query(MaintenanceTask).filter(
            MaintenanceTask.next_due_date < on,
            MaintenanceTask.status.in_(OPEN_STATUSES),
        ).order_by(MaintenanceTask.next_due_date.asc()).all()


class ServiceRecordRepository(BaseRepository[ServiceRecord]):
    model = ServiceRecord
    label = "service record"
    order_by = ServiceRecord.date.desc()

    def find_by_task_id(self, task_id: str) -> List[ServiceRecord]:
        return self.filter(ServiceRecord.maintenance_task_id == task_id)

    def find_by_performer(self, performed_by: str) -> List[ServiceRecord]:
        return self.filter(ServiceRecord.performed_by == performed_by)

    def find_by_date_range(self, start: date, end: date) -> List[ServiceRecord]:
        return self.filter(ServiceRecord.date >= start, ServiceRecord.date <= end)

    def find_by_equipment_id(self, equipment_id: str) -> List[ServiceRecord]:
        return self.session.query(ServiceRecord) \
            .join(MaintenanceTask, ServiceRecord.maintenance_task_id == MaintenanceTask.id) \
            .filter(MaintenanceTask.equipment_id == equipment_id) \
            .order_by(ServiceRecord.date.desc()) \
            .all()
