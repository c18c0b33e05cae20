from datetime import date, timedelta
from typing import List, Optional

from modules.metrology.models import CalibrationLog, MetrologyTool
from repository import BaseRepository, DatabaseError


class MetrologyToolRepository(BaseRepository[MetrologyTool]):
    model = MetrologyTool
    label = "metrology tool"
    order_by = MetrologyTool.updated_at.desc()
    search_columns = (MetrologyTool.name, MetrologyTool.type, MetrologyTool.serial_number,
                      MetrologyTool.manufacturer, MetrologyTool.location)

    def find_by_status(self, status: str) -> List[MetrologyTool]:
        return self.filter(MetrologyTool.status == status)

    def find_in_service(self) -> List[MetrologyTool]:
        return self.filter(MetrologyTool.status != "out_of_service")

    def find_by_serial_number(self, serial_number: str) -> Optional[MetrologyTool]:
        return self.query.filter_by(serial_number=serial_number).first()

    def find_due_for_calibration(self, on: date, lead_days: int = 0) -> List[MetrologyTool]:
        """In-service tools whose next calibration falls on or before ``on + lead_days``."""
        return self.session.query(MetrologyTool).filter(
            MetrologyTool.next_calibration_date <= on + timedelta(days=lead_days),
            MetrologyTool.status != "out_of_service",
        ).order_by(MetrologyTool.next_calibration_date.asc()).all()

    def find_overdue_calibration(self, on: date) -> List[MetrologyTool]:
        return self.session.query(MetrologyTool).filter(
            MetrologyTool.next_calibration_date < on,
            MetrologyTool.status != "out_of_service",
        ).order_by(MetrologyTool.next_calibration_date.asc()).all()


class CalibrationLogRepository(BaseRepository[CalibrationLog]):
    model = CalibrationLog
    label = "calibration log"
    order_by = CalibrationLog.date.desc()

    def update(self, entity_id, patch):
        raise DatabaseError("Calibration logs are append-only and cannot be modified")

    def delete(self, entity_id):
        raise DatabaseError("Calibration logs are append-only and cannot be deleted")

    def find_by_tool_id(self, tool_id: str) -> List[CalibrationLog]:
        return self.filter(CalibrationLog.metrology_tool_id == tool_id)

    def find_by_date_range(self, start: date, end: date) -> List[CalibrationLog]:
        return self.filter(CalibrationLog.date >= start, CalibrationLog.date <= end)

    def find_by_performer(self, performed_by: str) -> List[CalibrationLog]:
        return self.filter(CalibrationLog.performed_by == performed_by)

    def find_by_result(self, result: str) -> List[CalibrationLog]:
        return self.filter(CalibrationLog.result == result)
