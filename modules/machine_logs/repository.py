from datetime import datetime, timedelta
from typing import List

from modules.machine_logs.models import MachineLogEntry
from repository import BaseRepository


class MachineLogRepository(BaseRepository[MachineLogEntry]):
    model = MachineLogEntry
    label = "machine log entry"
    order_by = MachineLogEntry.timestamp.desc()

    def find_by_equipment_id(self, equipment_id: str, limit: int = 100) -> List[MachineLogEntry]:
        return self.session.query(MachineLogEntry) \
            .filter_by(equipment_id=equipment_id) \
            .order_by(MachineLogEntry.timestamp.desc()) \
            .limit(limit) \
            .all()

    def find_by_date_range(self, equipment_id: str, start: datetime, end: datetime) -> List[MachineLogEntry]:
        return self.filter(
            MachineLogEntry.equipment_id == equipment_id,
            MachineLogEntry.timestamp >= start,
            MachineLogEntry.timestamp <= end,
        )

    def find_by_error_code(self, error_code: str) -> List[MachineLogEntry]:
        return self.filter(MachineLogEntry.error_code == error_code)

    def find_by_metric(self, metric_name: str) -> List[MachineLogEntry]:
        return self.filter(MachineLogEntry.metric_name == metric_name)

    def find_recent(self, equipment_id: str, hours: int, now: datetime) -> List[MachineLogEntry]:
        """Entries for one machine from the last ``hours`` hours before ``now``."""
        return self.filter(
            MachineLogEntry.equipment_id == equipment_id,
            MachineLogEntry.timestamp >= now - timedelta(hours=hours),
        )
