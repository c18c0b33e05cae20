from typing import List, Optional

from modules.equipment.models import Equipment
from repository import BaseRepository


class EquipmentRepository(BaseRepository[Equipment]):
    model = Equipment
    label = "equipment"
    order_by = Equipment.updated_at.desc()
    search_columns = (Equipment.name, Equipment.model, Equipment.serial_number, Equipment.location, Equipment.notes)

    def find_by_status(self, status: str) -> List[Equipment]:
        return self.filter(Equipment.status == status)

    def find_by_location(self, location: str) -> List[Equipment]:
        return self.filter(Equipment.location == location)

    def find_by_serial_number(self, serial_number: str) -> Optional[Equipment]:
        return self.query.filter_by(serial_number=serial_number).first()
