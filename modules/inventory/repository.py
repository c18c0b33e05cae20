from datetime import date
from typing import List, Optional

from modules.inventory.models import Consumable
from repository import BaseRepository


class ConsumableRepository(BaseRepository[Consumable]):
    model = Consumable
    label = "consumable"
    order_by = Consumable.name.asc()
    search_columns = (Consumable.name, Consumable.type, Consumable.material, Consumable.size,
                      Consumable.location, Consumable.supplier)

    def find_low_inventory(self) -> List[Consumable]:
        return self.filter(Consumable.quantity <= Consumable.min_quantity)

    def find_by_location(self, location: str) -> List[Consumable]:
        return self.filter(Consumable.location == location)

    def find_by_type(self, type_: str) -> List[Consumable]:
        return self.filter(Consumable.type == type_)

    def find_end_of_life(self, on: date) -> List[Consumable]:
        """Consumables whose end-of-life date is on or before ``on``."""
        return self.filter(Consumable.end_of_life_date.isnot(None), Consumable.end_of_life_date <= on)

    def update_quantity(self, entity_id: str, quantity: int) -> Optional[Consumable]:
        return self.update(entity_id, {"quantity": quantity})
