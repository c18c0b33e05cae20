# Lookup tables behind the pick lists on the equipment, inventory and
# metrology forms. Every table is just a unique name.

from extensions import db
from models import TimestampMixin, new_id
from utils import iso


class LookupMixin(TimestampMixin):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), unique=True, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Location(LookupMixin, db.Model):
    __tablename__ = "locations"


class Manufacturer(LookupMixin, db.Model):
    __tablename__ = "manufacturers"


class ConsumableType(LookupMixin, db.Model):
    __tablename__ = "consumable_types"


class ConsumableMaterial(LookupMixin, db.Model):
    __tablename__ = "consumable_materials"


class CuttingToolType(LookupMixin, db.Model):
    __tablename__ = "cutting_tool_types"


class CuttingToolMaterial(LookupMixin, db.Model):
    __tablename__ = "cutting_tool_materials"


class MetrologyToolType(LookupMixin, db.Model):
    __tablename__ = "metrology_tool_types"


# URL slug -> (model, label used in messages)
LOOKUP_TABLES = {
    "locations": (Location, "Location"),
    "manufacturers": (Manufacturer, "Manufacturer"),
    "consumable-types": (ConsumableType, "Consumable type"),
    "consumable-materials": (ConsumableMaterial, "Consumable material"),
    "cutting-tool-types": (CuttingToolType, "Cutting tool type"),
    "cutting-tool-materials": (CuttingToolMaterial, "Cutting tool material"),
    "metrology-tool-types": (MetrologyToolType, "Metrology tool type"),
}
