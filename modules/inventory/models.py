"""SQLAlchemy models for cutting tools and other shop consumables."""

from extensions import db
from models import TimestampMixin, new_id
from utils import iso


class Consumable(TimestampMixin, db.Model):
    __tablename__ = "consumables"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(120), nullable=False)
    material = db.Column(db.String(120))
    size = db.Column(db.String(64))
    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_quantity = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(120), nullable=False)
    tool_life_hours = db.Column(db.Float)
    remaining_tool_life_hours = db.Column(db.Float)
    last_used_date = db.Column(db.Date)
    end_of_life_date = db.Column(db.Date)
    supplier = db.Column(db.String(255))
    cost_per_unit = db.Column(db.Numeric(12, 2))
    image_url = db.Column(db.String(255))
    notes = db.Column(db.Text)

    @property
    def is_low_stock(self) -> bool:
        return (self.quantity or 0) <= (self.min_quantity or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "material": self.material,
            "size": self.size,
            "quantity": self.quantity,
            "minQuantity": self.min_quantity,
            "location": self.location,
            "toolLifeHours": self.tool_life_hours,
            "remainingToolLifeHours": self.remaining_tool_life_hours,
            "lastUsedDate": iso(self.last_used_date),
            "endOfLifeDate": iso(self.end_of_life_date),
            "supplier": self.supplier,
            "costPerUnit": float(self.cost_per_unit) if self.cost_per_unit is not None else None,
            "imageUrl": self.image_url,
            "notes": self.notes,
            "lowStock": self.is_low_stock,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Consumable {self.name} x{self.quantity}>"
