"""SQLAlchemy models for the equipment registry."""

from extensions import db
from models import TimestampMixin, new_id
from utils import iso

EQUIPMENT_STATUSES = ("operational", "maintenance", "decommissioned")


class Equipment(TimestampMixin, db.Model):
    """A machine on the shop floor."""

    __tablename__ = "equipment"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    model = db.Column(db.String(120), nullable=False)
    serial_number = db.Column(db.String(120), unique=True, nullable=False)
    location = db.Column(db.String(120), nullable=False)
    purchase_date = db.Column(db.Date)
    status = db.Column(db.String(32), nullable=False, default="operational")
    image_url = db.Column(db.String(255))
    notes = db.Column(db.Text)

    maintenance_tasks = db.relationship(
        "MaintenanceTask", back_populates="equipment", cascade="all, delete-orphan"
    )
    machine_logs = db.relationship(
        "MachineLogEntry", back_populates="equipment", cascade="all, delete-orphan"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "serialNumber": self.serial_number,
            "location": self.location,
            "purchaseDate": iso(self.purchase_date),
            "status": self.status,
            "imageUrl": self.image_url,
            "notes": self.notes,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Equipment {self.serial_number}>"
