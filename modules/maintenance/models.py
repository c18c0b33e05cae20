# Maintenance models: scheduled tasks, the parts they consumed and the
# service records written when they are completed.

from datetime import datetime

from extensions import db
from models import TimestampMixin, new_id
from utils import iso

TASK_STATUSES = ("pending", "in_progress", "completed", "overdue", "skipped")


# ========== MAINTENANCE TASKS ==========
class MaintenanceTask(TimestampMixin, db.Model):
    __tablename__ = "maintenance_tasks"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    equipment_id = db.Column(db.String(36),
                             db.ForeignKey("equipment.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)

    frequency_days = db.Column(db.Integer)          # None -> one-shot task
    last_performed_date = db.Column(db.Date)
    next_due_date = db.Column(db.Date, index=True)

    assigned_to = db.Column(db.String(120))
    notes = db.Column(db.Text)
    status = db.Column(db.String(32), nullable=False, default="pending")

    equipment = db.relationship("Equipment", back_populates="maintenance_tasks")
    parts = db.relationship("MaintenancePart", back_populates="task",
                            cascade="all, delete-orphan",
                            order_by="MaintenancePart.id")
    service_records = db.relationship("ServiceRecord", back_populates="task",
                                      cascade="all, delete-orphan",
                                      order_by="ServiceRecord.date")

    @property
    def parts_used(self) -> list:
        return [{"part_name": p.part_name, "quantity": p.quantity} for p in self.parts]

    @parts_used.setter
    def parts_used(self, items) -> None:
        self.parts = [MaintenancePart(part_name=i["part_name"], quantity=i["quantity"])
                      for i in (items or [])]

    def to_dict(self, due_status: str | None = None) -> dict:
        data = {
            "id": self.id,
            "equipmentId": self.equipment_id,
            "description": self.description,
            "frequencyDays": self.frequency_days,
            "lastPerformedDate": iso(self.last_performed_date),
            "nextDueDate": iso(self.next_due_date),
            "assignedTo": self.assigned_to,
            "notes": self.notes,
            "status": self.status,
            "partsUsed": [{"partName": p.part_name, "quantity": p.quantity} for p in self.parts],
            "serviceRecordIds": [r.id for r in self.service_records],
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if due_status is not None:
            data["dueStatus"] = due_status
        return data

    def __repr__(self) -> str:
        return f"<MaintenanceTask {self.id} {self.status}>"


class MaintenancePart(db.Model):
    __tablename__ = "maintenance_parts"

    id = db.Column(db.Integer, primary_key=True)
    maintenance_task_id = db.Column(db.String(36),
                                    db.ForeignKey("maintenance_tasks.id", ondelete="CASCADE"),
                                    nullable=False)
    part_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    task = db.relationship("MaintenanceTask", back_populates="parts")


# ========== SERVICE RECORDS ==========
class ServiceRecord(db.Model):
    __tablename__ = "service_records"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    maintenance_task_id = db.Column(db.String(36),
                                    db.ForeignKey("maintenance_tasks.id", ondelete="CASCADE"),
                                    nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    performed_by = db.Column(db.String(120), nullable=False)
    description_of_work = db.Column(db.Text, nullable=False)
    cost = db.Column(db.Numeric(10, 2))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    task = db.relationship("MaintenanceTask", back_populates="service_records")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "maintenanceTaskId": self.maintenance_task_id,
            "date": iso(self.date),
            "performedBy": self.performed_by,
            "descriptionOfWork": self.description_of_work,
            "cost": float(self.cost) if self.cost is not None else None,
            "notes": self.notes,
            "createdAt": iso(self.created_at),
        }
