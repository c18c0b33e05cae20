"""Readings and error codes reported by a machine's controller."""

import math

from extensions import db
from models import TimestampMixin, new_id
from utils import iso


def metric_value_from_text(raw: str | None):
    """Stored values are text; hand numbers back as numbers."""
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return raw
    return value if math.isfinite(value) else raw


class MachineLogEntry(TimestampMixin, db.Model):
    __tablename__ = "machine_log_entries"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    equipment_id = db.Column(db.String(36),
                             db.ForeignKey("equipment.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    timestamp = db.Column(db.DateTime, nullable=False, index=True)
    error_code = db.Column(db.String(64), index=True)
    metric_name = db.Column(db.String(120), nullable=False, index=True)
    metric_value = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text)

    equipment = db.relationship("Equipment", back_populates="machine_logs")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "equipmentId": self.equipment_id,
            "timestamp": iso(self.timestamp),
            "errorCode": self.error_code,
            "metricName": self.metric_name,
            "metricValue": metric_value_from_text(self.metric_value),
            "notes": self.notes,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<MachineLogEntry {self.equipment_id} {self.metric_name}={self.metric_value}>"
