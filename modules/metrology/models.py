# -*- coding: utf-8 -*-
"""
Metrology models.

- MetrologyTool  : a measuring instrument with a calibration interval.
- CalibrationLog : one calibration event. Logs are history: they are appended,
                    never edited or removed (see CalibrationLogRepository).

Tool status values:
- calibrated           : next calibration date is outside the due-soon window
- due_calibration      : due soon or past due
- awaiting_calibration : no next calibration date on record
- out_of_service       : set by hand or by a failed calibration; never changed automatically
"""
from datetime import datetime

from extensions import db
from models import TimestampMixin, new_id
from utils import iso

TOOL_STATUSES = ("calibrated", "due_calibration", "out_of_service", "awaiting_calibration")
CALIBRATION_RESULTS = ("pass", "fail", "adjusted")


class MetrologyTool(TimestampMixin, db.Model):
    __tablename__ = "metrology_tools"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(120), nullable=False)
    serial_number = db.Column(db.String(120), unique=True, nullable=False)
    manufacturer = db.Column(db.String(120))
    calibration_interval_days = db.Column(db.Integer, nullable=False)
    last_calibration_date = db.Column(db.Date)
    next_calibration_date = db.Column(db.Date, index=True)
    location = db.Column(db.String(120))
    status = db.Column(db.String(32), nullable=False, default="calibrated")
    image_url = db.Column(db.String(255))
    notes = db.Column(db.Text)

    calibration_logs = db.relationship("CalibrationLog", back_populates="tool",
                                       cascade="all, delete-orphan",
                                       order_by="CalibrationLog.date.desc()")

    def to_dict(self, due_status: str | None = None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "serialNumber": self.serial_number,
            "manufacturer": self.manufacturer,
            "calibrationIntervalDays": self.calibration_interval_days,
            "lastCalibrationDate": iso(self.last_calibration_date),
            "nextCalibrationDate": iso(self.next_calibration_date),
            "calibrationLogIds": [log.id for log in self.calibration_logs],
            "location": self.location,
            "status": self.status,
            "imageUrl": self.image_url,
            "notes": self.notes,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if due_status is not None:
            data["dueStatus"] = due_status
        return data


class CalibrationLog(db.Model):
    __tablename__ = "calibration_logs"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    metrology_tool_id = db.Column(db.String(36),
                                  db.ForeignKey("metrology_tools.id", ondelete="CASCADE"),
                                  nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    performed_by = db.Column(db.String(120), nullable=False)
    result = db.Column(db.String(16), nullable=False)       # pass | fail | adjusted
    notes = db.Column(db.Text)
    certificate_url = db.Column(db.String(255))
    next_due_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    tool = db.relationship("MetrologyTool", back_populates="calibration_logs")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "metrologyToolId": self.metrology_tool_id,
            "date": iso(self.date),
            "performedBy": self.performed_by,
            "result": self.result,
            "notes": self.notes,
            "certificateUrl": self.certificate_url,
            "nextDueDate": iso(self.next_due_date),
            "createdAt": iso(self.created_at),
        }
