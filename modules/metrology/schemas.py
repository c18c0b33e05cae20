import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from schemas import ApiModel

ToolStatus = Literal["calibrated", "due_calibration", "out_of_service", "awaiting_calibration"]
CalibrationResult = Literal["pass", "fail", "adjusted"]


class ToolCreate(ApiModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    serial_number: str = Field(min_length=1)
    manufacturer: Optional[str] = None
    calibration_interval_days: int = Field(ge=1)
    last_calibration_date: Optional[dt.date] = None
    next_calibration_date: Optional[dt.date] = None
    location: Optional[str] = None
    status: Optional[ToolStatus] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None


class ToolUpdate(ApiModel):
    non_nullable = ("name", "type", "serial_number", "calibration_interval_days", "status")

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    serial_number: Optional[str] = Field(None, min_length=1)
    manufacturer: Optional[str] = None
    calibration_interval_days: Optional[int] = Field(None, ge=1)
    last_calibration_date: Optional[dt.date] = None
    next_calibration_date: Optional[dt.date] = None
    location: Optional[str] = None
    status: Optional[ToolStatus] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None


class CalibrationCreate(ApiModel):
    date: dt.date
    performed_by: str = Field(min_length=1)
    result: CalibrationResult
    notes: Optional[str] = None
    certificate_url: Optional[str] = None
    next_due_date: Optional[dt.date] = None
