from datetime import date
from typing import Literal, Optional

from pydantic import Field

from schemas import ApiModel

EquipmentStatus = Literal["operational", "maintenance", "decommissioned"]


class EquipmentCreate(ApiModel):
    name: str = Field(min_length=1)
    model: str = Field(min_length=1)
    serial_number: str = Field(min_length=1)
    location: str = Field(min_length=1)
    purchase_date: Optional[date] = None
    status: EquipmentStatus = "operational"
    image_url: Optional[str] = None
    notes: Optional[str] = None


class EquipmentUpdate(ApiModel):
    non_nullable = ("name", "model", "serial_number", "location", "status")

    name: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    serial_number: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    purchase_date: Optional[date] = None
    status: Optional[EquipmentStatus] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
