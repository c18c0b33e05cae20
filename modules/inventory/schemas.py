from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from schemas import ApiModel


class ConsumableCreate(ApiModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    material: Optional[str] = None
    size: Optional[str] = None
    quantity: int = Field(0, ge=0)
    min_quantity: int = Field(0, ge=0)
    location: str = Field(min_length=1)
    tool_life_hours: Optional[float] = Field(None, ge=0)
    remaining_tool_life_hours: Optional[float] = Field(None, ge=0)
    last_used_date: Optional[date] = None
    end_of_life_date: Optional[date] = None
    supplier: Optional[str] = None
    cost_per_unit: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    notes: Optional[str] = None


class ConsumableUpdate(ApiModel):
    non_nullable = ("name", "type", "quantity", "min_quantity", "location")

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    material: Optional[str] = None
    size: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    min_quantity: Optional[int] = Field(None, ge=0)
    location: Optional[str] = Field(None, min_length=1)
    tool_life_hours: Optional[float] = Field(None, ge=0)
    remaining_tool_life_hours: Optional[float] = Field(None, ge=0)
    last_used_date: Optional[date] = None
    end_of_life_date: Optional[date] = None
    supplier: Optional[str] = None
    cost_per_unit: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    notes: Optional[str] = None


class QuantityUpdate(ApiModel):
    quantity: int = Field(ge=0)
