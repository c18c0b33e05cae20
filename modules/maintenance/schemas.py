import datetime as dt
from typing import List, Literal, Optional

from pydantic import Field

from schemas import ApiModel

TaskStatus = Literal["pending", "in_progress", "completed", "overdue", "skipped"]


class PartUsed(ApiModel):
    part_name: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class TaskCreate(ApiModel):
    equipment_id: str = Field(min_length=1)
    description: str = Field(min_length=1)
    frequency_days: Optional[int] = Field(None, ge=0)
    last_performed_date: Optional[dt.date] = None
    next_due_date: Optional[dt.date] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    status: TaskStatus = "pending"
    parts_used: List[PartUsed] = Field(default_factory=list)


class TaskUpdate(ApiModel):
    non_nullable = ("equipment_id", "description", "status", "parts_used")

    equipment_id: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    frequency_days: Optional[int] = Field(None, ge=0)
    last_performed_date: Optional[dt.date] = None
    next_due_date: Optional[dt.date] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[TaskStatus] = None
    parts_used: Optional[List[PartUsed]] = None


class ServiceRecordCreate(ApiModel):
    """Body of the completion endpoint."""

    date: Optional[dt.date] = None
    performed_by: str = Field(min_length=1)
    description_of_work: str = Field(min_length=1)
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class ServiceRecordNew(ApiModel):
    """A service record logged on its own, outside the completion flow."""

    maintenance_task_id: str = Field(min_length=1)
    date: dt.date
    performed_by: str = Field(min_length=1)
    description_of_work: str = Field(min_length=1)
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class ServiceRecordUpdate(ApiModel):
    non_nullable = ("date", "performed_by", "description_of_work")

    date: Optional[dt.date] = None
    performed_by: Optional[str] = Field(None, min_length=1)
    description_of_work: Optional[str] = Field(None, min_length=1)
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
