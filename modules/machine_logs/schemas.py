import datetime as dt
from typing import Annotated, Optional, Union

from pydantic import AfterValidator, Field

from schemas import ApiModel


def _naive_utc(value: dt.datetime) -> dt.datetime:
    # timestamps are stored as naive UTC
    if value.tzinfo is not None:
        return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return value


def _metric_text(value) -> str:
    if isinstance(value, str) and not value:
        raise ValueError("metricValue may not be empty")
    return str(value)


UtcDateTime = Annotated[dt.datetime, AfterValidator(_naive_utc)]
MetricValue = Annotated[Union[int, float, str], AfterValidator(_metric_text)]


class LogEntryCreate(ApiModel):
    equipment_id: str = Field(min_length=1)
    timestamp: UtcDateTime
    error_code: Optional[str] = None
    metric_name: str = Field(min_length=1)
    metric_value: MetricValue
    notes: Optional[str] = None


class LogEntryUpdate(ApiModel):
    non_nullable = ("timestamp", "metric_name", "metric_value")

    timestamp: Optional[UtcDateTime] = None
    error_code: Optional[str] = None
    metric_name: Optional[str] = Field(None, min_length=1)
    metric_value: Optional[MetricValue] = None
    notes: Optional[str] = None
