from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, constr, field_validator, model_validator

from app.pricing.types import OrderType

Clock = constr(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class TimeSlotIn(BaseModel):
    start: Clock
    end: Clock


class ScheduleFields(BaseModel):
    """Where and when a discount or upsell may fire."""
    order_types: List[OrderType]
    location_ids: List[str] = []
    active_days: List[Weekday] = []
    active_time_slots: List[TimeSlotIn] = []
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True

    @field_validator("active_days", mode="before")
    @classmethod
    def _lower_days(cls, v):
        if isinstance(v, list):
            return [d.strip().lower() if isinstance(d, str) else d for d in v]
        return v

    @field_validator("order_types")
    @classmethod
    def _need_order_type(cls, v):
        if not v:
            raise ValueError("at least one order type is required")
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def _date_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class StatusRequest(BaseModel):
    is_active: bool
