"""Pydantic schemas for minyan events and recurrence patterns."""
from datetime import date, datetime
from typing import Annotated, Optional
from pydantic import BaseModel, Field

from minyan.models.minyan_event import Nusach, PrayerType

DateKey = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]
TimeOfDay = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


class MinyanEventCreate(BaseModel):
    building_id: str
    date: DateKey
    time: TimeOfDay
    prayer_type: PrayerType
    nusach: Nusach = Nusach.ashkenaz
    location: str = ""
    notes: Optional[str] = None
    created_by: str


class MinyanEventUpdate(BaseModel):
    date: Optional[DateKey] = None
    time: Optional[TimeOfDay] = None
    prayer_type: Optional[PrayerType] = None
    nusach: Optional[Nusach] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class MinyanEventOut(BaseModel):
    event_id: str
    building_id: str
    date: str
    time: str
    prayer_type: PrayerType
    nusach: Nusach
    location: str
    recurrence_id: Optional[str] = None
    is_cancelled: bool
    notes: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RecurrenceCreate(BaseModel):
    """Weekly rule expanded into one event per matching date.

    ``weekdays`` uses 0 = Sunday … 6 = Saturday. Emptiness and range order
    are checked by the service so they surface as a 400, not a 422.
    """

    building_id: str
    prayer_type: PrayerType
    nusach: Nusach = Nusach.ashkenaz
    time: TimeOfDay
    location: str = ""
    weekdays: list[int]
    start_date: date
    end_date: date
    created_by: str


class RecurrenceOut(BaseModel):
    recurrence_id: str
    building_id: str
    prayer_type: PrayerType
    nusach: Nusach
    time: str
    location: str
    weekdays: list[int]
    start_date: date
    end_date: date
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RecurrenceResult(BaseModel):
    recurrence_id: str
    event_ids: list[str]
    count: int
