"""Pydantic schemas for RSVPs and the derived attendance summary."""
from datetime import datetime
from pydantic import BaseModel

from minyan.models.attendance import RSVPStatus


class RSVPPayload(BaseModel):
    event_id: str
    user_id: str
    user_name: str
    status: RSVPStatus


class AttendanceOut(BaseModel):
    attendance_id: str
    event_id: str
    user_id: str
    user_name: str
    status: RSVPStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AttendeeOut(BaseModel):
    id: str
    name: str
    status: RSVPStatus


class AttendanceSummary(BaseModel):
    """Projection of all RSVPs for one event. Never stored."""

    event_id: str
    yes_count: int
    maybe_count: int
    no_count: int
    has_minyan: bool
    quorum_size: int
    attendees: list[AttendeeOut] = []
