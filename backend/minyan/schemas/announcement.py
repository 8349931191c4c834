"""Pydantic schemas for Announcements."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class AnnouncementCreate(BaseModel):
    title: str
    message: str
    created_by: str
    notify: bool = False  # also push to members with push enabled


class AnnouncementOut(BaseModel):
    announcement_id: str
    building_id: str
    title: str
    message: str
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AnnouncementCreated(AnnouncementOut):
    push_success_count: Optional[int] = None
    push_failure_count: Optional[int] = None
