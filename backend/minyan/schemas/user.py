"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from minyan.models.minyan_event import Nusach, PrayerType


class UserCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    whatsapp_opt_in: bool = False
    preferred_prayers: list[PrayerType] = []
    preferred_nusach: Optional[Nusach] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    fcm_token: Optional[str] = None
    whatsapp_opt_in: Optional[bool] = None
    notify_push: Optional[bool] = None
    notify_whatsapp: Optional[bool] = None
    notify_email: Optional[bool] = None
    reminder_minutes: Optional[int] = None
    preferred_prayers: Optional[list[PrayerType]] = None
    preferred_nusach: Optional[Nusach] = None


class UserOut(BaseModel):
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    whatsapp_opt_in: bool
    notify_push: bool
    notify_whatsapp: bool
    notify_email: bool
    reminder_minutes: int
    preferred_prayers: Optional[list[PrayerType]] = None
    preferred_nusach: Optional[Nusach] = None
    building_ids: list[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
