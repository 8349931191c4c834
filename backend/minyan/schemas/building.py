"""Pydantic schemas for Buildings and their membership."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class BuildingCreate(BaseModel):
    name: str
    address: str = ""
    created_by: str
    timezone: Optional[str] = None
    quorum_size: Optional[int] = Field(None, ge=1)


class BuildingUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    timezone: Optional[str] = None
    quorum_size: Optional[int] = Field(None, ge=1)


class BuildingOut(BaseModel):
    building_id: str
    name: str
    address: str
    invite_code: str
    timezone: str
    quorum_size: Optional[int] = None
    created_by: str
    created_at: datetime
    members: list[BuildingMemberOut] = []

    model_config = {"from_attributes": True}


class BuildingMemberAdd(BaseModel):
    user_id: str
    role: str = "member"


class BuildingJoin(BaseModel):
    user_id: str
    invite_code: str


class BuildingMemberOut(BaseModel):
    user_id: str
    role: str
    joined_at: datetime

    model_config = {"from_attributes": True}


# Rebuild BuildingOut now that BuildingMemberOut is defined
BuildingOut.model_rebuild()
