"""Pydantic schemas for the messaging endpoints."""
from typing import Optional
from pydantic import BaseModel, Field


class PushPayload(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    data: dict[str, str] = {}


class PushRequest(BaseModel):
    tokens: list[str] = Field(..., min_length=1)
    payload: PushPayload


class PushResponse(BaseModel):
    success: bool = True
    success_count: int
    failure_count: int


class WhatsAppRequest(BaseModel):
    phone_number: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class WhatsAppResponse(BaseModel):
    success: bool = True
    message_sid: Optional[str] = None
