"""Messaging API routes: direct push and WhatsApp sends."""
import logging
from fastapi import APIRouter, Depends

from minyan.schemas.notification import PushRequest, PushResponse, WhatsAppRequest, WhatsAppResponse
from minyan.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/push", response_model=PushResponse)
def send_push(payload: PushRequest, notifier: NotificationService = Depends(get_notification_service)):
    """Send a push notification to each device token; reports per-token outcome counts."""
    result = notifier.send_push(
        payload.tokens, payload.payload.title, payload.payload.body, data=payload.payload.data,
    )
    return PushResponse(success_count=result.success_count, failure_count=result.failure_count)


@router.post("/whatsapp", response_model=WhatsAppResponse)
def send_whatsapp(payload: WhatsAppRequest, notifier: NotificationService = Depends(get_notification_service)):
    """Send a single WhatsApp message."""
    sid = notifier.send_whatsapp(payload.phone_number, payload.message)
    return WhatsAppResponse(message_sid=sid)
