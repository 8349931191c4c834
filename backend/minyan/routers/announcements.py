"""Announcement API routes: nested under a building."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from minyan.database import get_db
from minyan.routers.permissions import require_building, require_building_admin
from minyan.schemas.announcement import AnnouncementCreate, AnnouncementCreated, AnnouncementOut
from minyan.services import announcement_service
from minyan.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{building_id}/announcements", response_model=AnnouncementCreated, status_code=status.HTTP_201_CREATED)
def create_announcement(
    building_id: str,
    payload: AnnouncementCreate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Post an announcement (admins only); with ``notify`` also push it to members."""
    require_building_admin(db, building_id, payload.created_by)
    announcement = announcement_service.create_announcement(
        db, building_id, payload.title, payload.message, payload.created_by,
    )
    result = AnnouncementCreated.model_validate(announcement)
    if payload.notify:
        push = announcement_service.broadcast_announcement(db, announcement, notifier)
        result.push_success_count = push.success_count
        result.push_failure_count = push.failure_count
    return result


@router.get("/{building_id}/announcements", response_model=list[AnnouncementOut])
def list_announcements(building_id: str, db: Session = Depends(get_db)):
    """Announcements for a building, newest first."""
    require_building(db, building_id)
    return announcement_service.list_announcements(db, building_id)
