"""Announcements: stored per building, optionally pushed to members."""
import logging

from sqlalchemy.orm import Session

from minyan.database import transaction
from minyan.models.announcement import Announcement
from minyan.models.building import BuildingMember
from minyan.models.user import User
from minyan.services.notification_service import NotificationService, PushResult

logger = logging.getLogger(__name__)


def create_announcement(db: Session, building_id: str, title: str, message: str, created_by: str) -> Announcement:
    announcement = Announcement(building_id=building_id, title=title, message=message, created_by=created_by)
    with transaction(db, f"create announcement in building {building_id}"):
        db.add(announcement)
    db.refresh(announcement)
    logger.info("Announcement %s posted to building %s by %s", announcement.announcement_id, building_id, created_by)
    return announcement


def list_announcements(db: Session, building_id: str) -> list[Announcement]:
    """Newest first."""
    return (
        db.query(Announcement)
        .filter(Announcement.building_id == building_id)
        .order_by(Announcement.created_at.desc())
        .all()
    )


def push_tokens_for_building(db: Session, building_id: str) -> list[str]:
    """Device tokens of members who have push enabled."""
    rows = (
        db.query(User.fcm_token)
        .join(BuildingMember, BuildingMember.user_id == User.user_id)
        .filter(
            BuildingMember.building_id == building_id,
            User.notify_push.is_(True),
            User.fcm_token.isnot(None),
        )
        .all()
    )
    return [row.fcm_token for row in rows if row.fcm_token]


def broadcast_announcement(db: Session, announcement: Announcement, notifier: NotificationService) -> PushResult:
    tokens = push_tokens_for_building(db, announcement.building_id)
    if not tokens:
        logger.info("No push recipients for announcement %s", announcement.announcement_id)
        return PushResult(success_count=0, failure_count=0)
    return notifier.send_push(
        tokens,
        announcement.title,
        announcement.message,
        data={"type": "announcement", "building_id": announcement.building_id},
    )
