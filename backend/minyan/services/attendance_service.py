"""Attendance service: RSVP upserts and the summary projection built from them."""
import logging
from collections import Counter
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from minyan.database import transaction, utcnow
from minyan.models.attendance import Attendance, RSVPStatus
from minyan.models.building import Building
from minyan.models.minyan_event import MinyanEvent
from minyan.schemas.attendance import AttendanceSummary, AttendeeOut
from minyan.services.quorum import has_minyan, quorum_size_for

logger = logging.getLogger(__name__)


def get_attendance(db: Session, event_id: str, user_id: str) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .filter(Attendance.event_id == event_id, Attendance.user_id == user_id)
        .first()
    )


def list_event_attendance(db: Session, event_id: str) -> list[Attendance]:
    return db.query(Attendance).filter(Attendance.event_id == event_id).all()


def set_attendance(
    db: Session,
    event_id: str,
    user_id: str,
    user_name: str,
    status: RSVPStatus,
    hub=None,
) -> Attendance:
    """Create or overwrite the user's RSVP for the event, then notify live subscribers.

    One record per (event, user): a repeat call updates status and updated_at in place.
    """
    status = RSVPStatus(status)
    with transaction(db, f"save attendance of user {user_id} for minyan {event_id}"):
        record = get_attendance(db, event_id, user_id)
        if record:
            record.status = status
            record.updated_at = utcnow()
        else:
            record = Attendance(
                event_id=event_id,
                user_id=user_id,
                user_name=user_name,
                status=status,
            )
            db.add(record)
    db.refresh(record)

    logger.info("User %s RSVP'd '%s' to minyan %s", user_id, status.value, event_id)
    if hub is not None:
        hub.notify(db, event_id)
    return record


def build_summary(event_id: str, records: Iterable[Attendance], quorum_size: int) -> AttendanceSummary:
    """Partition the records by status. Attendee order follows the input."""
    records = list(records)
    counts = Counter(r.status for r in records)
    yes_count = counts[RSVPStatus.yes]
    return AttendanceSummary(
        event_id=event_id,
        yes_count=yes_count,
        maybe_count=counts[RSVPStatus.maybe],
        no_count=counts[RSVPStatus.no],
        has_minyan=has_minyan(yes_count, quorum_size),
        quorum_size=quorum_size,
        attendees=[AttendeeOut(id=r.user_id, name=r.user_name, status=r.status) for r in records],
    )


def get_attendance_summary(db: Session, event_id: str) -> AttendanceSummary:
    building = (
        db.query(Building)
        .join(MinyanEvent, MinyanEvent.building_id == Building.building_id)
        .filter(MinyanEvent.event_id == event_id)
        .first()
    )
    return build_summary(event_id, list_event_attendance(db, event_id), quorum_size_for(building))
