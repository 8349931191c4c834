"""Single minyan events: create, list, edit, cancel, delete.

Writes accept an optional schedule hub; viewers of the affected
(building, day) are notified after the commit.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

import pytz
from sqlalchemy.orm import Session

from minyan.database import transaction, utcnow
from minyan.models.attendance import Attendance
from minyan.models.building import Building
from minyan.models.minyan_event import MinyanEvent, Nusach, PrayerType

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"date", "time", "prayer_type", "nusach", "location", "notes"}


def notify_schedule(db: Session, hub, keys: Iterable[tuple[str, str]]) -> None:
    """Push a fresh day listing for each (building_id, date) key."""
    if hub is None:
        return
    for key in sorted(keys):
        hub.notify(db, key)


def create_event(
    db: Session,
    building_id: str,
    date: str,
    time: str,
    prayer_type: PrayerType,
    created_by: str,
    nusach: Nusach = Nusach.ashkenaz,
    location: str = "",
    notes: Optional[str] = None,
    hub=None,
) -> MinyanEvent:
    event = MinyanEvent(
        building_id=building_id,
        date=date,
        time=time,
        prayer_type=PrayerType(prayer_type),
        nusach=Nusach(nusach),
        location=location,
        notes=notes,
        is_cancelled=False,
        created_by=created_by,
    )
    with transaction(db, "create minyan"):
        db.add(event)
    db.refresh(event)
    logger.info("Created %s minyan %s on %s %s in building %s", event.prayer_type.value, event.event_id, date, time, building_id)
    notify_schedule(db, hub, [(building_id, date)])
    return event


def get_event(db: Session, event_id: str) -> Optional[MinyanEvent]:
    return db.query(MinyanEvent).filter(MinyanEvent.event_id == event_id).first()


def list_events_for_building(
    db: Session,
    building_id: str,
    date: Optional[str] = None,
    include_cancelled: bool = True,
) -> list[MinyanEvent]:
    """Events ordered by date then time; optionally a single day."""
    query = db.query(MinyanEvent).filter(MinyanEvent.building_id == building_id)
    if date:
        query = query.filter(MinyanEvent.date == date)
    if not include_cancelled:
        query = query.filter(MinyanEvent.is_cancelled.is_(False))
    return query.order_by(MinyanEvent.date, MinyanEvent.time).all()


def update_event(db: Session, event: MinyanEvent, updates: dict[str, Any], hub=None) -> MinyanEvent:
    """Partial update, last writer wins. A moved event refreshes both days."""
    old_key = (event.building_id, event.date)
    with transaction(db, f"update minyan {event.event_id}"):
        for field, value in updates.items():
            if field in _EDITABLE_FIELDS:
                setattr(event, field, value)
        event.updated_at = utcnow()
    db.refresh(event)
    logger.info("Updated minyan %s (%s)", event.event_id, ", ".join(sorted(updates)))
    notify_schedule(db, hub, {old_key, (event.building_id, event.date)})
    return event


def cancel_event(db: Session, event: MinyanEvent, hub=None) -> MinyanEvent:
    """Mark cancelled. The event and its RSVPs stay in place."""
    with transaction(db, f"cancel minyan {event.event_id}"):
        event.is_cancelled = True
        event.updated_at = utcnow()
    db.refresh(event)
    logger.info("Cancelled minyan %s", event.event_id)
    notify_schedule(db, hub, [(event.building_id, event.date)])
    return event


def delete_event(db: Session, event: MinyanEvent, hub=None) -> None:
    """Hard delete together with its attendance rows."""
    event_id, key = event.event_id, (event.building_id, event.date)
    with transaction(db, f"delete minyan {event_id}"):
        db.query(Attendance).filter(Attendance.event_id == event_id).delete(synchronize_session=False)
        db.delete(event)
    logger.info("Deleted minyan %s", event_id)
    notify_schedule(db, hub, [key])


def local_today(tz_name: str, now: Optional[datetime] = None) -> str:
    """Today's YYYY-MM-DD key as seen from the building's timezone."""
    tz = pytz.timezone(tz_name)
    if now is None:
        return datetime.now(tz).date().isoformat()
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz).date().isoformat()


def todays_events(db: Session, building: Building, now: Optional[datetime] = None) -> list[MinyanEvent]:
    today = local_today(building.timezone, now)
    return list_events_for_building(db, building.building_id, date=today, include_cancelled=False)
