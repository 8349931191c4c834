"""Recurring minyanim: expanding a weekly rule into dated events, and removing a series.

Materialization:
- Validation and date expansion happen before any write; a rejected rule
  leaves nothing behind
- The pattern row is committed first, then every generated event in one
  transaction, so a series is either fully present or absent
- A failure in the event batch leaves the committed pattern with no events;
  that is logged as a partial materialization and surfaced, not repaired

Series deletion removes the events, their attendance, and the pattern in a
single transaction.
"""
import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from minyan.database import transaction
from minyan.errors import PersistenceError, ValidationError
from minyan.models.attendance import Attendance
from minyan.models.minyan_event import MinyanEvent, Nusach, PrayerType
from minyan.models.recurrence import RecurrencePattern
from minyan.services.minyan_service import notify_schedule

logger = logging.getLogger(__name__)


def weekday_index(day: date) -> int:
    """0 = Sunday … 6 = Saturday."""
    return day.isoweekday() % 7


def matching_dates(weekdays: Iterable[int], start: date, end: date) -> list[date]:
    """Every date in [start, end] whose weekday is in ``weekdays``, ascending."""
    wanted = set(weekdays)
    dates = []
    # Never steps past ``end``, which may be date.max
    for offset in range((end - start).days + 1):
        day = start + timedelta(days=offset)
        if weekday_index(day) in wanted:
            dates.append(day)
    return dates


def validate_recurrence(weekdays: list[int], start: date, end: date) -> None:
    if not weekdays:
        raise ValidationError("At least one weekday must be selected")
    bad = [d for d in weekdays if not 0 <= d <= 6]
    if bad:
        raise ValidationError(f"Weekdays must be between 0 (Sunday) and 6 (Saturday), got {bad}")
    if start > end:
        raise ValidationError(f"Start date {start.isoformat()} is after end date {end.isoformat()}")


def materialize_recurrence(
    db: Session,
    building_id: str,
    prayer_type: PrayerType,
    nusach: Nusach,
    time: str,
    location: str,
    weekdays: list[int],
    start_date: date,
    end_date: date,
    created_by: str,
    hub=None,
) -> tuple[RecurrencePattern, list[str]]:
    """Persist the pattern and one event per matching date.

    Returns the pattern and the created event ids in ascending date order.
    Schedule viewers of every affected day are notified after the batch commits.
    """
    validate_recurrence(weekdays, start_date, end_date)
    days = matching_dates(weekdays, start_date, end_date)

    pattern = RecurrencePattern(
        building_id=building_id,
        prayer_type=PrayerType(prayer_type),
        nusach=Nusach(nusach),
        time=time,
        location=location,
        weekdays=sorted(set(weekdays)),
        start_date=start_date,
        end_date=end_date,
        created_by=created_by,
    )
    with transaction(db, "save recurrence pattern"):
        db.add(pattern)

    recurrence_id = pattern.recurrence_id
    events = [
        MinyanEvent(
            building_id=building_id,
            date=day.isoformat(),
            time=time,
            prayer_type=pattern.prayer_type,
            nusach=pattern.nusach,
            location=location,
            recurrence_id=recurrence_id,
            is_cancelled=False,
            created_by=created_by,
        )
        for day in days
    ]

    try:
        db.add_all(events)
        db.flush()
        event_ids = [ev.event_id for ev in events]
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Partial materialization: pattern %s saved but its %d events were not; manual cleanup required",
            recurrence_id, len(events),
        )
        raise PersistenceError(
            f"Recurrence {recurrence_id} was saved but its events could not be created"
        ) from exc

    db.refresh(pattern)
    logger.info(
        "Materialized recurrence %s: %d events from %s to %s on weekdays %s",
        recurrence_id, len(event_ids), start_date, end_date, pattern.weekdays,
    )
    notify_schedule(db, hub, {(building_id, day.isoformat()) for day in days})
    return pattern, event_ids


def get_pattern(db: Session, recurrence_id: str) -> Optional[RecurrencePattern]:
    return db.query(RecurrencePattern).filter(RecurrencePattern.recurrence_id == recurrence_id).first()


def list_series_events(db: Session, recurrence_id: str) -> list[MinyanEvent]:
    return (
        db.query(MinyanEvent)
        .filter(MinyanEvent.recurrence_id == recurrence_id)
        .order_by(MinyanEvent.date, MinyanEvent.time)
        .all()
    )


def delete_series(db: Session, recurrence_id: str, hub=None) -> int:
    """Delete every event generated from the pattern, their attendance, and the pattern.

    Returns the number of events removed. All-or-nothing.
    """
    with transaction(db, f"delete recurring series {recurrence_id}"):
        rows = (
            db.query(MinyanEvent.event_id, MinyanEvent.building_id, MinyanEvent.date)
            .filter(MinyanEvent.recurrence_id == recurrence_id)
            .all()
        )
        event_ids = [row.event_id for row in rows]
        if event_ids:
            db.query(Attendance).filter(Attendance.event_id.in_(event_ids)).delete(synchronize_session=False)
            db.query(MinyanEvent).filter(MinyanEvent.event_id.in_(event_ids)).delete(synchronize_session=False)
        db.query(RecurrencePattern).filter(
            RecurrencePattern.recurrence_id == recurrence_id
        ).delete(synchronize_session=False)

    db.expire_all()
    logger.info("Deleted recurring series %s (%d events)", recurrence_id, len(event_ids))
    notify_schedule(db, hub, {(row.building_id, row.date) for row in rows})
    return len(event_ids)
