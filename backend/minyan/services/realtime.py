"""Live views: in-process observer registries.

Writers call ``notify`` after their transaction commits; every subscriber of
that key receives the same freshly recomputed snapshot. Snapshots are
recomputed per change, not maintained incrementally. Delivery order across
subscribers is unspecified.

Two registries exist:
- ``AttendanceHub`` keyed by event id, delivering ``AttendanceSummary``
- ``ScheduleHub`` keyed by ``(building_id, date)``, delivering that day's minyanim
"""
import itertools
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Hashable, Optional

from sqlalchemy.orm import Session

from minyan.schemas.minyan_event import MinyanEventOut
from minyan.services.attendance_service import get_attendance_summary
from minyan.services.minyan_service import list_events_for_building

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class SubscriptionHub:
    """Per-key subscriber registry.

    Registration, unsubscription and delivery share one re-entrant lock, so
    once ``unsubscribe`` returns the callback is never invoked again, and
    snapshots are delivered in the order they were computed.
    """

    def __init__(self, summarize: Callable[[Session, Any], Any]):
        self._summarize = summarize
        self._subscribers: dict[Hashable, dict[int, Callback]] = defaultdict(dict)
        self._tokens = itertools.count(1)
        self._lock = threading.RLock()

    def subscribe(self, db: Session, key: Hashable, callback: Callback) -> Callable[[], None]:
        """Register ``callback`` and invoke it right away with the current snapshot.

        Returns a function that cancels the subscription; calling it twice is harmless.
        """
        with self._lock:
            token = next(self._tokens)
            self._subscribers[key][token] = callback
            self._deliver(key, callback, self._summarize(db, key))
        logger.debug("Subscriber %d attached to %s", token, key)

        def unsubscribe() -> None:
            with self._lock:
                subscribers = self._subscribers.get(key)
                if subscribers is None or subscribers.pop(token, None) is None:
                    return
                if not subscribers:
                    del self._subscribers[key]
            logger.debug("Subscriber %d detached from %s", token, key)

        return unsubscribe

    def notify(self, db: Session, key: Hashable) -> Optional[Any]:
        """Recompute the snapshot once and hand it to every subscriber of the key."""
        with self._lock:
            callbacks = list(self._subscribers.get(key, {}).values())
            if not callbacks:
                return None
            snapshot = self._summarize(db, key)
            for callback in callbacks:
                self._deliver(key, callback, snapshot)
        return snapshot

    def subscriber_count(self, key: Hashable) -> int:
        with self._lock:
            return len(self._subscribers.get(key, {}))

    @staticmethod
    def _deliver(key: Hashable, callback: Callback, snapshot: Any) -> None:
        # One broken viewer must not starve the others
        try:
            callback(snapshot)
        except Exception:
            logger.exception("Subscriber for %s raised", key)


class AttendanceHub(SubscriptionHub):
    """Live attendance summaries, keyed by event id."""

    def __init__(self, summarize=get_attendance_summary):
        super().__init__(summarize)


def day_schedule(db: Session, key: tuple[str, str]) -> list[MinyanEventOut]:
    """A building's minyanim on one day, cancelled ones included, ordered by time."""
    building_id, date = key
    events = list_events_for_building(db, building_id, date=date)
    return [MinyanEventOut.model_validate(event) for event in events]


class ScheduleHub(SubscriptionHub):
    """Live day listings, keyed by ``(building_id, date)``."""

    def __init__(self, summarize=day_schedule):
        super().__init__(summarize)


attendance_hub = AttendanceHub()
schedule_hub = ScheduleHub()


def get_hub() -> AttendanceHub:
    """FastAPI dependency for the process-wide attendance hub; overridden in tests."""
    return attendance_hub


def get_schedule_hub() -> ScheduleHub:
    """FastAPI dependency for the process-wide schedule hub; overridden in tests."""
    return schedule_hub
