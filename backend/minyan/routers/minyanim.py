"""Minyan event API routes: single events, recurring series, and the live day listing."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from minyan.database import get_db
from minyan.models.minyan_event import MinyanEvent
from minyan.routers.live import stream_updates
from minyan.routers.permissions import require_building, require_building_admin
from minyan.schemas.minyan_event import (
    MinyanEventCreate, MinyanEventOut, MinyanEventUpdate, RecurrenceCreate, RecurrenceOut, RecurrenceResult,
)
from minyan.services import building_service, minyan_service, recurrence_service
from minyan.services.realtime import ScheduleHub, get_schedule_hub

logger = logging.getLogger(__name__)
router = APIRouter()

DATE_KEY = r"^\d{4}-\d{2}-\d{2}$"


def _require_event(db: Session, event_id: str) -> MinyanEvent:
    event = minyan_service.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Minyan not found")
    return event


@router.post("/", response_model=MinyanEventOut, status_code=status.HTTP_201_CREATED)
def create_minyan(
    payload: MinyanEventCreate,
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Schedule a single minyan (admins only)."""
    require_building_admin(db, payload.building_id, payload.created_by)
    return minyan_service.create_event(
        db,
        building_id=payload.building_id,
        date=payload.date,
        time=payload.time,
        prayer_type=payload.prayer_type,
        nusach=payload.nusach,
        location=payload.location,
        notes=payload.notes,
        created_by=payload.created_by,
        hub=hub,
    )


@router.get("/", response_model=list[MinyanEventOut])
def list_minyanim(
    building_id: str = Query(...),
    date: Optional[str] = Query(None, pattern=DATE_KEY),
    include_cancelled: bool = Query(True),
    db: Session = Depends(get_db),
):
    """List a building's minyanim ordered by date and time."""
    require_building(db, building_id)
    return minyan_service.list_events_for_building(
        db, building_id, date=date, include_cancelled=include_cancelled,
    )


@router.websocket("/live")
async def live_schedule(
    websocket: WebSocket,
    building_id: str = Query(...),
    date: str = Query(..., pattern=DATE_KEY),
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Push a building's minyanim for one day on connect, then after every change to that day."""
    building = await run_in_threadpool(building_service.get_building, db, building_id)
    if not building:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await stream_updates(
        websocket, db, hub, (building_id, date),
        lambda events: [event.model_dump(mode="json") for event in events],
    )


@router.post("/recurring", response_model=RecurrenceResult, status_code=status.HTTP_201_CREATED)
def create_recurring(
    payload: RecurrenceCreate,
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Expand a weekly rule into one minyan per matching date (admins only)."""
    require_building_admin(db, payload.building_id, payload.created_by)
    pattern, event_ids = recurrence_service.materialize_recurrence(
        db,
        building_id=payload.building_id,
        prayer_type=payload.prayer_type,
        nusach=payload.nusach,
        time=payload.time,
        location=payload.location,
        weekdays=payload.weekdays,
        start_date=payload.start_date,
        end_date=payload.end_date,
        created_by=payload.created_by,
        hub=hub,
    )
    return RecurrenceResult(recurrence_id=pattern.recurrence_id, event_ids=event_ids, count=len(event_ids))


@router.get("/recurring/{recurrence_id}", response_model=RecurrenceOut)
def get_recurrence(recurrence_id: str, db: Session = Depends(get_db)):
    """Fetch the rule a series was generated from."""
    pattern = recurrence_service.get_pattern(db, recurrence_id)
    if not pattern:
        raise HTTPException(status_code=404, detail="Recurrence not found")
    return pattern


@router.get("/recurring/{recurrence_id}/events", response_model=list[MinyanEventOut])
def list_recurrence_events(recurrence_id: str, db: Session = Depends(get_db)):
    """All minyanim still tagged with the series."""
    return recurrence_service.list_series_events(db, recurrence_id)


@router.delete("/recurring/{recurrence_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recurrence(
    recurrence_id: str,
    actor_user_id: str = Query(..., description="ID of the admin deleting the series"),
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Delete a whole series: its minyanim, their RSVPs, and the rule (admins only)."""
    pattern = recurrence_service.get_pattern(db, recurrence_id)
    if not pattern:
        raise HTTPException(status_code=404, detail="Recurrence not found")
    require_building_admin(db, pattern.building_id, actor_user_id)
    recurrence_service.delete_series(db, recurrence_id, hub=hub)


@router.get("/{event_id}", response_model=MinyanEventOut)
def get_minyan(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single minyan by ID."""
    return _require_event(db, event_id)


@router.patch("/{event_id}", response_model=MinyanEventOut)
def update_minyan(
    event_id: str,
    payload: MinyanEventUpdate,
    actor_user_id: str = Query(..., description="ID of the admin performing the update"),
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Edit a minyan (admins only, last writer wins)."""
    event = _require_event(db, event_id)
    require_building_admin(db, event.building_id, actor_user_id)
    return minyan_service.update_event(db, event, payload.model_dump(exclude_unset=True), hub=hub)


@router.post("/{event_id}/cancel", response_model=MinyanEventOut)
def cancel_minyan(
    event_id: str,
    actor_user_id: str = Query(..., description="ID of the admin cancelling"),
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Mark a minyan cancelled (admins only)."""
    event = _require_event(db, event_id)
    require_building_admin(db, event.building_id, actor_user_id)
    if event.is_cancelled:
        raise HTTPException(status_code=400, detail="Minyan is already cancelled")
    return minyan_service.cancel_event(db, event, hub=hub)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_minyan(
    event_id: str,
    actor_user_id: str = Query(..., description="ID of the admin deleting"),
    db: Session = Depends(get_db),
    hub: ScheduleHub = Depends(get_schedule_hub),
):
    """Delete a single minyan and its RSVPs (admins only)."""
    event = _require_event(db, event_id)
    require_building_admin(db, event.building_id, actor_user_id)
    minyan_service.delete_event(db, event, hub=hub)
