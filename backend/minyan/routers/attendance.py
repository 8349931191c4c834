"""Attendance / RSVP API routes, including the live summary feed."""
import logging
from fastapi import APIRouter, Depends, HTTPException, WebSocket, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from minyan.database import get_db
from minyan.routers.live import stream_updates
from minyan.schemas.attendance import AttendanceOut, AttendanceSummary, RSVPPayload
from minyan.services import attendance_service, minyan_service
from minyan.services.realtime import AttendanceHub, get_hub

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_event(db: Session, event_id: str):
    event = minyan_service.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Minyan not found")
    return event


@router.post("/rsvp", response_model=AttendanceOut)
def set_rsvp(
    payload: RSVPPayload,
    db: Session = Depends(get_db),
    hub: AttendanceHub = Depends(get_hub),
):
    """Set or update a user's RSVP for a minyan; live viewers get a fresh summary."""
    _require_event(db, payload.event_id)
    return attendance_service.set_attendance(
        db,
        event_id=payload.event_id,
        user_id=payload.user_id,
        user_name=payload.user_name,
        status=payload.status,
        hub=hub,
    )


@router.get("/{event_id}", response_model=list[AttendanceOut])
def list_attendance(event_id: str, db: Session = Depends(get_db)):
    """Every RSVP recorded for a minyan."""
    _require_event(db, event_id)
    return attendance_service.list_event_attendance(db, event_id)


@router.get("/{event_id}/summary", response_model=AttendanceSummary)
def attendance_summary(event_id: str, db: Session = Depends(get_db)):
    """Yes/maybe/no counts, quorum flag, and roster."""
    _require_event(db, event_id)
    return attendance_service.get_attendance_summary(db, event_id)


@router.get("/{event_id}/users/{user_id}", response_model=AttendanceOut)
def get_user_attendance(event_id: str, user_id: str, db: Session = Depends(get_db)):
    """One user's RSVP for a minyan."""
    record = attendance_service.get_attendance(db, event_id, user_id)
    if not record:
        raise HTTPException(status_code=404, detail="No RSVP recorded")
    return record


@router.websocket("/{event_id}/live")
async def live_attendance(
    websocket: WebSocket,
    event_id: str,
    db: Session = Depends(get_db),
    hub: AttendanceHub = Depends(get_hub),
):
    """Push the current summary on connect, then again after every RSVP change."""
    event = await run_in_threadpool(minyan_service.get_event, db, event_id)
    if not event:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await stream_updates(websocket, db, hub, event_id, lambda summary: summary.model_dump(mode="json"))
