"""Building management API routes: invite codes, membership, today's schedule."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from minyan.database import get_db
from minyan.models.building import BuildingRole
from minyan.models.user import User
from minyan.routers.permissions import require_building, require_building_admin
from minyan.schemas.building import (
    BuildingCreate, BuildingJoin, BuildingMemberAdd, BuildingMemberOut, BuildingOut, BuildingUpdate,
)
from minyan.schemas.minyan_event import MinyanEventOut
from minyan.services import building_service, minyan_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/", response_model=BuildingOut, status_code=status.HTTP_201_CREATED)
def create_building(payload: BuildingCreate, db: Session = Depends(get_db)):
    """Create a new building. Creator is automatically added as admin."""
    _require_user(db, payload.created_by)
    return building_service.create_building(
        db,
        name=payload.name,
        created_by=payload.created_by,
        address=payload.address,
        timezone=payload.timezone,
        quorum_size=payload.quorum_size,
    )


@router.get("/", response_model=list[BuildingOut])
def list_buildings(user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """List buildings, or only those the given user belongs to."""
    return building_service.list_buildings(db, user_id=user_id)


@router.get("/invite/{code}", response_model=BuildingOut)
def get_building_by_invite(code: str, db: Session = Depends(get_db)):
    """Resolve an invite code (case-insensitive) to its building."""
    building = building_service.get_building_by_invite_code(db, code)
    if not building:
        raise HTTPException(status_code=404, detail="Invalid invite code")
    return building


@router.post("/join", response_model=BuildingMemberOut)
def join_building(payload: BuildingJoin, db: Session = Depends(get_db)):
    """Join a building by invite code. Joining twice is a no-op."""
    building = building_service.get_building_by_invite_code(db, payload.invite_code)
    if not building:
        raise HTTPException(status_code=404, detail="Invalid invite code")
    user = _require_user(db, payload.user_id)
    return building_service.join_building(db, building, user)


@router.get("/{building_id}", response_model=BuildingOut)
def get_building(building_id: str, db: Session = Depends(get_db)):
    """Fetch a single building by ID with members."""
    return require_building(db, building_id)


@router.patch("/{building_id}", response_model=BuildingOut)
def update_building(
    building_id: str,
    payload: BuildingUpdate,
    actor_user_id: str = Query(..., description="ID of the admin performing the update"),
    db: Session = Depends(get_db),
):
    """Update name, address, timezone, or quorum size (admins only)."""
    building = require_building_admin(db, building_id, actor_user_id)
    return building_service.update_building(db, building, payload.model_dump(exclude_unset=True))


@router.get("/{building_id}/today", response_model=list[MinyanEventOut])
def todays_minyanim(building_id: str, db: Session = Depends(get_db)):
    """Non-cancelled minyanim for today's date in the building's timezone."""
    building = require_building(db, building_id)
    return minyan_service.todays_events(db, building)


@router.post("/{building_id}/members", response_model=BuildingMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(building_id: str, payload: BuildingMemberAdd, db: Session = Depends(get_db)):
    """Add a member to a building."""
    require_building(db, building_id)
    _require_user(db, payload.user_id)
    if building_service.get_membership(db, building_id, payload.user_id):
        raise HTTPException(status_code=409, detail="User is already a member of this building")
    try:
        role = BuildingRole(payload.role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}")
    return building_service.add_member(db, building_id, payload.user_id, role)


@router.delete("/{building_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(building_id: str, user_id: str, db: Session = Depends(get_db)):
    """Leave a building."""
    member = building_service.get_membership(db, building_id, user_id)
    if not member:
        raise HTTPException(status_code=404, detail="Membership not found")
    building_service.leave_building(db, member)
