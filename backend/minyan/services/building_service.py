"""Buildings and membership: invite codes, joining, admin checks."""
import logging
import secrets
import string
from typing import Any, Optional

from sqlalchemy.orm import Session

from minyan.config import settings
from minyan.database import transaction, utcnow
from minyan.models.building import Building, BuildingMember, BuildingRole
from minyan.models.user import User

logger = logging.getLogger(__name__)

_INVITE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code(length: Optional[int] = None) -> str:
    return "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(length or settings.INVITE_CODE_LENGTH))


def _unused_invite_code(db: Session) -> str:
    while True:
        code = generate_invite_code()
        if get_building_by_invite_code(db, code) is None:
            return code


def create_building(
    db: Session,
    name: str,
    created_by: str,
    address: str = "",
    timezone: Optional[str] = None,
    quorum_size: Optional[int] = None,
) -> Building:
    """Create a building with a fresh invite code; the creator joins as admin."""
    building = Building(
        name=name,
        address=address,
        invite_code=_unused_invite_code(db),
        timezone=timezone or settings.DEFAULT_TIMEZONE,
        quorum_size=quorum_size,
        created_by=created_by,
    )
    with transaction(db, f"create building '{name}'"):
        db.add(building)
        db.flush()
        db.add(BuildingMember(building_id=building.building_id, user_id=created_by, role=BuildingRole.admin))
    db.refresh(building)
    logger.info("Created building '%s' (%s) by user %s, invite code %s", name, building.building_id, created_by, building.invite_code)
    return building


def get_building(db: Session, building_id: str) -> Optional[Building]:
    return db.query(Building).filter(Building.building_id == building_id).first()


def get_building_by_invite_code(db: Session, code: str) -> Optional[Building]:
    return db.query(Building).filter(Building.invite_code == code.strip().upper()).first()


def list_buildings(db: Session, user_id: Optional[str] = None) -> list[Building]:
    query = db.query(Building)
    if user_id:
        query = query.join(BuildingMember).filter(BuildingMember.user_id == user_id)
    return query.order_by(Building.name).all()


def update_building(db: Session, building: Building, updates: dict[str, Any]) -> Building:
    with transaction(db, f"update building {building.building_id}"):
        for field, value in updates.items():
            setattr(building, field, value)
        building.updated_at = utcnow()
    db.refresh(building)
    logger.info("Updated building %s", building.building_id)
    return building


def get_membership(db: Session, building_id: str, user_id: str) -> Optional[BuildingMember]:
    return (
        db.query(BuildingMember)
        .filter(BuildingMember.building_id == building_id, BuildingMember.user_id == user_id)
        .first()
    )


def is_building_admin(db: Session, building_id: str, user_id: str) -> bool:
    member = get_membership(db, building_id, user_id)
    return member is not None and member.role == BuildingRole.admin


def add_member(db: Session, building_id: str, user_id: str, role: BuildingRole = BuildingRole.member) -> BuildingMember:
    member = BuildingMember(building_id=building_id, user_id=user_id, role=BuildingRole(role))
    with transaction(db, f"add user {user_id} to building {building_id}"):
        db.add(member)
    db.refresh(member)
    logger.info("Added user %s to building %s as %s", user_id, building_id, member.role.value)
    return member


def join_building(db: Session, building: Building, user: User) -> BuildingMember:
    """Join as a member; joining again returns the existing membership."""
    existing = get_membership(db, building.building_id, user.user_id)
    if existing:
        return existing
    return add_member(db, building.building_id, user.user_id)


def leave_building(db: Session, member: BuildingMember) -> None:
    building_id, user_id = member.building_id, member.user_id
    with transaction(db, f"remove user {user_id} from building {building_id}"):
        db.delete(member)
    logger.info("Removed user %s from building %s", user_id, building_id)
