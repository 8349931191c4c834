"""Authorization hook shared by the admin-only routes."""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from minyan.models.building import Building
from minyan.services import building_service


def require_building(db: Session, building_id: str) -> Building:
    building = building_service.get_building(db, building_id)
    if not building:
        raise HTTPException(status_code=404, detail="Building not found")
    return building


def require_building_admin(db: Session, building_id: str, actor_user_id: str) -> Building:
    """Only admins of the building may schedule, cancel, delete, or announce."""
    building = require_building(db, building_id)
    if not building_service.is_building_admin(db, building_id, actor_user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only building admins may perform this action.",
        )
    return building
