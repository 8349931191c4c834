"""Building and BuildingMember ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from minyan.database import Base, utcnow


class BuildingRole(str, enum.Enum):
    admin = "admin"
    member = "member"


class Building(Base):
    __tablename__ = "buildings"

    building_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    address = Column(String(300), nullable=False, default="")
    invite_code = Column(String(16), nullable=False, unique=True, index=True)
    timezone = Column(String(50), nullable=False)  # IANA tz
    quorum_size = Column(Integer, nullable=True)  # None → settings.DEFAULT_QUORUM_SIZE
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    members = relationship("BuildingMember", back_populates="building", cascade="all, delete-orphan")


class BuildingMember(Base):
    __tablename__ = "building_members"

    building_id = Column(String(36), ForeignKey("buildings.building_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    role = Column(SAEnum(BuildingRole), nullable=False, default=BuildingRole.member)
    joined_at = Column(DateTime(timezone=True), default=utcnow)

    building = relationship("Building", back_populates="members")
    user = relationship("User", back_populates="memberships")
