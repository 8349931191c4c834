"""User ORM model: profile, messaging destinations, and notification preferences."""
import uuid
from sqlalchemy import Column, String, Boolean, Integer, DateTime, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship
from minyan.database import Base, utcnow
from minyan.models.minyan_event import Nusach


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(32), nullable=True)  # E.164, used for WhatsApp
    fcm_token = Column(String(512), nullable=True)
    whatsapp_opt_in = Column(Boolean, nullable=False, default=False)

    # Exposed only; reminder timing is not scheduled by this service
    notify_push = Column(Boolean, nullable=False, default=True)
    notify_whatsapp = Column(Boolean, nullable=False, default=False)
    notify_email = Column(Boolean, nullable=False, default=False)
    reminder_minutes = Column(Integer, nullable=False, default=30)

    preferred_prayers = Column(JSON, nullable=True, default=list)
    preferred_nusach = Column(SAEnum(Nusach), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    memberships = relationship("BuildingMember", back_populates="user", cascade="all, delete-orphan")

    @property
    def building_ids(self) -> list[str]:
        return [m.building_id for m in self.memberships]
