"""Announcement ORM model."""
import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from minyan.database import Base, utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    announcement_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    building_id = Column(String(36), ForeignKey("buildings.building_id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
