"""RecurrencePattern ORM model: the weekly rule a series of events was generated from."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, JSON, ForeignKey, Enum as SAEnum
from minyan.database import Base, utcnow
from minyan.models.minyan_event import PrayerType, Nusach


class RecurrencePattern(Base):
    __tablename__ = "recurrence_patterns"

    recurrence_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    building_id = Column(String(36), ForeignKey("buildings.building_id"), nullable=False)
    prayer_type = Column(SAEnum(PrayerType), nullable=False)
    nusach = Column(SAEnum(Nusach), nullable=False)
    time = Column(String(5), nullable=False)
    location = Column(String(300), nullable=False, default="")
    weekdays = Column(JSON, nullable=False)  # ints 0-6, 0 = Sunday
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
