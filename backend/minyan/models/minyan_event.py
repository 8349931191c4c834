"""MinyanEvent ORM model: one concrete scheduled prayer session."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, Enum as SAEnum
from minyan.database import Base, utcnow


class PrayerType(str, enum.Enum):
    shacharis = "Shacharis"  # morning
    mincha = "Mincha"        # afternoon
    maariv = "Maariv"        # evening


class Nusach(str, enum.Enum):
    ashkenaz = "Ashkenaz"
    sefard = "Sefard"
    eidot_mizrach = "Eidot Mizrach"


class MinyanEvent(Base):
    __tablename__ = "minyan_events"
    __table_args__ = (
        Index("ix_minyan_events_building_date", "building_id", "date", "time"),
    )

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    building_id = Column(String(36), ForeignKey("buildings.building_id"), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD, opaque key, no tz conversion
    time = Column(String(5), nullable=False)   # HH:MM
    prayer_type = Column(SAEnum(PrayerType), nullable=False)
    nusach = Column(SAEnum(Nusach), nullable=False, default=Nusach.ashkenaz)
    location = Column(String(300), nullable=False, default="")
    recurrence_id = Column(
        String(36), ForeignKey("recurrence_patterns.recurrence_id"), nullable=True, index=True,
    )
    is_cancelled = Column(Boolean, nullable=False, default=False)
    notes = Column(String(1000), nullable=True)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
