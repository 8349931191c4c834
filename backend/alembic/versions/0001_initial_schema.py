"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the Minyan Scheduler:
users, buildings, building_members, recurrence_patterns,
minyan_events, attendance, announcements.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PRAYER_TYPES = ("shacharis", "mincha", "maariv")
NUSACHS = ("ashkenaz", "sefard", "eidot_mizrach")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("fcm_token", sa.String(512), nullable=True),
        sa.Column("whatsapp_opt_in", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notify_push", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("notify_whatsapp", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notify_email", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("reminder_minutes", sa.Integer, nullable=False, server_default="30"),
        sa.Column("preferred_prayers", sa.JSON, nullable=True),
        sa.Column("preferred_nusach", sa.Enum(*NUSACHS, name="nusach"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )

    # --- buildings ---
    op.create_table(
        "buildings",
        sa.Column("building_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("address", sa.String(300), nullable=False, server_default=""),
        sa.Column("invite_code", sa.String(16), nullable=False),
        sa.Column("timezone", sa.String(50), nullable=False),
        sa.Column("quorum_size", sa.Integer, nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_buildings_invite_code", "buildings", ["invite_code"], unique=True)

    # --- building_members ---
    op.create_table(
        "building_members",
        sa.Column("building_id", sa.String(36), sa.ForeignKey("buildings.building_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("role", sa.Enum("admin", "member", name="buildingrole"), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True)),
    )

    # --- recurrence_patterns ---
    op.create_table(
        "recurrence_patterns",
        sa.Column("recurrence_id", sa.String(36), primary_key=True),
        sa.Column("building_id", sa.String(36), sa.ForeignKey("buildings.building_id"), nullable=False),
        sa.Column("prayer_type", sa.Enum(*PRAYER_TYPES, name="prayertype"), nullable=False),
        sa.Column("nusach", postgresql.ENUM(*NUSACHS, name="nusach", create_type=False), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("location", sa.String(300), nullable=False, server_default=""),
        sa.Column("weekdays", sa.JSON, nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )

    # --- minyan_events ---
    op.create_table(
        "minyan_events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("building_id", sa.String(36), sa.ForeignKey("buildings.building_id"), nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("prayer_type", postgresql.ENUM(*PRAYER_TYPES, name="prayertype", create_type=False), nullable=False),
        sa.Column("nusach", postgresql.ENUM(*NUSACHS, name="nusach", create_type=False), nullable=False),
        sa.Column("location", sa.String(300), nullable=False, server_default=""),
        sa.Column(
            "recurrence_id", sa.String(36),
            sa.ForeignKey("recurrence_patterns.recurrence_id"), nullable=True,
        ),
        sa.Column("is_cancelled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_minyan_events_building_date", "minyan_events", ["building_id", "date", "time"])
    op.create_index("ix_minyan_events_recurrence_id", "minyan_events", ["recurrence_id"])

    # --- attendance ---
    op.create_table(
        "attendance",
        sa.Column("attendance_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("minyan_events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("user_name", sa.String(100), nullable=False),
        sa.Column("status", sa.Enum("yes", "maybe", "no", name="rsvpstatus"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("event_id", "user_id", name="uq_attendance_event_user"),
    )
    op.create_index("ix_attendance_event_id", "attendance", ["event_id"])

    # --- announcements ---
    op.create_table(
        "announcements",
        sa.Column("announcement_id", sa.String(36), primary_key=True),
        sa.Column("building_id", sa.String(36), sa.ForeignKey("buildings.building_id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_announcements_building_id", "announcements", ["building_id"])


def downgrade() -> None:
    op.drop_table("announcements")
    op.drop_table("attendance")
    op.drop_table("minyan_events")
    op.drop_table("recurrence_patterns")
    op.drop_table("building_members")
    op.drop_table("buildings")
    op.drop_table("users")
    for enum_name in ("rsvpstatus", "buildingrole", "prayertype", "nusach"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
