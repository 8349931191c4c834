"""Tests for RSVPs, the attendance summary, and the quorum policy.

Covers:
- Upsert semantics: one record per (user, minyan), last status wins
- yes/maybe/no counts and the has_minyan flag at the threshold of 10
- Per-building quorum override
- HTTP routes for RSVP, roster, and summary
"""
import pytest

from minyan.models.attendance import Attendance, RSVPStatus
from minyan.models.building import Building
from minyan.models.user import User
from minyan.services import attendance_service, building_service, minyan_service
from minyan.services.quorum import MINYAN_SIZE, has_minyan, quorum_size_for
from tests.conftest import create_test_user, create_test_building, create_test_minyan


def _seed(db, quorum_size=None):
    admin = User(name="Gabbai", email="gabbai@example.com")
    db.add(admin)
    db.commit()
    building = building_service.create_building(
        db, name="Maple Towers", created_by=admin.user_id, quorum_size=quorum_size,
    )
    event = minyan_service.create_event(
        db, building_id=building.building_id, date="2024-01-01", time="13:30",
        prayer_type="Mincha", created_by=admin.user_id,
    )
    return admin, building, event


def _users(db, count, prefix="member"):
    users = [User(name=f"{prefix} {i}", email=f"{prefix}{i}@example.com") for i in range(count)]
    db.add_all(users)
    db.commit()
    return users


class TestQuorumPolicy:

    def test_threshold_is_ten(self):
        assert MINYAN_SIZE == 10
        assert has_minyan(9) is False
        assert has_minyan(10) is True
        assert has_minyan(11) is True

    def test_custom_threshold(self):
        assert has_minyan(3, quorum_size=3) is True
        assert has_minyan(2, quorum_size=3) is False

    def test_quorum_size_for_defaults_to_ten(self):
        assert quorum_size_for(None) == 10
        assert quorum_size_for(Building(quorum_size=None)) == 10
        assert quorum_size_for(Building(quorum_size=6)) == 6


class TestSetAttendance:
    """Upsert semantics."""

    def test_first_rsvp_creates_record(self, db):
        admin, _, event = _seed(db)
        record = attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", RSVPStatus.yes)
        assert record.status == RSVPStatus.yes
        assert record.user_name == "Gabbai"
        assert db.query(Attendance).count() == 1

    def test_second_rsvp_overwrites(self, db):
        """yes then no → counted once, under no."""
        admin, _, event = _seed(db)
        first = attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", RSVPStatus.yes)
        first_id = first.attendance_id
        second = attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", RSVPStatus.no)

        assert second.attendance_id == first_id
        assert db.query(Attendance).count() == 1
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert (summary.yes_count, summary.maybe_count, summary.no_count) == (0, 0, 1)

    def test_repeat_same_status_is_harmless(self, db):
        admin, _, event = _seed(db)
        for _ in range(3):
            attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", RSVPStatus.maybe)
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.maybe_count == 1
        assert len(summary.attendees) == 1

    def test_accepts_plain_string_status(self, db):
        admin, _, event = _seed(db)
        record = attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", "maybe")
        assert record.status == RSVPStatus.maybe

    def test_final_status_per_user_wins(self, db):
        _, _, event = _seed(db)
        users = _users(db, 4)
        history = {
            users[0]: ["yes", "no", "yes"],
            users[1]: ["yes", "maybe"],
            users[2]: ["no", "yes"],
            users[3]: ["maybe", "no"],
        }
        for user, statuses in history.items():
            for s in statuses:
                attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, s)

        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.yes_count == 2
        assert summary.maybe_count == 1
        assert summary.no_count == 1


class TestSummary:
    """Quorum detection from the roster."""

    def test_ten_yes_makes_a_minyan(self, db):
        _, _, event = _seed(db)
        for user in _users(db, 10):
            attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, RSVPStatus.yes)

        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.yes_count == 10
        assert summary.has_minyan is True

    def test_eleventh_maybe_keeps_minyan(self, db):
        _, _, event = _seed(db)
        users = _users(db, 11)
        for user in users[:10]:
            attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, RSVPStatus.yes)
        attendance_service.set_attendance(db, event.event_id, users[10].user_id, users[10].name, RSVPStatus.maybe)

        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.has_minyan is True
        assert summary.maybe_count == 1
        assert len(summary.attendees) == 11

    def test_nine_yes_is_short(self, db):
        _, _, event = _seed(db)
        for user in _users(db, 9):
            attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, RSVPStatus.yes)
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.has_minyan is False

    def test_dropping_below_threshold_clears_flag(self, db):
        _, _, event = _seed(db)
        users = _users(db, 10)
        for user in users:
            attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, RSVPStatus.yes)
        attendance_service.set_attendance(db, event.event_id, users[0].user_id, users[0].name, RSVPStatus.no)

        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.yes_count == 9
        assert summary.has_minyan is False

    def test_building_quorum_override(self, db):
        _, _, event = _seed(db, quorum_size=3)
        for user in _users(db, 3):
            attendance_service.set_attendance(db, event.event_id, user.user_id, user.name, RSVPStatus.yes)
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert summary.quorum_size == 3
        assert summary.has_minyan is True

    def test_roster_tuples(self, db):
        admin, _, event = _seed(db)
        attendance_service.set_attendance(db, event.event_id, admin.user_id, "Gabbai", RSVPStatus.yes)
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert [(a.id, a.name, a.status) for a in summary.attendees] == [(admin.user_id, "Gabbai", RSVPStatus.yes)]

    def test_empty_event(self, db):
        _, _, event = _seed(db)
        summary = attendance_service.get_attendance_summary(db, event.event_id)
        assert (summary.yes_count, summary.maybe_count, summary.no_count) == (0, 0, 0)
        assert summary.has_minyan is False
        assert summary.attendees == []


class TestAttendanceAPI:
    """RSVP and summary endpoints."""

    def _setup(self, client):
        admin = create_test_user(client, name="Admin")
        building = create_test_building(client, admin["user_id"])
        event = create_test_minyan(client, building["building_id"], admin["user_id"])
        return admin, building, event

    def test_rsvp_and_summary(self, client):
        admin, _, event = self._setup(client)
        resp = client.post("/api/attendance/rsvp", json={
            "event_id": event["event_id"],
            "user_id": admin["user_id"],
            "user_name": admin["name"],
            "status": "yes",
        })
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "yes"

        summary = client.get(f"/api/attendance/{event['event_id']}/summary").json()
        assert summary["yes_count"] == 1
        assert summary["has_minyan"] is False
        assert summary["quorum_size"] == 10
        assert summary["attendees"] == [{"id": admin["user_id"], "name": "Admin", "status": "yes"}]

    def test_rsvp_update_in_place(self, client):
        admin, _, event = self._setup(client)
        for status in ("yes", "no"):
            client.post("/api/attendance/rsvp", json={
                "event_id": event["event_id"], "user_id": admin["user_id"],
                "user_name": "Admin", "status": status,
            })
        roster = client.get(f"/api/attendance/{event['event_id']}").json()
        assert len(roster) == 1
        assert roster[0]["status"] == "no"

        mine = client.get(f"/api/attendance/{event['event_id']}/users/{admin['user_id']}")
        assert mine.status_code == 200
        assert mine.json()["status"] == "no"

    def test_rsvp_unknown_event_404(self, client):
        admin = create_test_user(client, name="Admin")
        resp = client.post("/api/attendance/rsvp", json={
            "event_id": "missing", "user_id": admin["user_id"], "user_name": "Admin", "status": "yes",
        })
        assert resp.status_code == 404

    def test_rsvp_invalid_status_422(self, client):
        admin, _, event = self._setup(client)
        resp = client.post("/api/attendance/rsvp", json={
            "event_id": event["event_id"], "user_id": admin["user_id"],
            "user_name": "Admin", "status": "probably",
        })
        assert resp.status_code == 422

    def test_no_rsvp_recorded_404(self, client):
        admin, _, event = self._setup(client)
        resp = client.get(f"/api/attendance/{event['event_id']}/users/{admin['user_id']}")
        assert resp.status_code == 404

    @pytest.mark.parametrize("path", ["", "/summary"])
    def test_unknown_event_reads_404(self, client, path):
        assert client.get(f"/api/attendance/missing{path}").status_code == 404
