"""Tests for User CRUD endpoints."""
from tests.conftest import create_test_user


class TestUserCRUD:
    """User create / get / update / list."""

    def test_create_user(self, client):
        data = create_test_user(client, name="Alice", phone="+15551234567", preferred_prayers=["Mincha"])
        assert data["name"] == "Alice"
        assert data["email"] == "alice@example.com"
        assert data["phone"] == "+15551234567"
        assert data["preferred_prayers"] == ["Mincha"]
        assert data["notify_push"] is True
        assert data["reminder_minutes"] == 30
        assert data["building_ids"] == []
        assert "user_id" in data

    def test_duplicate_email_conflict(self, client):
        create_test_user(client, name="Alice")
        resp = client.post("/api/users/", json={"name": "Other Alice", "email": "alice@example.com"})
        assert resp.status_code == 409

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Test User"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_preferences(self, client):
        user = create_test_user(client)
        resp = client.patch(f"/api/users/{user['user_id']}", json={
            "fcm_token": "device-1",
            "notify_whatsapp": True,
            "reminder_minutes": 15,
            "preferred_nusach": "Sefard",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["notify_whatsapp"] is True
        assert data["reminder_minutes"] == 15
        assert data["preferred_nusach"] == "Sefard"
        assert data["name"] == "Test User"

    def test_list_users(self, client):
        create_test_user(client, name="Alice")
        create_test_user(client, name="Bob")
        resp = client.get("/api/users/")
        assert resp.status_code == 200
        names = [u["name"] for u in resp.json()]
        assert "Alice" in names
        assert "Bob" in names
