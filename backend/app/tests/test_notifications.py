"""
Tests for notification endpoints and helpers.
"""
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.services import notification_service


def test_test_notification_and_unread_count(client, auth_headers):
    response = client.post("/api/notifications/test", headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["type"] == "system"
    assert client.get("/api/notifications/unread-count", headers=auth_headers).json() == {"unread_count": 1}


def test_mark_read_is_owner_scoped(client, make_user):
    alice = make_user()
    bob = make_user()
    note = client.post("/api/notifications/test", headers=alice["headers"]).json()

    assert client.put(f"/api/notifications/{note['id']}/read", headers=bob["headers"]).status_code == 404

    response = client.put(f"/api/notifications/{note['id']}/read", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["is_read"] is True


def test_read_all_and_filters(client, auth_headers):
    for _ in range(3):
        client.post("/api/notifications/test", headers=auth_headers)
    assert client.put("/api/notifications/read-all", headers=auth_headers).json() == {"count": 3}
    assert client.put("/api/notifications/read-all", headers=auth_headers).json() == {"count": 0}

    unread = client.get("/api/notifications", params={"is_read": False}, headers=auth_headers).json()
    assert unread["notifications"] == []
    system = client.get("/api/notifications", params={"type": "system"}, headers=auth_headers).json()
    assert system["pagination"]["total"] == 3


def test_delete_and_clear(client, auth_headers):
    first = client.post("/api/notifications/test", headers=auth_headers).json()
    client.post("/api/notifications/test", headers=auth_headers)
    assert client.delete(f"/api/notifications/{first['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/notifications/{first['id']}", headers=auth_headers).status_code == 404
    assert client.delete("/api/notifications", headers=auth_headers).json() == {"count": 1}


def test_trip_update_messages():
    assert notification_service.trip_update_message("Bali", "date_change") == 'Dates for "Bali" have been updated'
    assert notification_service.trip_update_message("Bali", "participant_left") == 'Someone left your trip "Bali"'
    assert notification_service.trip_update_message("Bali", "general") == 'Your trip "Bali" has been updated'


def test_social_notifications_respect_preferences(client, make_user, db_session):
    alice = make_user()
    bob = make_user()
    client.put(
        "/api/users/preferences",
        json={"notifications": {"socialActivity": False}},
        headers=alice["headers"]
    )
    client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    assert client.get("/api/notifications/unread-count", headers=alice["headers"]).json()["unread_count"] == 0

    # system notifications are not gated
    notification_service.send_system(db_session, alice["id"], "Welcome", "Hello there")
    assert db_session.query(Notification).filter(
        Notification.user_id == alice["id"], Notification.type == NotificationType.SYSTEM
    ).count() == 1


def test_notify_safely_skips_missing_recipient(db_session):
    assert notification_service.notify_safely(
        db_session, 12345, NotificationType.SYSTEM, title="t", message="m"
    ) is None


def test_follow_helper_builds_message(client, make_user, db_session):
    alice = make_user(first_name="Alice", last_name="Walker")
    bob = make_user()
    follower = db_session.query(User).filter(User.id == alice["id"]).first()
    note = notification_service.send_follow(db_session, bob["id"], follower)
    assert note.message == "Alice Walker started following you"
    assert note.action_url == f"/profile/{alice['id']}"
    assert note.actor_id == alice["id"]
