"""
Tests for follow endpoints.
"""
from sqlalchemy.exc import SQLAlchemyError

from app.models.follow import Follow
from app.services import notification_service


def test_follow_public_user(client, make_user):
    alice = make_user()
    bob = make_user()
    response = client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    assert response.status_code == 201
    assert response.json() == {
        "status": "accepted",
        "is_following": True,
        "is_pending": False,
        "follower_count": 1,
    }

    notifications = client.get("/api/notifications", headers=alice["headers"]).json()
    assert notifications["notifications"][0]["type"] == "follow"
    assert notifications["unread_count"] == 1


def test_follow_private_user_creates_request(client, make_user):
    alice = make_user(is_private=True)
    bob = make_user()
    response = client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    assert response.json()["follower_count"] == 0

    status = client.get(f"/api/follows/{alice['id']}/status", headers=bob["headers"]).json()
    assert status == {"is_following": False, "is_pending": True, "follows_you": False}

    requests = client.get("/api/follows/requests", headers=alice["headers"]).json()
    assert [r["user"]["id"] for r in requests["users"]] == [bob["id"]]

    notes = client.get("/api/notifications", headers=alice["headers"]).json()["notifications"]
    assert notes[0]["type"] == "follow_request"


def test_accept_follow_request(client, make_user):
    alice = make_user(is_private=True)
    bob = make_user()
    client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])

    response = client.post(f"/api/follows/requests/{bob['id']}/accept", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["follower_count"] == 1

    notes = client.get("/api/notifications", headers=bob["headers"]).json()["notifications"]
    assert notes[0]["type"] == "follow_accepted"

    followers = client.get(f"/api/follows/followers/{alice['id']}").json()
    assert [f["user"]["id"] for f in followers["users"]] == [bob["id"]]


def test_reject_follow_request(client, make_user):
    alice = make_user(is_private=True)
    bob = make_user()
    client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    response = client.post(f"/api/follows/requests/{bob['id']}/reject", headers=alice["headers"])
    assert response.status_code == 200
    assert client.get("/api/follows/requests", headers=alice["headers"]).json()["users"] == []
    assert client.post(f"/api/follows/requests/{bob['id']}/accept", headers=alice["headers"]).status_code == 404


def test_follow_errors(client, make_user):
    alice = make_user()
    bob = make_user()
    assert client.post(f"/api/follows/{bob['id']}", headers=bob["headers"]).status_code == 400
    assert client.post("/api/follows/9999", headers=bob["headers"]).status_code == 404
    assert client.post(f"/api/follows/{alice['id']}", headers=bob["headers"]).status_code == 201
    assert client.post(f"/api/follows/{alice['id']}", headers=bob["headers"]).status_code == 409


def test_follow_blocked_user_is_forbidden(client, make_user):
    alice = make_user()
    bob = make_user()
    client.post(f"/api/users/block/{bob['id']}", headers=alice["headers"])
    assert client.post(f"/api/follows/{alice['id']}", headers=bob["headers"]).status_code == 403


def test_unfollow(client, make_user):
    alice = make_user()
    bob = make_user()
    client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    response = client.delete(f"/api/follows/{alice['id']}", headers=bob["headers"])
    assert response.status_code == 200
    assert response.json() == {"follower_count": 0}
    assert client.delete(f"/api/follows/{alice['id']}", headers=bob["headers"]).status_code == 404


def test_following_list_and_stats(client, make_user):
    alice = make_user()
    bob = make_user()
    carol = make_user()
    client.post(f"/api/follows/{bob['id']}", headers=alice["headers"])
    client.post(f"/api/follows/{carol['id']}", headers=alice["headers"])

    following = client.get(f"/api/follows/following/{alice['id']}", params={"limit": 1}).json()
    assert following["pagination"]["total"] == 2
    assert following["pagination"]["has_more"] is True
    assert len(following["users"]) == 1

    assert client.get(f"/api/follows/stats/{alice['id']}").json() == {"followers": 0, "following": 2}


def test_failed_notification_keeps_follow(client, make_user, db_session, monkeypatch):
    alice = make_user()
    bob = make_user()

    def boom(**kwargs):
        raise SQLAlchemyError("notifications table unavailable")

    monkeypatch.setattr(notification_service, "create_notification", boom)

    response = client.post(f"/api/follows/{alice['id']}", headers=bob["headers"])
    assert response.status_code == 201
    assert response.json()["is_following"] is True

    follow = db_session.query(Follow).filter(
        Follow.follower_id == bob["id"], Follow.following_id == alice["id"]
    ).first()
    assert follow is not None
