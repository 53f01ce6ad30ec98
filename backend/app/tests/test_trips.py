"""
Tests for trip endpoints.
"""
from app.core.cache import response_cache, CacheKeys
from app.models.notification import Notification


def test_create_trip(client, make_user, trip_payload):
    """Test trip creation."""
    organizer = make_user()
    response = client.post("/api/trips", json=trip_payload(), headers=organizer["headers"])
    assert response.status_code == 201
    trip = response.json()
    assert trip["organizer_id"] == organizer["id"]
    assert trip["duration"] == 7
    assert trip["tags"] == ["hiking", "mountains"]
    assert trip["status"] == "planning"
    assert trip["budget"]["currency"] == "USD"

    participants = client.get(f"/api/trips/{trip['id']}/participants").json()
    assert len(participants) == 1
    assert participants[0]["role"] == "organizer"
    assert participants[0]["status"] == "accepted"


def test_create_trip_rejects_inverted_dates(client, auth_headers, trip_payload):
    response = client.post(
        "/api/trips",
        json=trip_payload(start_date="2030-07-10", end_date="2030-07-01"),
        headers=auth_headers
    )
    assert response.status_code == 400


def test_create_trip_validation(client, auth_headers, trip_payload):
    assert client.post("/api/trips", json=trip_payload(title="ab"), headers=auth_headers).status_code == 422
    assert client.post("/api/trips", json=trip_payload(max_participants=51), headers=auth_headers).status_code == 422
    assert client.post("/api/trips", json=trip_payload(category="space"), headers=auth_headers).status_code == 422
    assert client.post("/api/trips", json=trip_payload()).status_code == 401


def test_list_trips_visibility(client, make_user, create_trip):
    organizer = make_user()
    create_trip(organizer["headers"], title="Open Road")
    create_trip(organizer["headers"], title="Friends Only", visibility="friends")
    create_trip(organizer["headers"], title="Just Me", visibility="private")

    anonymous = client.get("/api/trips").json()
    assert [t["title"] for t in anonymous["trips"]] == ["Open Road"]

    follower = make_user()
    client.post(f"/api/follows/{organizer['id']}", headers=follower["headers"])
    titles = {t["title"] for t in client.get("/api/trips", headers=follower["headers"]).json()["trips"]}
    assert titles == {"Open Road", "Friends Only"}

    own = client.get("/api/trips", headers=organizer["headers"]).json()
    assert own["pagination"]["total"] == 3


def test_list_trips_filters_and_sort(client, auth_headers, create_trip):
    create_trip(auth_headers, title="Kyoto Temples", category="cultural",
                destination={"country": "Japan", "city": "Kyoto"}, tags=["temples"],
                start_date="2030-04-01", end_date="2030-04-05")
    create_trip(auth_headers, title="Beach Days", category="relaxation",
                destination={"country": "Thailand", "city": "Krabi"}, tags=["beach"],
                start_date="2030-01-10", end_date="2030-01-15")

    by_category = client.get("/api/trips", params={"category": "cultural"}).json()
    assert [t["title"] for t in by_category["trips"]] == ["Kyoto Temples"]

    by_country = client.get("/api/trips", params={"country": "thailand"}).json()
    assert [t["title"] for t in by_country["trips"]] == ["Beach Days"]

    by_tag = client.get("/api/trips", params={"tag": "Temples"}).json()
    assert [t["title"] for t in by_tag["trips"]] == ["Kyoto Temples"]

    by_date = client.get("/api/trips", params={"start_date": "2030-03-01"}).json()
    assert [t["title"] for t in by_date["trips"]] == ["Kyoto Temples"]

    sorted_trips = client.get("/api/trips", params={"sort": "start_date:asc"}).json()
    assert [t["title"] for t in sorted_trips["trips"]] == ["Beach Days", "Kyoto Temples"]

    assert client.get("/api/trips", params={"sort": "price:asc"}).status_code == 400


def test_tag_filter_matches_literal_and_non_ascii_tags(client, auth_headers, create_trip):
    create_trip(auth_headers, title="Paris Cafes", tags=["café", "100%_fun"])
    create_trip(auth_headers, title="Rome Ruins", tags=["history"])

    def titles(tag):
        return [t["title"] for t in client.get("/api/trips", params={"tag": tag}).json()["trips"]]

    assert titles("Café") == ["Paris Cafes"]
    assert titles("100%_fun") == ["Paris Cafes"]
    assert titles("%") == []
    assert titles("hist_ry") == []


def test_trip_detail_counts_views(client, make_user, create_trip):
    organizer = make_user()
    trip = create_trip(organizer["headers"])
    first = client.get(f"/api/trips/{trip['id']}").json()
    second = client.get(f"/api/trips/{trip['id']}").json()
    assert second["views"] == first["views"] + 1
    assert second["organizer"]["id"] == organizer["id"]
    assert second["participant_count"] == 1
    assert second["is_liked"] is False


def test_hidden_trip_looks_missing(client, make_user, create_trip):
    organizer = make_user()
    trip = create_trip(organizer["headers"], visibility="private")
    stranger = make_user()
    assert client.get(f"/api/trips/{trip['id']}", headers=stranger["headers"]).status_code == 404
    assert client.get("/api/trips/9999", headers=stranger["headers"]).status_code == 404
    assert client.get(f"/api/trips/{trip['id']}", headers=organizer["headers"]).status_code == 200


def test_update_trip_notifies_participants(client, make_user, create_trip, db_session):
    organizer = make_user()
    participant = make_user()
    trip = create_trip(organizer["headers"])
    client.post(f"/api/trips/{trip['id']}/join", headers=participant["headers"])
    client.get(f"/api/trips/{trip['id']}")  # warm the detail cache
    assert response_cache.get(CacheKeys.trip_detail(trip["id"])) is not None

    response = client.put(
        f"/api/trips/{trip['id']}",
        json={"start_date": "2030-07-02", "end_date": "2030-07-09"},
        headers=organizer["headers"]
    )
    assert response.status_code == 200
    assert response.json()["duration"] == 8
    assert response_cache.get(CacheKeys.trip_detail(trip["id"])) is None

    note = db_session.query(Notification).filter(Notification.user_id == participant["id"]).first()
    assert note.type.value == "trip_update"
    assert note.data["updateType"] == "date_change"


def test_only_organizer_can_update_or_delete(client, make_user, create_trip):
    organizer = make_user()
    other = make_user()
    trip = create_trip(organizer["headers"])
    assert client.put(f"/api/trips/{trip['id']}", json={"title": "Mine now"},
                      headers=other["headers"]).status_code == 403
    assert client.delete(f"/api/trips/{trip['id']}", headers=other["headers"]).status_code == 403

    assert client.delete(f"/api/trips/{trip['id']}", headers=organizer["headers"]).status_code == 200
    assert client.get(f"/api/trips/{trip['id']}").status_code == 404


def test_join_and_capacity(client, make_user, create_trip):
    organizer = make_user()
    trip = create_trip(organizer["headers"], max_participants=2)
    first = make_user()
    second = make_user()

    response = client.post(f"/api/trips/{trip['id']}/join", headers=first["headers"])
    assert response.status_code == 201
    assert response.json()["status"] == "accepted"
    assert client.post(f"/api/trips/{trip['id']}/join", headers=first["headers"]).status_code == 409

    full = client.post(f"/api/trips/{trip['id']}/join", headers=second["headers"])
    assert full.status_code == 400
    assert full.json()["detail"] == "Trip is full"

    notes = client.get("/api/notifications", headers=organizer["headers"]).json()["notifications"]
    assert notes[0]["data"]["updateType"] == "participant_joined"


def test_leave_trip(client, make_user, create_trip):
    organizer = make_user()
    member = make_user()
    trip = create_trip(organizer["headers"])
    client.post(f"/api/trips/{trip['id']}/join", headers=member["headers"])

    assert client.post(f"/api/trips/{trip['id']}/leave", headers=organizer["headers"]).status_code == 400
    assert client.post(f"/api/trips/{trip['id']}/leave", headers=member["headers"]).status_code == 200
    assert client.post(f"/api/trips/{trip['id']}/leave", headers=member["headers"]).status_code == 404


def test_like_toggle(client, make_user, create_trip):
    organizer = make_user()
    fan = make_user()
    trip = create_trip(organizer["headers"])

    liked = client.post(f"/api/trips/{trip['id']}/like", headers=fan["headers"]).json()
    assert liked == {"is_liked": True, "like_count": 1}
    detail = client.get(f"/api/trips/{trip['id']}", headers=fan["headers"]).json()
    assert detail["is_liked"] is True
    assert detail["like_count"] == 1

    unliked = client.post(f"/api/trips/{trip['id']}/like", headers=fan["headers"]).json()
    assert unliked == {"is_liked": False, "like_count": 0}

    # the organizer liking their own trip sends nothing
    client.post(f"/api/trips/{trip['id']}/like", headers=organizer["headers"])
    types = [n["type"] for n in client.get("/api/notifications", headers=organizer["headers"]).json()["notifications"]]
    assert types.count("like") == 1


def test_comments(client, make_user, create_trip):
    organizer = make_user()
    commenter = make_user()
    trip = create_trip(organizer["headers"])

    response = client.post(f"/api/trips/{trip['id']}/comments", json={"content": "Count me in!"},
                           headers=commenter["headers"])
    assert response.status_code == 201
    assert response.json()["user"]["id"] == commenter["id"]
    assert client.post(f"/api/trips/{trip['id']}/comments", json={"content": ""},
                       headers=commenter["headers"]).status_code == 422

    comments = client.get(f"/api/trips/{trip['id']}/comments").json()
    assert [c["content"] for c in comments] == ["Count me in!"]

    notes = client.get("/api/notifications", headers=organizer["headers"]).json()["notifications"]
    assert notes[0]["type"] == "comment"


def test_share_and_featured(client, auth_headers, create_trip):
    trip = create_trip(auth_headers)
    assert client.post(f"/api/trips/{trip['id']}/share").json() == {"shares": 1}
    assert client.get("/api/trips/featured").json() == []
