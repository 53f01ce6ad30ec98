"""
Tests for journey endpoints.
"""
import pytest

CONTENT = " ".join(["wander"] * 450)


@pytest.fixture
def journey_payload():
    def _payload(**overrides):
        payload = {
            "title": "Six Weeks in Patagonia",
            "description": "Glaciers, granite towers and endless wind in the far south.",
            "content": CONTENT,
            "tags": ["Patagonia", "trekking"],
            "destinations": ["El Chalten", "Torres del Paine"],
            "season": ["summer"],
            "duration": 42,
        }
        payload.update(overrides)
        return payload
    return _payload


def test_create_journey_computes_read_time(client, auth_headers, journey_payload):
    response = client.post("/api/journeys", json=journey_payload(), headers=auth_headers)
    assert response.status_code == 201
    journey = response.json()
    assert journey["word_count"] == 450
    assert journey["read_time"] == 3
    assert journey["tags"] == ["patagonia", "trekking"]
    assert journey["difficulty"] == "moderate"


def test_journey_validation(client, auth_headers, journey_payload):
    assert client.post("/api/journeys", json=journey_payload(title="Trip"),
                       headers=auth_headers).status_code == 422
    assert client.post("/api/journeys", json=journey_payload(description="too short"),
                       headers=auth_headers).status_code == 422
    assert client.post("/api/journeys", json=journey_payload(content="short"),
                       headers=auth_headers).status_code == 422
    assert client.post("/api/journeys", json=journey_payload(season=["monsoon"]),
                       headers=auth_headers).status_code == 422


def test_private_journey_visible_to_author_only(client, make_user, journey_payload):
    author = make_user()
    reader = make_user()
    journey = client.post("/api/journeys", json=journey_payload(is_public=False),
                          headers=author["headers"]).json()

    assert client.get(f"/api/journeys/{journey['id']}", headers=reader["headers"]).status_code == 404
    assert client.get(f"/api/journeys/{journey['id']}").status_code == 404
    assert client.get(f"/api/journeys/{journey['id']}", headers=author["headers"]).status_code == 200

    assert client.get("/api/journeys").json()["journeys"] == []
    mine = client.get("/api/journeys/my-journeys", headers=author["headers"]).json()
    assert mine["pagination"]["total"] == 1


def test_views_increment(client, auth_headers, journey_payload):
    journey = client.post("/api/journeys", json=journey_payload(), headers=auth_headers).json()
    client.get(f"/api/journeys/{journey['id']}")
    assert client.get(f"/api/journeys/{journey['id']}").json()["views"] == 2


def test_list_filters(client, auth_headers, journey_payload):
    client.post("/api/journeys", json=journey_payload(), headers=auth_headers)
    client.post("/api/journeys", json=journey_payload(
        title="Slow Travel Through Kerala",
        tags=["backwaters"],
        destinations=["Alleppey"],
        difficulty="easy",
    ), headers=auth_headers)

    assert client.get("/api/journeys", params={"tag": "backwaters"}).json()["pagination"]["total"] == 1
    assert client.get("/api/journeys", params={"destination": "torres"}).json()["pagination"]["total"] == 1
    assert client.get("/api/journeys", params={"difficulty": "easy"}).json()["pagination"]["total"] == 1
    found = client.get("/api/journeys", params={"q": "kerala"}).json()["journeys"]
    assert [j["title"] for j in found] == ["Slow Travel Through Kerala"]


def test_update_recomputes_metadata_and_is_author_only(client, make_user, journey_payload):
    author = make_user()
    other = make_user()
    journey = client.post("/api/journeys", json=journey_payload(), headers=author["headers"]).json()

    new_content = " ".join(["river"] * 150)
    assert client.put(f"/api/journeys/{journey['id']}", json={"content": new_content},
                      headers=other["headers"]).status_code == 403

    response = client.put(f"/api/journeys/{journey['id']}", json={"content": new_content},
                          headers=author["headers"])
    assert response.status_code == 200
    assert response.json()["word_count"] == 150
    assert response.json()["read_time"] == 1

    assert client.delete(f"/api/journeys/{journey['id']}", headers=other["headers"]).status_code == 403
    assert client.delete(f"/api/journeys/{journey['id']}", headers=author["headers"]).status_code == 200


def test_like_comment_and_featured(client, make_user, journey_payload):
    author = make_user()
    reader = make_user()
    quiet = client.post("/api/journeys", json=journey_payload(title="A Quiet Week Away"),
                        headers=author["headers"]).json()
    popular = client.post("/api/journeys", json=journey_payload(title="The Popular Journey"),
                          headers=author["headers"]).json()

    assert client.post(f"/api/journeys/{popular['id']}/like", headers=reader["headers"]).json() == {
        "is_liked": True, "like_count": 1
    }
    comment = client.post(f"/api/journeys/{popular['id']}/comments", json={"content": "Stunning"},
                          headers=reader["headers"])
    assert comment.status_code == 201
    assert len(client.get(f"/api/journeys/{popular['id']}/comments").json()) == 1

    featured = client.get("/api/journeys/featured").json()
    assert featured[0]["id"] == popular["id"]
    assert {j["id"] for j in featured} == {quiet["id"], popular["id"]}

    types = [n["type"] for n in client.get("/api/notifications", headers=author["headers"]).json()["notifications"]]
    assert sorted(types) == ["comment", "like"]


def test_tag_filter_handles_non_ascii(client, auth_headers, journey_payload):
    client.post("/api/journeys", json=journey_payload(tags=["Île-de-France"]), headers=auth_headers)
    client.post("/api/journeys", json=journey_payload(title="Other Journey", tags=["ile"]), headers=auth_headers)

    found = client.get("/api/journeys", params={"tag": "île-de-france"}).json()["journeys"]
    assert [j["title"] for j in found] == ["Six Weeks in Patagonia"]
