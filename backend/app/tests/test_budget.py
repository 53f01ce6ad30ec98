"""
Tests for budget and budget expense endpoints.
"""
from decimal import Decimal


def create_budget(client, headers, **overrides):
    payload = {
        "title": "Japan Spring",
        "total_budget": "1000",
        "currency": "jpy",
        "breakdown": {"food": "300", "transport": "200"},
    }
    payload.update(overrides)
    return client.post("/api/budget", json=payload, headers=headers)


def add_expense(client, headers, budget_id, category, amount):
    return client.post(
        f"/api/budget/{budget_id}/expenses",
        json={"category": category, "amount": amount, "date": "2030-04-02"},
        headers=headers,
    )


def test_budget_crud(client, auth_headers):
    response = create_budget(client, auth_headers)
    assert response.status_code == 201
    budget = response.json()
    assert budget["currency"] == "JPY"
    assert Decimal(budget["spent_amount"]) == 0

    updated = client.put(f"/api/budget/{budget['id']}", json={"title": "Japan Cherry Blossom"},
                         headers=auth_headers)
    assert updated.json()["title"] == "Japan Cherry Blossom"

    assert len(client.get("/api/budget", headers=auth_headers).json()) == 1
    assert client.delete(f"/api/budget/{budget['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/budget/{budget['id']}", headers=auth_headers).status_code == 404


def test_budget_validation(client, auth_headers):
    assert create_budget(client, auth_headers, total_budget="0").status_code == 422
    assert create_budget(client, auth_headers, currency="EURO").status_code == 422


def test_budgets_are_owner_scoped(client, make_user):
    owner = make_user()
    other = make_user()
    budget = create_budget(client, owner["headers"]).json()

    assert client.get(f"/api/budget/{budget['id']}", headers=other["headers"]).status_code == 404
    assert add_expense(client, other["headers"], budget["id"], "food", "10").status_code == 404
    assert client.get("/api/budget", headers=other["headers"]).json() == []


def test_expenses_keep_spent_amount_in_sync(client, auth_headers):
    budget = create_budget(client, auth_headers).json()
    first = add_expense(client, auth_headers, budget["id"], "Food", "120.50").json()
    add_expense(client, auth_headers, budget["id"], "transport", "80")
    assert first["category"] == "food"

    fetched = client.get(f"/api/budget/{budget['id']}", headers=auth_headers).json()
    assert Decimal(fetched["spent_amount"]) == Decimal("200.50")

    client.delete(f"/api/budget/{budget['id']}/expenses/{first['id']}", headers=auth_headers)
    fetched = client.get(f"/api/budget/{budget['id']}", headers=auth_headers).json()
    assert Decimal(fetched["spent_amount"]) == Decimal("80")
    assert len(client.get(f"/api/budget/{budget['id']}/expenses", headers=auth_headers).json()) == 1

    assert client.delete(f"/api/budget/{budget['id']}/expenses/999", headers=auth_headers).status_code == 404


def test_spent_amount_never_negative(client, auth_headers, db_session):
    from app.models.budget import Budget

    budget = create_budget(client, auth_headers).json()
    expense = add_expense(client, auth_headers, budget["id"], "food", "50").json()

    row = db_session.query(Budget).filter(Budget.id == budget["id"]).first()
    row.spent_amount = Decimal("10")
    db_session.commit()

    client.delete(f"/api/budget/{budget['id']}/expenses/{expense['id']}", headers=auth_headers)
    fetched = client.get(f"/api/budget/{budget['id']}", headers=auth_headers).json()
    assert Decimal(fetched["spent_amount"]) == 0


def test_budget_summary(client, auth_headers):
    budget = create_budget(client, auth_headers, total_budget="200").json()
    add_expense(client, auth_headers, budget["id"], "food", "150")
    add_expense(client, auth_headers, budget["id"], "food", "30")
    add_expense(client, auth_headers, budget["id"], "museums", "60")

    summary = client.get(f"/api/budget/{budget['id']}/summary", headers=auth_headers).json()
    assert Decimal(summary["total_spent"]) == Decimal("240")
    assert Decimal(summary["remaining"]) == Decimal("-40")
    assert summary["is_over_budget"] is True
    assert summary["fill_ratio"] == 120.0
    assert summary["expense_count"] == 3

    food, museums = summary["categories"]
    assert food["category"] == "food"
    assert food["expense_count"] == 2
    assert Decimal(food["planned"]) == Decimal("300")
    assert food["percentage_of_total"] == 75.0
    assert museums["planned"] is None


def test_budget_linked_to_trip_requires_participation(client, make_user, create_trip):
    organizer = make_user()
    outsider = make_user()
    trip = create_trip(organizer["headers"])

    assert create_budget(client, outsider["headers"], trip_id=trip["id"]).status_code == 403
    assert create_budget(client, organizer["headers"], trip_id=trip["id"]).status_code == 201
    assert create_budget(client, organizer["headers"], trip_id=999).status_code == 404

    linked = client.get("/api/budget", params={"trip_id": trip["id"]}, headers=organizer["headers"]).json()
    assert len(linked) == 1
