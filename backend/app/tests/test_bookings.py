"""
Tests for bookings and wallet payments.
"""
from decimal import Decimal

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


def fund(client, headers, amount):
    client.post("/api/wallet/deposit", json={"amount": amount}, headers=headers)


def balance(client, headers):
    return Decimal(client.get("/api/wallet", headers=headers).json()["balance"])


def test_partners_and_features(client):
    partners = client.get("/api/bookings/partners").json()
    assert {p["category"] for p in partners} == {"hotel", "flight", "transport", "activity"}
    assert len(client.get("/api/bookings/features").json()) == 4


def test_create_booking(client, auth_headers):
    response = client.post("/api/bookings", json={
        "booking_type": "hotel",
        "partner_id": "stayscape",
        "destination": "Lisbon",
        "check_in_date": "2030-05-01",
        "check_out_date": "2030-05-04",
        "guests": 2,
        "total_amount": "420",
        "currency": "eur",
    }, headers=auth_headers)
    assert response.status_code == 201
    booking = response.json()
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "unpaid"
    assert booking["currency"] == "EUR"

    mine = client.get("/api/bookings/my-bookings", headers=auth_headers).json()
    assert mine["pagination"]["total"] == 1


def test_booking_date_order(client, auth_headers):
    response = client.post("/api/bookings", json={
        "booking_type": "hotel",
        "check_in_date": "2030-05-04",
        "check_out_date": "2030-05-01",
    }, headers=auth_headers)
    assert response.status_code == 400


def test_status_transitions(client, make_user):
    owner = make_user()
    other = make_user()
    booking = client.post("/api/bookings", json={"booking_type": "flight"}, headers=owner["headers"]).json()
    url = f"/api/bookings/{booking['id']}/status"

    assert client.patch(url, json={"status": "completed"}, headers=owner["headers"]).status_code == 400
    assert client.patch(url, json={"status": "confirmed"}, headers=other["headers"]).status_code == 404
    assert client.patch(url, json={"status": "confirmed"}, headers=owner["headers"]).json()["status"] == "confirmed"
    assert client.patch(url, json={"status": "completed"}, headers=owner["headers"]).json()["status"] == "completed"
    assert client.patch(url, json={"status": "cancelled"}, headers=owner["headers"]).status_code == 400

    completed = client.get("/api/bookings/my-bookings", params={"status": "completed"},
                           headers=owner["headers"]).json()
    assert completed["pagination"]["total"] == 1


def test_pay_from_wallet(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "500")

    response = client.post("/api/payment/pay-from-wallet", json={"trip_id": trip["id"], "amount": "320"},
                           headers=traveler["headers"])
    assert response.status_code == 200
    result = response.json()
    assert result["success"] is True
    assert Decimal(result["new_balance"]) == 180
    booking = result["booking"]
    assert booking["status"] == "confirmed"
    assert booking["payment_status"] == "paid"
    assert booking["payment_method"] == "wallet"
    assert booking["payment_id"].startswith(f"trip_{trip['id']}_")
    assert booking["destination"] == "Interlaken, Switzerland"

    payments = client.get("/api/wallet/transactions", params={"type": "booking_payment"},
                          headers=traveler["headers"]).json()
    assert payments["transactions"][0]["reference_id"] == booking["payment_id"]


def test_pay_from_wallet_insufficient_balance(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "50")

    response = client.post("/api/payment/pay-from-wallet", json={"trip_id": trip["id"], "amount": "100"},
                           headers=traveler["headers"])
    assert response.status_code == 400
    assert "Insufficient Wallet Balance" in response.json()["detail"]
    assert balance(client, traveler["headers"]) == 50
    assert client.get("/api/bookings/my-bookings", headers=traveler["headers"]).json()["bookings"] == []


def test_pay_for_unknown_trip(client, auth_headers):
    fund(client, auth_headers, "50")
    response = client.post("/api/payment/pay-from-wallet", json={"trip_id": 999, "amount": "10"},
                           headers=auth_headers)
    assert response.status_code == 404
    assert balance(client, auth_headers) == 50


def test_failed_payment_commit_leaves_balance_untouched(client, make_user, create_trip, monkeypatch):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "200")

    def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    with monkeypatch.context() as patch:
        patch.setattr(Session, "commit", failing_commit)
        response = client.post("/api/payment/pay-from-wallet", json={"trip_id": trip["id"], "amount": "120"},
                               headers=traveler["headers"])
    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to pay from wallet")

    assert balance(client, traveler["headers"]) == 200
    assert client.get("/api/bookings/my-bookings", headers=traveler["headers"]).json()["bookings"] == []


def test_cancel_wallet_booking_refunds(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "300")
    booking = client.post("/api/payment/pay-from-wallet", json={"trip_id": trip["id"], "amount": "300"},
                          headers=traveler["headers"]).json()["booking"]

    response = client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"},
                            headers=traveler["headers"])
    assert response.status_code == 200
    assert response.json()["payment_status"] == "refunded"
    assert balance(client, traveler["headers"]) == 300

    refunds = client.get("/api/wallet/transactions", params={"type": "refund"},
                         headers=traveler["headers"]).json()
    assert refunds["pagination"]["total"] == 1


def test_second_payment_for_paid_trip_is_rejected(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "100")
    pay = {"trip_id": trip["id"], "amount": "30"}

    booking = client.post("/api/payment/pay-from-wallet", json=pay, headers=traveler["headers"]).json()["booking"]
    again = client.post("/api/payment/pay-from-wallet", json=dict(pay, amount="20"), headers=traveler["headers"])
    assert again.status_code == 409
    assert balance(client, traveler["headers"]) == 70

    client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "cancelled"},
                 headers=traveler["headers"])
    assert balance(client, traveler["headers"]) == 100


def test_paying_after_cancel_opens_a_new_booking(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "100")
    pay = {"trip_id": trip["id"], "amount": "40"}

    first = client.post("/api/payment/pay-from-wallet", json=pay, headers=traveler["headers"]).json()["booking"]
    client.patch(f"/api/bookings/{first['id']}/status", json={"status": "cancelled"}, headers=traveler["headers"])

    second = client.post("/api/payment/pay-from-wallet", json=pay, headers=traveler["headers"]).json()["booking"]
    assert second["id"] != first["id"]
    assert balance(client, traveler["headers"]) == 60

    cancelled = client.patch(f"/api/bookings/{second['id']}/status", json={"status": "cancelled"},
                             headers=traveler["headers"])
    assert cancelled.status_code == 200
    assert cancelled.json()["payment_status"] == "refunded"
    assert balance(client, traveler["headers"]) == 100

    bookings = client.get("/api/bookings/my-bookings", params={"status": "cancelled"},
                          headers=traveler["headers"]).json()
    assert bookings["pagination"]["total"] == 2


def test_pending_trip_booking_is_paid_in_place(client, make_user, create_trip):
    organizer = make_user()
    traveler = make_user()
    trip = create_trip(organizer["headers"])
    fund(client, traveler["headers"], "100")
    pending = client.post("/api/bookings", json={"trip_id": trip["id"], "booking_type": "trip"},
                          headers=traveler["headers"]).json()

    paid = client.post("/api/payment/pay-from-wallet", json={"trip_id": trip["id"], "amount": "25"},
                       headers=traveler["headers"]).json()["booking"]
    assert paid["id"] == pending["id"]
    assert paid["status"] == "confirmed"
