"""
Tests for wallet endpoints.
"""
from decimal import Decimal

import pytest

from app.core.errors import BadRequestError
from app.models.wallet import TransactionType
from app.services.wallet_service import _signed_amount


def deposit(client, headers, amount, **extra):
    return client.post("/api/wallet/deposit", json=dict(amount=amount, **extra), headers=headers)


def test_wallet_created_on_first_access(client, auth_headers):
    wallet = client.get("/api/wallet", headers=auth_headers).json()
    assert Decimal(wallet["balance"]) == 0
    assert wallet["currency"] == "INR"


def test_deposit_and_withdraw(client, auth_headers):
    result = deposit(client, auth_headers, "250").json()
    assert Decimal(result["previous_balance"]) == 0
    assert Decimal(result["new_balance"]) == 250
    assert result["status"] == "completed"

    withdrawal = client.post("/api/wallet/withdraw", json={"amount": "100"}, headers=auth_headers)
    assert withdrawal.status_code == 201
    assert withdrawal.json()["status"] == "pending"
    assert Decimal(client.get("/api/wallet", headers=auth_headers).json()["balance"]) == 150


def test_insufficient_balance(client, auth_headers):
    deposit(client, auth_headers, "20")
    response = client.post("/api/wallet/withdraw", json={"amount": "50"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Insufficient Wallet Balance")
    assert Decimal(client.get("/api/wallet", headers=auth_headers).json()["balance"]) == 20


def test_duplicate_reference_is_rejected(client, auth_headers):
    assert deposit(client, auth_headers, "10", reference_id="topup-1").status_code == 201
    response = deposit(client, auth_headers, "10", reference_id="topup-1")
    assert response.status_code == 409
    assert Decimal(client.get("/api/wallet", headers=auth_headers).json()["balance"]) == 10


def test_amount_validation(client, auth_headers):
    assert deposit(client, auth_headers, "0").status_code == 422
    assert deposit(client, auth_headers, "-5").status_code == 422


def test_signed_amounts():
    assert _signed_amount("5", TransactionType.BOOKING_PAYMENT) == Decimal("-5")
    assert _signed_amount("5", TransactionType.REFUND) == Decimal("5")
    with pytest.raises(BadRequestError):
        _signed_amount("-5", TransactionType.DEPOSIT)
    with pytest.raises(BadRequestError):
        _signed_amount("0", TransactionType.WITHDRAWAL)


def test_transactions_and_summary(client, auth_headers):
    deposit(client, auth_headers, "100")
    deposit(client, auth_headers, "50")
    client.post("/api/wallet/withdraw", json={"amount": "30"}, headers=auth_headers)

    listed = client.get("/api/wallet/transactions", headers=auth_headers).json()
    assert listed["pagination"]["total"] == 3
    assert listed["transactions"][0]["type"] == "withdrawal"
    assert Decimal(listed["transactions"][0]["amount"]) == Decimal("-30")

    deposits = client.get("/api/wallet/transactions", params={"type": "deposit"}, headers=auth_headers).json()
    assert deposits["pagination"]["total"] == 2

    summary = client.get("/api/wallet/summary", headers=auth_headers).json()
    assert Decimal(summary["balance"]) == 120
    assert Decimal(summary["total_deposits"]) == 150
    assert Decimal(summary["total_withdrawals"]) == 30
    assert summary["transaction_count"] == 3


def test_wallet_requires_auth(client):
    assert client.get("/api/wallet").status_code == 401
