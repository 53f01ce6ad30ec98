"""
Wallet service: the locked balance ledger.

Every balance change goes through ``process_transaction``, which row-locks the
wallet, applies the signed amount and writes the ledger entry together.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import BadRequestError, ConflictError, InsufficientBalanceError, service_operation
from app.core.utils import paginate
from app.models.wallet import (
    Wallet, WalletTransaction, TransactionType, TransactionStatus, CREDIT_TYPES, DEBIT_TYPES
)

logger = logging.getLogger(__name__)


def _signed_amount(amount, transaction_type: TransactionType) -> Decimal:
    """Credits must be positive; debits are always applied as negative amounts."""
    value = Decimal(str(amount))
    if value == 0:
        raise BadRequestError("Transaction amount must be non-zero")
    if transaction_type in CREDIT_TYPES:
        if value < 0:
            raise BadRequestError(f"{transaction_type.value} amount must be positive")
        return value
    if transaction_type in DEBIT_TYPES:
        return -abs(value)
    raise BadRequestError(f"Unsupported transaction type: {transaction_type}")


def _locked_wallet(user_id: int, db: Session) -> Wallet:
    """Fetch the user's wallet with a row lock, creating it on first use."""
    wallet = db.query(Wallet).filter(Wallet.user_id == user_id).with_for_update().first()
    if wallet is None:
        wallet = Wallet(user_id=user_id, balance=Decimal(0), currency=settings.WALLET_CURRENCY)
        db.add(wallet)
        db.flush()
    return wallet


@service_operation("get wallet")
def get_or_create_wallet(user_id: int, db: Session) -> Wallet:
    wallet = db.query(Wallet).filter(Wallet.user_id == user_id).first()
    if wallet is None:
        wallet = Wallet(user_id=user_id, balance=Decimal(0), currency=settings.WALLET_CURRENCY)
        db.add(wallet)
        db.commit()
        db.refresh(wallet)
    return wallet


@service_operation("process wallet transaction")
def process_transaction(
    user_id: int,
    amount,
    transaction_type: TransactionType,
    description: Optional[str] = None,
    reference_id: Optional[str] = None,
    commit: bool = True,
    db: Session = None
) -> dict:
    """
    Apply a signed amount to the user's wallet.

    Raises InsufficientBalanceError when the balance would go negative and
    ConflictError when reference_id was already used on this wallet.
    With commit=False the caller owns the transaction (used to pair a debit
    with a booking write).
    """
    signed = _signed_amount(amount, transaction_type)
    wallet = _locked_wallet(user_id, db)

    if reference_id and db.query(WalletTransaction).filter(
        WalletTransaction.wallet_id == wallet.id,
        WalletTransaction.reference_id == reference_id
    ).first():
        raise ConflictError(f"Transaction with reference {reference_id} already processed")

    previous_balance = Decimal(str(wallet.balance or 0))
    new_balance = previous_balance + signed
    if new_balance < 0:
        raise InsufficientBalanceError(
            f"Insufficient Wallet Balance. Current: {previous_balance}, Requested: {abs(signed)}"
        )

    status = TransactionStatus.PENDING if transaction_type == TransactionType.WITHDRAWAL \
        else TransactionStatus.COMPLETED
    transaction = WalletTransaction(
        wallet_id=wallet.id,
        type=transaction_type,
        amount=signed,
        description=description,
        reference_id=reference_id,
        status=status,
    )
    wallet.balance = new_balance
    db.add(transaction)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"Transaction with reference {reference_id} already processed") from e

    if commit:
        db.commit()
    logger.info(
        f"Wallet {wallet.id} {transaction_type.value} {signed}: {previous_balance} -> {new_balance}"
    )
    return {
        "transaction_id": transaction.id,
        "previous_balance": previous_balance,
        "new_balance": new_balance,
        "status": status,
    }


@service_operation("fetch wallet transactions")
def list_transactions(
    user_id: int,
    page: int,
    limit: int,
    transaction_type: Optional[TransactionType] = None,
    db: Session = None
) -> Tuple[List[WalletTransaction], int]:
    wallet = get_or_create_wallet(user_id, db)
    query = db.query(WalletTransaction).filter(WalletTransaction.wallet_id == wallet.id)
    if transaction_type is not None:
        query = query.filter(WalletTransaction.type == transaction_type)
    total = query.count()
    rows = paginate(query.order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc()), page, limit)
    return rows, total


@service_operation("build wallet summary")
def wallet_summary(user_id: int, db: Session) -> dict:
    wallet = get_or_create_wallet(user_id, db)
    base = db.query(WalletTransaction).filter(WalletTransaction.wallet_id == wallet.id)
    deposits = base.filter(WalletTransaction.amount > 0).with_entities(
        func.coalesce(func.sum(WalletTransaction.amount), 0)
    ).scalar()
    withdrawals = base.filter(WalletTransaction.amount < 0).with_entities(
        func.coalesce(func.sum(WalletTransaction.amount), 0)
    ).scalar()
    return {
        "balance": Decimal(str(wallet.balance or 0)),
        "currency": wallet.currency,
        "transaction_count": base.count(),
        "total_deposits": Decimal(str(deposits or 0)),
        "total_withdrawals": abs(Decimal(str(withdrawals or 0))),
    }
