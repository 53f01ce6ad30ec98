"""
Wallet and transaction ledger.
"""
import enum
from sqlalchemy import Column, String, Text, Numeric, Enum as SQLEnum, ForeignKey, Integer, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class TransactionType(str, enum.Enum):
    DEPOSIT = "deposit"
    BOOKING_PAYMENT = "booking_payment"
    REFUND = "refund"
    WITHDRAWAL = "withdrawal"
    CASHBACK = "cashback"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


CREDIT_TYPES = {TransactionType.DEPOSIT, TransactionType.REFUND, TransactionType.CASHBACK}
DEBIT_TYPES = {TransactionType.BOOKING_PAYMENT, TransactionType.WITHDRAWAL}


class Wallet(BaseModel):
    """Per-user stored balance."""
    __tablename__ = "wallets"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")

    user = relationship("User", back_populates="wallet")
    transactions = relationship("WalletTransaction", back_populates="wallet", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('balance >= 0', name='ck_wallet_balance_non_negative'),
    )


class WalletTransaction(BaseModel):
    """Signed ledger entry; credits are positive, debits negative."""
    __tablename__ = "wallet_transactions"

    wallet_id = Column(Integer, ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SQLEnum(TransactionType), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    reference_id = Column(String(100), nullable=True)
    status = Column(SQLEnum(TransactionStatus), default=TransactionStatus.COMPLETED, nullable=False)

    wallet = relationship("Wallet", back_populates="transactions")

    __table_args__ = (
        UniqueConstraint('wallet_id', 'reference_id', name='uq_wallet_reference'),
    )
