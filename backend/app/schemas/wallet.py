"""
Pydantic schemas for wallet and transactions.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from app.models.wallet import TransactionType, TransactionStatus
from app.schemas.common import PaginationMeta


class WalletResponse(BaseModel):
    id: int
    user_id: int
    balance: Decimal
    currency: str
    updated_at: datetime

    class Config:
        from_attributes = True


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    reference_id: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class WithdrawRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None


class TransactionResult(BaseModel):
    transaction_id: int
    previous_balance: Decimal
    new_balance: Decimal
    status: TransactionStatus


class TransactionResponse(BaseModel):
    id: int
    wallet_id: int
    type: TransactionType
    amount: Decimal
    description: Optional[str] = None
    reference_id: Optional[str] = None
    status: TransactionStatus
    created_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    pagination: PaginationMeta


class WalletSummary(BaseModel):
    balance: Decimal
    currency: str
    transaction_count: int
    total_deposits: Decimal
    total_withdrawals: Decimal
