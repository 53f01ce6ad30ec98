"""
Wallet routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.wallet import TransactionType
from app.schemas.wallet import (
    WalletResponse, DepositRequest, WithdrawRequest, TransactionResult,
    TransactionListResponse, WalletSummary
)
from app.core.utils import pagination_meta
from app.services import wallet_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("", response_model=WalletResponse)
async def get_wallet(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get your wallet balance."""
    return wallet_service.get_or_create_wallet(current_user.id, db)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    pagination: Pagination = Depends(),
    transaction_type: Optional[TransactionType] = Query(None, alias="type"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    rows, total = wallet_service.list_transactions(
        current_user.id, pagination.page, pagination.limit, transaction_type=transaction_type, db=db
    )
    return {"transactions": rows, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.get("/summary", response_model=WalletSummary)
async def get_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return wallet_service.wallet_summary(current_user.id, db)


@router.post("/deposit", response_model=TransactionResult, status_code=status.HTTP_201_CREATED)
async def deposit(
    body: DepositRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Credit the wallet."""
    return wallet_service.process_transaction(
        user_id=current_user.id,
        amount=body.amount,
        transaction_type=TransactionType.DEPOSIT,
        description=body.description or "Wallet deposit",
        reference_id=body.reference_id,
        db=db,
    )


@router.post("/withdraw", response_model=TransactionResult, status_code=status.HTTP_201_CREATED)
async def withdraw(
    body: WithdrawRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Request a withdrawal; the amount is reserved immediately and stays pending."""
    return wallet_service.process_transaction(
        user_id=current_user.id,
        amount=body.amount,
        transaction_type=TransactionType.WITHDRAWAL,
        description=body.description or "Withdrawal request",
        db=db,
    )
