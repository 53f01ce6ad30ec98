"""
Booking routes and wallet payment.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.booking import BookingStatus
from app.schemas.booking import (
    BookingCreate, BookingStatusUpdate, BookingResponse, BookingListResponse,
    BookingPartner, PayFromWalletRequest, PaymentResult
)
from app.core.utils import pagination_meta
from app.services import booking_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter(prefix="/bookings", tags=["bookings"])
payment_router = APIRouter(prefix="/payment", tags=["payment"])


@router.get("/partners", response_model=List[BookingPartner])
async def get_partners():
    return booking_service.partners()


@router.get("/features")
async def get_features():
    return booking_service.features()


@router.get("/my-bookings", response_model=BookingListResponse)
async def my_bookings(
    pagination: Pagination = Depends(),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    rows, total = booking_service.my_bookings(
        current_user, pagination.page, pagination.limit, status=booking_status, db=db
    )
    return {"bookings": rows, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return booking_service.create_booking(current_user, data, db)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change booking status; cancelling a wallet-paid booking refunds it."""
    return booking_service.update_status(current_user, booking_id, body.status, db)


@payment_router.post("/pay-from-wallet", response_model=PaymentResult)
async def pay_from_wallet(
    body: PayFromWalletRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pay for a trip with the wallet balance."""
    return booking_service.pay_from_wallet(current_user, body.trip_id, body.amount, db)
