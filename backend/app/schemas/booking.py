"""
Pydantic schemas for bookings and wallet payments.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal
from app.models.booking import BookingType, BookingStatus, PaymentStatus
from app.schemas.common import PaginationMeta


class BookingCreate(BaseModel):
    trip_id: Optional[int] = None
    partner_id: Optional[str] = Field(None, max_length=50)
    booking_type: BookingType = BookingType.TRIP
    destination: Optional[str] = Field(None, max_length=200)
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    guests: int = Field(1, ge=1)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    booking_details: Dict[str, Any] = {}


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: int
    user_id: int
    trip_id: Optional[int] = None
    partner_id: Optional[str] = None
    booking_type: BookingType
    destination: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    guests: int
    total_amount: Optional[Decimal] = None
    currency: str
    booking_details: Dict[str, Any] = {}
    status: BookingStatus
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    payment_id: Optional[str] = None
    amount_paid: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    pagination: PaginationMeta


class PayFromWalletRequest(BaseModel):
    trip_id: int
    amount: Decimal = Field(..., gt=0)


class PaymentResult(BaseModel):
    success: bool = True
    booking: BookingResponse
    transaction_id: int
    new_balance: Decimal


class BookingPartner(BaseModel):
    id: str
    name: str
    category: BookingType
    description: str
    commission_rate: float
    rating: float
