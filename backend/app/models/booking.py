"""
Bookings for trips and partner travel products.
"""
import enum
from sqlalchemy import Column, String, Date, JSON, Numeric, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class BookingType(str, enum.Enum):
    TRIP = "trip"
    HOTEL = "hotel"
    FLIGHT = "flight"
    ACTIVITY = "activity"
    TRANSPORT = "transport"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"


class Booking(BaseModel):
    __tablename__ = "bookings"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    partner_id = Column(String(50), nullable=True)
    booking_type = Column(SQLEnum(BookingType), default=BookingType.TRIP, nullable=False)
    destination = Column(String(200), nullable=True)
    check_in_date = Column(Date, nullable=True)
    check_out_date = Column(Date, nullable=True)
    guests = Column(Integer, default=1, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    booking_details = Column(JSON, nullable=False, default=dict)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False)
    payment_method = Column(String(20), nullable=True)
    payment_id = Column(String(100), nullable=True)
    amount_paid = Column(Numeric(12, 2), nullable=True)

    user = relationship("User", back_populates="bookings")
    trip = relationship("Trip")
