"""
Booking service: partner catalogue, bookings and wallet payments.
"""
import logging
import time
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.cache import response_cache, CacheKeys, CacheTTL
from app.core.errors import BadRequestError, ConflictError, NotFoundError, service_operation
from app.core.utils import paginate
from app.models.booking import Booking, BookingType, BookingStatus, PaymentStatus
from app.models.user import User
from app.models.wallet import TransactionType
from app.schemas.booking import BookingCreate
from app.services import wallet_service
from app.services.trip_service import get_active_trip, get_visible_trip

logger = logging.getLogger(__name__)

WALLET_PAYMENT_METHOD = "wallet"

PARTNERS = [
    {
        "id": "stayscape",
        "name": "StayScape Hotels",
        "category": BookingType.HOTEL,
        "description": "Hotels, hostels and homestays",
        "commission_rate": 8.0,
        "rating": 4.5,
    },
    {
        "id": "skyhop",
        "name": "SkyHop Flights",
        "category": BookingType.FLIGHT,
        "description": "Domestic and international flights",
        "commission_rate": 3.0,
        "rating": 4.3,
    },
    {
        "id": "roadrunner",
        "name": "RoadRunner Transit",
        "category": BookingType.TRANSPORT,
        "description": "Buses, trains and cabs",
        "commission_rate": 5.0,
        "rating": 4.1,
    },
    {
        "id": "trailquest",
        "name": "TrailQuest Activities",
        "category": BookingType.ACTIVITY,
        "description": "Tours, treks and local experiences",
        "commission_rate": 10.0,
        "rating": 4.6,
    },
]

FEATURES = [
    {"id": "wallet_payments", "title": "Pay from wallet", "description": "Use your wallet balance to pay for trips"},
    {"id": "instant_refunds", "title": "Instant refunds", "description": "Cancelled wallet bookings are refunded to your wallet"},
    {"id": "group_bookings", "title": "Group bookings", "description": "Book for every participant of a trip"},
    {"id": "price_alerts", "title": "Price alerts", "description": "Get notified when prices drop"},
]

# allowed status transitions; terminal states are absent
STATUS_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
}


def partners() -> List[dict]:
    cached = response_cache.get(CacheKeys.BOOKING_PARTNERS)
    if cached is None:
        cached = [dict(p) for p in PARTNERS]
        response_cache.set(CacheKeys.BOOKING_PARTNERS, cached, ttl=CacheTTL.VERY_LONG)
    return cached


def features() -> List[dict]:
    cached = response_cache.get(CacheKeys.BOOKING_FEATURES)
    if cached is None:
        cached = [dict(f) for f in FEATURES]
        response_cache.set(CacheKeys.BOOKING_FEATURES, cached, ttl=CacheTTL.VERY_LONG)
    return cached


@service_operation("fetch bookings")
def my_bookings(
    user: User,
    page: int,
    limit: int,
    status: Optional[BookingStatus] = None,
    db: Session = None
) -> Tuple[List[Booking], int]:
    query = db.query(Booking).filter(Booking.user_id == user.id)
    if status is not None:
        query = query.filter(Booking.status == status)
    total = query.count()
    return paginate(query.order_by(Booking.created_at.desc(), Booking.id.desc()), page, limit), total


@service_operation("create booking")
def create_booking(user: User, data: BookingCreate, db: Session) -> Booking:
    if data.check_in_date and data.check_out_date and data.check_out_date < data.check_in_date:
        raise BadRequestError("Check-out date must be on or after check-in date")
    if data.trip_id is not None:
        get_active_trip(data.trip_id, db)

    values = data.model_dump()
    values["currency"] = data.currency.upper()
    booking = Booking(user_id=user.id, **values)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def _get_owned(booking_id: int, user: User, db: Session) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id, Booking.user_id == user.id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


@service_operation("update booking status")
def update_status(user: User, booking_id: int, status: BookingStatus, db: Session) -> Booking:
    """
    Move a booking to a new status. Cancelling a booking paid from the wallet
    refunds the paid amount in the same transaction.
    """
    booking = _get_owned(booking_id, user, db)
    if status == booking.status:
        return booking
    if status not in STATUS_TRANSITIONS.get(booking.status, set()):
        raise BadRequestError(f"Cannot change booking from {booking.status.value} to {status.value}")

    if status == BookingStatus.CANCELLED and booking.payment_status == PaymentStatus.PAID \
            and booking.payment_method == WALLET_PAYMENT_METHOD and booking.amount_paid:
        wallet_service.process_transaction(
            user_id=user.id,
            amount=booking.amount_paid,
            transaction_type=TransactionType.REFUND,
            description=f"Refund for booking #{booking.id}",
            reference_id=f"refund_{booking.payment_id}",
            commit=False,
            db=db,
        )
        booking.payment_status = PaymentStatus.REFUNDED
        logger.info(f"Refunded {booking.amount_paid} to wallet for booking {booking.id}")

    booking.status = status
    db.commit()
    db.refresh(booking)
    return booking


def _open_trip_booking(user: User, trip_id: int, db: Session) -> Optional[Booking]:
    """The user's booking for the trip that is still pending or confirmed."""
    return db.query(Booking).filter(
        Booking.user_id == user.id,
        Booking.trip_id == trip_id,
        Booking.booking_type == BookingType.TRIP,
        Booking.status.in_([BookingStatus.PENDING, BookingStatus.CONFIRMED])
    ).order_by(Booking.created_at.desc(), Booking.id.desc()).first()


@service_operation("pay from wallet")
def pay_from_wallet(user: User, trip_id: int, amount: Decimal, db: Session) -> dict:
    """
    Debit the wallet and confirm the trip booking as a single commit.

    An open unpaid booking for the trip is paid; otherwise a new booking is
    created. Cancelled and completed bookings are never reopened.
    """
    trip = get_visible_trip(trip_id, user, db)
    booking = _open_trip_booking(user, trip_id, db)
    if booking is not None and booking.payment_status == PaymentStatus.PAID:
        raise ConflictError("This trip booking is already paid")

    reference_id = f"trip_{trip_id}_{int(time.time() * 1000)}"
    result = wallet_service.process_transaction(
        user_id=user.id,
        amount=amount,
        transaction_type=TransactionType.BOOKING_PAYMENT,
        description=f"Payment for trip: {trip.title}",
        reference_id=reference_id,
        commit=False,
        db=db,
    )

    if booking is None:
        booking = Booking(
            user_id=user.id,
            trip_id=trip_id,
            booking_type=BookingType.TRIP,
            destination=", ".join(
                part for part in (trip.destination.get("city"), trip.destination.get("country")) if part
            ),
            check_in_date=trip.start_date,
            check_out_date=trip.end_date,
            total_amount=amount,
            currency=(trip.budget or {}).get("currency", "USD"),
        )
        db.add(booking)
    booking.status = BookingStatus.CONFIRMED
    booking.payment_status = PaymentStatus.PAID
    booking.payment_method = WALLET_PAYMENT_METHOD
    booking.payment_id = reference_id
    booking.amount_paid = amount
    db.commit()
    db.refresh(booking)
    logger.info(f"User {user.id} paid {amount} for trip {trip_id} from wallet")

    return {
        "success": True,
        "booking": booking,
        "transaction_id": result["transaction_id"],
        "new_balance": result["new_balance"],
    }
