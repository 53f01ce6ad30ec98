"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.follow import Follow, FollowStatus, BlockedUser
from app.models.trip import (
    Trip, TripParticipant, TripLike, TripComment, TripStatus, TripCategory,
    TripDifficulty, TripVisibility, ParticipantStatus, ParticipantRole
)
from app.models.journey import Journey, JourneyLike, JourneyComment
from app.models.story import Story, StoryView, MediaType
from app.models.club import Club, ClubMember, ClubPost, ClubRole
from app.models.notification import Notification, NotificationType
from app.models.budget import Budget, BudgetExpense
from app.models.wallet import Wallet, WalletTransaction, TransactionType, TransactionStatus
from app.models.booking import Booking, BookingType, BookingStatus, PaymentStatus

__all__ = [
    "User",
    "Follow",
    "FollowStatus",
    "BlockedUser",
    "Trip",
    "TripParticipant",
    "TripLike",
    "TripComment",
    "TripStatus",
    "TripCategory",
    "TripDifficulty",
    "TripVisibility",
    "ParticipantStatus",
    "ParticipantRole",
    "Journey",
    "JourneyLike",
    "JourneyComment",
    "Story",
    "StoryView",
    "MediaType",
    "Club",
    "ClubMember",
    "ClubPost",
    "ClubRole",
    "Notification",
    "NotificationType",
    "Budget",
    "BudgetExpense",
    "Wallet",
    "WalletTransaction",
    "TransactionType",
    "TransactionStatus",
    "Booking",
    "BookingType",
    "BookingStatus",
    "PaymentStatus",
]
