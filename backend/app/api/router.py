"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import (
    auth, users, follows, trips, journeys, stories,
    clubs, notifications, budget, wallet, bookings, search
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(follows.router)
api_router.include_router(trips.router)
api_router.include_router(journeys.router)
api_router.include_router(stories.router)
api_router.include_router(clubs.router)
api_router.include_router(notifications.router)
api_router.include_router(budget.router)
api_router.include_router(wallet.router)
api_router.include_router(bookings.router)
api_router.include_router(bookings.payment_router)
api_router.include_router(search.router)
