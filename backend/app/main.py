"""
FastAPI entrypoint for the WanderSphere backend application.
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.api.router import api_router
from app.db.session import init_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STARTED_AT = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.APP_NAME} API started")
    yield


app = FastAPI(
    title="WanderSphere API",
    description="Backend API for social travel planning",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Service banner."""
    return {
        "message": f"{settings.APP_NAME} API is running",
        "version": app.version,
        "endpoints": {
            "auth": "/api/auth",
            "users": "/api/users",
            "follows": "/api/follows",
            "trips": "/api/trips",
            "journeys": "/api/journeys",
            "stories": "/api/stories",
            "clubs": "/api/clubs",
            "notifications": "/api/notifications",
            "budget": "/api/budget",
            "wallet": "/api/wallet",
            "bookings": "/api/bookings",
            "payment": "/api/payment",
            "search": "/api/search",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "uptime": round(time.time() - STARTED_AT, 3),
    }
