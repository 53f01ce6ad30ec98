"""
Authentication routes for registration, login, token refresh and logout.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.user import UserCreate, UserLogin, RefreshRequest, TokenPair, AuthResponse, UserResponse
from app.schemas.common import MessageResponse
from app.models.user import User
from app.core.security import create_token_pair, decode_token, REFRESH_TOKEN_TYPE
from app.services import user_service
from app.api.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and sign them in."""
    user = user_service.register_user(user_data, db)
    return {"user": user, **create_token_pair(user.id)}


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login with email or username and get JWT tokens."""
    user = user_service.authenticate(credentials.identifier, credentials.password, db)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email/username or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    user = user_service.record_login(user, db)
    return {"user": user, **create_token_pair(user.id)}


@router.post("/refresh", response_model=TokenPair)
async def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair."""
    user_id = decode_token(body.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    user = db.query(User).filter(User.id == user_id).first() if user_id is not None else None
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )
    return create_token_pair(user.id)


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """Logout (tokens are discarded client-side)."""
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user
