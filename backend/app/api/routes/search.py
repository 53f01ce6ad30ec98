"""
Search routes.
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.search import SearchResults, Suggestion, PopularResponse
from app.services import search_service

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResults)
async def search(
    q: str = Query(""),
    type: str = Query("all"),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Search users, trips, journeys and clubs."""
    return search_service.search(q, type, limit, db)


@router.get("/suggestions", response_model=List[Suggestion])
async def suggestions(q: str = Query(""), db: Session = Depends(get_db)):
    return search_service.suggestions(q, db)


@router.get("/popular", response_model=PopularResponse)
async def popular(db: Session = Depends(get_db)):
    return search_service.popular(db)


@router.get("/filters")
async def filters():
    return search_service.filters()
