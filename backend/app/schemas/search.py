"""
Pydantic schemas for search.
"""
from pydantic import BaseModel
from typing import Any, Dict, List


class SearchResults(BaseModel):
    query: str
    type: str
    users: List[Dict[str, Any]] = []
    trips: List[Dict[str, Any]] = []
    journeys: List[Dict[str, Any]] = []
    clubs: List[Dict[str, Any]] = []
    total: int = 0


class Suggestion(BaseModel):
    type: str
    id: int
    text: str


class PopularResponse(BaseModel):
    tags: List[Dict[str, Any]]
    destinations: List[Dict[str, Any]]
