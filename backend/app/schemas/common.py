"""
Shared response schemas.
"""
from pydantic import BaseModel
from typing import Optional


class UserSummary(BaseModel):
    """Compact user representation embedded in other resources."""
    id: int
    username: str
    first_name: str
    last_name: str = ""
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    has_more: bool


class MessageResponse(BaseModel):
    message: str
