"""
Travel clubs, their members and posts.
"""
import enum
from sqlalchemy import Column, String, Boolean, Text, JSON, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class ClubRole(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class Club(BaseModel):
    __tablename__ = "clubs"

    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    image_url = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    creator = relationship("User")
    members = relationship("ClubMember", back_populates="club", cascade="all, delete-orphan")
    posts = relationship("ClubPost", back_populates="club", cascade="all, delete-orphan")


class ClubMember(BaseModel):
    __tablename__ = "club_members"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SQLEnum(ClubRole), default=ClubRole.MEMBER, nullable=False)

    club = relationship("Club", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('club_id', 'user_id', name='uq_club_member'),
    )


class ClubPost(BaseModel):
    __tablename__ = "club_posts"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)

    club = relationship("Club", back_populates="posts")
    author = relationship("User")
