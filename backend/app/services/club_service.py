"""
Club service for travel clubs, membership and posts.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.cache import response_cache, CacheKeys, CacheTTL
from app.core.errors import BadRequestError, ConflictError, NotFoundError, PermissionDeniedError, service_operation
from app.core.utils import paginate
from app.models.club import Club, ClubMember, ClubPost, ClubRole
from app.models.user import User
from app.schemas.club import ClubCreate, ClubResponse

logger = logging.getLogger(__name__)

UNKNOWN_ORGANIZER = "Unknown User"


def invalidate_clubs(club_id: Optional[int] = None) -> None:
    response_cache.remove(CacheKeys.clubs())
    if club_id is not None:
        response_cache.remove(CacheKeys.club_detail(club_id))
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)


def _member_counts(db: Session) -> dict:
    rows = db.query(ClubMember.club_id, func.count(ClubMember.id)).group_by(ClubMember.club_id).all()
    return {club_id: count for club_id, count in rows}


def _member_club_ids(user: Optional[User], db: Session) -> set:
    if user is None:
        return set()
    return {row.club_id for row in db.query(ClubMember.club_id).filter(ClubMember.user_id == user.id).all()}


def get_membership(club_id: int, user_id: int, db: Session) -> Optional[ClubMember]:
    return db.query(ClubMember).filter(
        ClubMember.club_id == club_id, ClubMember.user_id == user_id
    ).first()


def get_club(club_id: int, db: Session) -> Club:
    club = db.query(Club).filter(Club.id == club_id).first()
    if not club:
        raise NotFoundError("Club not found")
    return club


@service_operation("fetch clubs")
def list_clubs(viewer: Optional[User], db: Session) -> List[dict]:
    """All clubs with member counts; the list is cached without per-user flags."""
    clubs = response_cache.get(CacheKeys.clubs())
    if clubs is None:
        counts = _member_counts(db)
        clubs = [
            dict(ClubResponse.model_validate(club).model_dump(), member_count=counts.get(club.id, 0))
            for club in db.query(Club).order_by(Club.created_at.desc(), Club.id.desc()).all()
        ]
        response_cache.set(CacheKeys.clubs(), clubs, ttl=CacheTTL.MEDIUM)

    member_of = _member_club_ids(viewer, db)
    return [dict(club, is_member=club["id"] in member_of) for club in clubs]


@service_operation("fetch created clubs")
def my_created(user: User, db: Session) -> List[dict]:
    counts = _member_counts(db)
    return [
        dict(ClubResponse.model_validate(club).model_dump(), member_count=counts.get(club.id, 0), is_member=True)
        for club in db.query(Club).filter(Club.created_by == user.id).order_by(Club.created_at.desc()).all()
    ]


@service_operation("fetch club")
def club_detail(club_id: int, viewer: Optional[User], db: Session) -> dict:
    key = CacheKeys.club_detail(club_id)
    body = response_cache.get(key)
    if body is None:
        club = get_club(club_id, db)
        creator = club.creator
        organizer = {
            "id": creator.id if creator else None,
            "name": creator.full_name if creator else UNKNOWN_ORGANIZER,
            "avatar": creator.avatar if creator else None,
        }
        body = dict(
            ClubResponse.model_validate(club).model_dump(),
            member_count=db.query(ClubMember).filter(ClubMember.club_id == club_id).count(),
            organizer=organizer,
        )
        response_cache.set(key, body, ttl=CacheTTL.MEDIUM)

    membership = get_membership(club_id, viewer.id, db) if viewer is not None else None
    return dict(body, is_member=membership is not None, role=membership.role if membership else None)


@service_operation("create club")
def create_club(user: User, data: ClubCreate, db: Session) -> dict:
    """Create a club; the creator becomes its owner."""
    if db.query(Club).filter(func.lower(Club.name) == data.name.strip().lower()).first():
        raise ConflictError("A club with this name already exists")
    club = Club(
        name=data.name.strip(),
        description=data.description,
        image_url=data.image_url,
        category=data.category,
        is_private=data.is_private,
        created_by=user.id,
    )
    db.add(club)
    db.flush()
    db.add(ClubMember(club_id=club.id, user_id=user.id, role=ClubRole.OWNER))
    db.commit()
    db.refresh(club)
    invalidate_clubs()
    logger.info(f"User {user.id} created club {club.id}")
    return dict(ClubResponse.model_validate(club).model_dump(), member_count=1, is_member=True)


@service_operation("join club")
def join_club(user: User, club_id: int, db: Session) -> ClubMember:
    get_club(club_id, db)
    if get_membership(club_id, user.id, db):
        raise ConflictError("You are already a member of this club")
    member = ClubMember(club_id=club_id, user_id=user.id, role=ClubRole.MEMBER)
    db.add(member)
    db.commit()
    db.refresh(member)
    invalidate_clubs(club_id)
    return member


@service_operation("leave club")
def leave_club(user: User, club_id: int, db: Session) -> None:
    get_club(club_id, db)
    member = get_membership(club_id, user.id, db)
    if not member:
        raise NotFoundError("You are not a member of this club")
    if member.role == ClubRole.OWNER:
        raise BadRequestError("The club owner cannot leave the club")
    db.delete(member)
    db.commit()
    invalidate_clubs(club_id)


@service_operation("fetch club members")
def list_members(club_id: int, db: Session) -> List[dict]:
    get_club(club_id, db)
    members = db.query(ClubMember).options(joinedload(ClubMember.user)).filter(
        ClubMember.club_id == club_id
    ).order_by(ClubMember.created_at).all()
    return [{"user": m.user, "role": m.role, "joined_at": m.created_at} for m in members]


@service_operation("fetch club posts")
def list_posts(club_id: int, page: int, limit: int, db: Session):
    get_club(club_id, db)
    query = db.query(ClubPost).filter(ClubPost.club_id == club_id)
    total = query.count()
    rows = paginate(
        query.options(joinedload(ClubPost.author)).order_by(ClubPost.created_at.desc(), ClubPost.id.desc()),
        page, limit
    )
    return rows, total


@service_operation("create club post")
def create_post(user: User, club_id: int, content: str, images: List[str], db: Session) -> ClubPost:
    get_club(club_id, db)
    if not get_membership(club_id, user.id, db):
        raise PermissionDeniedError("Only club members can post")
    post = ClubPost(club_id=club_id, author_id=user.id, content=content.strip(), images=images)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@service_operation("delete club")
def delete_club(user: User, club_id: int, db: Session) -> None:
    club = get_club(club_id, db)
    if club.created_by != user.id:
        raise PermissionDeniedError("Only the club owner can delete this club")
    db.delete(club)
    db.commit()
    invalidate_clubs(club_id)
    logger.info(f"Club {club_id} deleted by user {user.id}")
