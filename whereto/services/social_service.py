"""
whereto.services.social_service — Friendship Checks & Taste Compatibility
==========================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from whereto.database.engine import get_session
from whereto.database.models import Friendship, FriendshipStatus, Place, Save
from whereto.engine.compatibility import CompatibilityResult, SaveRow, score_compatibility
from whereto.errors import ForbiddenError

if TYPE_CHECKING:
    from sqlalchemy import Engine


def _accepted_between(user_id: str, other_id: str):
    return and_(
        Friendship.status == FriendshipStatus.ACCEPTED.value,
        or_(
            and_(Friendship.sender_id == user_id, Friendship.receiver_id == other_id),
            and_(Friendship.sender_id == other_id, Friendship.receiver_id == user_id),
        ),
    )


def are_friends(session: Session, user_id: str, other_id: str) -> bool:
    """True when an accepted friendship exists in either direction."""
    return session.scalar(
        select(Friendship.id).where(_accepted_between(user_id, other_id)).limit(1)
    ) is not None


def require_friendship(session: Session, user_id: str, other_id: str) -> None:
    if not are_friends(session, user_id, other_id):
        raise ForbiddenError("Not friends")


def count_friends(session: Session, user_id: str) -> int:
    """Accepted friendships where *user_id* is either side."""
    return session.scalar(
        select(func.count())
        .select_from(Friendship)
        .where(
            Friendship.status == FriendshipStatus.ACCEPTED.value,
            or_(Friendship.sender_id == user_id, Friendship.receiver_id == user_id),
        )
    ) or 0


def load_save_rows(session: Session, user_id: str) -> list[SaveRow]:
    rows = session.execute(
        select(Save.intent, Place)
        .join(Place, Place.id == Save.place_id)
        .where(Save.user_id == user_id)
        .order_by(Save.created_at.asc(), Save.id.asc())
    ).all()
    return [
        SaveRow(
            place_id=place.id,
            google_place_id=place.google_place_id,
            name=place.name,
            photo_ref=place.photo_url,
            intent=intent,
            price_level=place.price_level,
            rating=place.rating,
        )
        for intent, place in rows
    ]


def get_compatibility(engine: Engine, user_id: str, friend_id: str) -> CompatibilityResult:
    """Taste compatibility between the caller and an accepted friend.

    Raises :class:`ForbiddenError` if they are not accepted friends.
    """
    with get_session(engine) as session:
        require_friendship(session, user_id, friend_id)
        mine = load_save_rows(session, user_id)
        theirs = load_save_rows(session, friend_id)
    return score_compatibility(mine, theirs)
