"""
whereto.services.exploration_service — Exploration Read Models
===============================================================

Loads a user's verified visits from the store and runs them through
:mod:`whereto.engine.exploration`.  Every call re-reads the visits; nothing
is cached between requests, so a visit written a moment ago is always
visible to the new-neighborhood check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from whereto.database.engine import get_session
from whereto.database.models import Place, User, Visit
from whereto.engine.exploration import (
    ExplorationComparison,
    ExplorationSnapshot,
    NeighborhoodUnlock,
    VisitRecord,
    compare_exploration,
    detect_new_neighborhood,
    explore,
)
from whereto.errors import InvalidInputError, NotFoundError
from whereto.services.social_service import require_friendship

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from whereto.engine.geo import GeoZoneIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExplorerProfile:
    """Display info for one side of a comparison."""

    name: str | None
    avatar_url: str | None
    visit_count: int


@dataclass(frozen=True, slots=True)
class FriendComparison:
    comparison: ExplorationComparison
    user: ExplorerProfile
    friend: ExplorerProfile


def load_visit_records(session: Session, user_id: str) -> list[VisitRecord]:
    """All of *user_id*'s visits with place coordinates, oldest first."""
    rows = session.execute(
        select(Visit.place_id, Place.lat, Place.lng, Visit.verified_at)
        .join(Place, Place.id == Visit.place_id)
        .where(Visit.user_id == user_id)
        .order_by(Visit.verified_at.asc(), Visit.id.asc())
    ).all()
    return [
        VisitRecord(place_id=r.place_id, lat=r.lat, lng=r.lng, verified_at=r.verified_at)
        for r in rows
    ]


def get_exploration_stats(
    engine: Engine, user_id: str, index: GeoZoneIndex
) -> ExplorationSnapshot:
    with get_session(engine) as session:
        visits = load_visit_records(session, user_id)
    return explore(visits, index)


def check_new_neighborhood(
    engine: Engine,
    user_id: str,
    google_place_id: str | None,
    index: GeoZoneIndex,
) -> NeighborhoodUnlock:
    """Did the user's visit to *google_place_id* unlock a neighborhood?

    Call right after the visit is written.  The check reads the full,
    post-write visit list from the store.
    """
    if not google_place_id:
        raise InvalidInputError("Missing placeId parameter")

    with get_session(engine) as session:
        place = session.scalar(
            select(Place).where(Place.google_place_id == google_place_id)
        )
        if place is None:
            raise NotFoundError("Place not found in database")
        lat, lng = place.lat, place.lng
        visits = load_visit_records(session, user_id)

    unlock = detect_new_neighborhood(visits, lat, lng, index)
    if unlock.is_new:
        logger.info(
            "User %s unlocked neighborhood %s (%d/%d explored)",
            user_id, unlock.neighborhood.name,
            unlock.total_explored, unlock.total_neighborhoods,
        )
    return unlock


def compare_with_friend(
    engine: Engine, user_id: str, friend_id: str, index: GeoZoneIndex
) -> FriendComparison:
    """Side-by-side exploration of the caller and an accepted friend.

    Raises
    ------
    ForbiddenError
        If the two users are not accepted friends.
    NotFoundError
        If either user row is missing.
    """
    if not friend_id:
        raise InvalidInputError("Missing friend ID")

    with get_session(engine) as session:
        require_friendship(session, user_id, friend_id)

        me = session.get(User, user_id)
        friend = session.get(User, friend_id)
        if me is None or friend is None:
            raise NotFoundError("User not found")

        my_visits = load_visit_records(session, user_id)
        friend_visits = load_visit_records(session, friend_id)

        return FriendComparison(
            comparison=compare_exploration(my_visits, friend_visits, index),
            user=ExplorerProfile(me.name, me.image, len(my_visits)),
            friend=ExplorerProfile(friend.name, friend.image, len(friend_visits)),
        )
