"""
whereto.services.badge_service — Badge Counters & Award Persistence
====================================================================

Builds :class:`BadgeCounters` fresh from the store, runs the rule table in
:mod:`whereto.engine.badges`, and inserts each newly earned badge.

Uniqueness is enforced by ``uq_earned_badges_user_type``.  Each insert
runs in its own SAVEPOINT: when a concurrent evaluation for the same user
got there first, the IntegrityError rolls back only that savepoint and the
remaining badges are still recorded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from whereto.database.engine import get_session
from whereto.database.models import EarnedBadge, Recommendation, Save
from whereto.engine.badges import (
    BADGE_DEFINITIONS,
    BadgeCounters,
    BadgeDefinition,
    check_badges,
    day_streak,
)
from whereto.engine.exploration import explored_zone_names
from whereto.services.exploration_service import load_visit_records
from whereto.services.social_service import count_friends

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from whereto.engine.geo import GeoZoneIndex

logger = logging.getLogger(__name__)


def get_earned_badge_types(session: Session, user_id: str) -> set[str]:
    """Badge types *user_id* already holds."""
    rows = session.scalars(
        select(EarnedBadge.badge_type).where(EarnedBadge.user_id == user_id)
    ).all()
    return set(rows)


def get_badge_counters(
    session: Session, user_id: str, index: GeoZoneIndex
) -> BadgeCounters:
    """Compute every counter the rule table reads, straight from the store."""
    visits = load_visit_records(session, user_id)

    save_rows = session.execute(
        select(Save.intent, Save.created_at).where(Save.user_id == user_id)
    ).all()

    recommendations_sent = session.scalar(
        select(func.count())
        .select_from(Recommendation)
        .where(Recommendation.sender_id == user_id)
    ) or 0

    activity = [r.created_at for r in save_rows] + [v.verified_at for v in visits]

    return BadgeCounters(
        visited_places=len({v.place_id for v in visits}),
        neighborhoods_explored=len(explored_zone_names(visits, index)),
        friends=count_friends(session, user_id),
        recommendations_sent=recommendations_sent,
        saves=len(save_rows),
        unique_intents=len({r.intent for r in save_rows}),
        current_streak=day_streak(activity),
    )


def _insert_badge(session: Session, user_id: str, badge_type: str) -> bool:
    """Insert one award inside a SAVEPOINT.  False if it already existed."""
    try:
        with session.begin_nested():
            session.add(EarnedBadge(user_id=user_id, badge_type=badge_type))
            session.flush()
    except IntegrityError:
        logger.warning(
            "Badge %s for user %s already recorded by a concurrent evaluation",
            badge_type, user_id,
        )
        return False
    return True


def evaluate_badges(
    engine: Engine, user_id: str, index: GeoZoneIndex
) -> list[BadgeDefinition]:
    """Award every badge *user_id* newly qualifies for.

    Returns only the badges inserted by this call.  Safe to call
    repeatedly and concurrently: a badge already present is skipped, and a
    failed insert does not stop the others.
    """
    awarded: list[BadgeDefinition] = []

    with get_session(engine) as session:
        already_earned = get_earned_badge_types(session, user_id)
        counters = get_badge_counters(session, user_id, index)

        candidates = check_badges(
            counters, already_earned, total_neighborhoods=len(index),
        )

        for definition in candidates:
            try:
                inserted = _insert_badge(session, user_id, definition.type)
            except SQLAlchemyError:
                logger.exception(
                    "Failed to record badge %s for user %s", definition.type, user_id,
                )
                continue
            if inserted:
                awarded.append(definition)
                logger.info("Badge earned: %s for user %s", definition.type, user_id)

    return awarded


def get_badge_progress(engine: Engine, user_id: str, index: GeoZoneIndex) -> dict:
    """Earned badges (newest first), the catalogue, and current counters."""
    with get_session(engine) as session:
        earned = session.scalars(
            select(EarnedBadge)
            .where(EarnedBadge.user_id == user_id)
            .order_by(EarnedBadge.earned_at.desc(), EarnedBadge.id.desc())
        ).all()
        counters = get_badge_counters(session, user_id, index)

        return {
            "earned": [
                {"badge_type": b.badge_type, "earned_at": b.earned_at} for b in earned
            ],
            "definitions": list(BADGE_DEFINITIONS),
            "progress": counters.progress(),
        }
