"""
whereto.engine.badges — Badge Rule Table & Check Pipeline
==========================================================

Registry implementation for badge evaluation.  Every badge type maps to
exactly one counter selector in :data:`BADGE_COUNTERS`; a badge is earned
when that counter reaches the definition's ``requirement``.  Adding a
badge is a table edit here, not a new branch anywhere else.

This module is pure calculation — no database I/O.  Persistence lives in
:mod:`whereto.services.badge_service`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

logger = logging.getLogger(__name__)


class BadgeCategory(enum.StrEnum):
    EXPLORATION = "exploration"
    SOCIAL = "social"
    STREAK = "streak"
    COLLECTOR = "collector"


# ---------------------------------------------------------------------------
# Badge definitions: static catalogue, order is display order
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    """One badge.

    ``covers_catalogue`` marks badges whose requirement is "every zone":
    the effective requirement becomes the size of the active neighborhood
    catalogue instead of the static number.
    """

    type: str
    name: str
    description: str
    icon: str
    category: BadgeCategory
    requirement: int
    covers_catalogue: bool = False

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category.value,
            "requirement": self.requirement,
        }


BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    # Exploration
    BadgeDefinition("first_visit", "First Steps", "Verify your first visit", "\U0001f6b6", BadgeCategory.EXPLORATION, 1),
    BadgeDefinition("explorer_5", "Urban Explorer", "Visit 5 different places", "\U0001f9ed", BadgeCategory.EXPLORATION, 5),
    BadgeDefinition("explorer_10", "City Wanderer", "Visit 10 different places", "\U0001f5fa️", BadgeCategory.EXPLORATION, 10),
    BadgeDefinition("explorer_25", "Toronto Pro", "Visit 25 different places", "⭐", BadgeCategory.EXPLORATION, 25),
    BadgeDefinition("explorer_50", "Legend", "Visit 50 different places", "\U0001f451", BadgeCategory.EXPLORATION, 50),
    BadgeDefinition("neighborhood_3", "Neighborhood Hopper", "Explore 3 different neighborhoods", "\U0001f3d8️", BadgeCategory.EXPLORATION, 3),
    BadgeDefinition("neighborhood_10", "District Master", "Explore 10 different neighborhoods", "\U0001f306", BadgeCategory.EXPLORATION, 10),
    BadgeDefinition("neighborhood_all", "Toronto Completionist", "Explore all neighborhoods", "\U0001f3c6", BadgeCategory.EXPLORATION, 42, covers_catalogue=True),
    # Social
    BadgeDefinition("first_friend", "Social Butterfly", "Add your first friend", "\U0001f98b", BadgeCategory.SOCIAL, 1),
    BadgeDefinition("friends_5", "Squad Goals", "Have 5 friends", "\U0001f465", BadgeCategory.SOCIAL, 5),
    BadgeDefinition("first_rec", "Taste Sharer", "Send your first recommendation", "\U0001f48c", BadgeCategory.SOCIAL, 1),
    BadgeDefinition("rec_10", "Local Guide", "Send 10 recommendations", "\U0001f4e3", BadgeCategory.SOCIAL, 10),
    # Collector
    BadgeDefinition("first_save", "Bookmarked", "Save your first place", "\U0001f516", BadgeCategory.COLLECTOR, 1),
    BadgeDefinition("saves_25", "Curator", "Save 25 places", "\U0001f4da", BadgeCategory.COLLECTOR, 25),
    BadgeDefinition("saves_50", "Connoisseur", "Save 50 places", "\U0001f3af", BadgeCategory.COLLECTOR, 50),
    BadgeDefinition("all_intents", "Well Rounded", "Save a place from every intent category", "\U0001f3a8", BadgeCategory.COLLECTOR, 9),
    # Streak
    BadgeDefinition("streak_3", "Getting Hooked", "Use WhereTo 3 days in a row", "\U0001f525", BadgeCategory.STREAK, 3),
    BadgeDefinition("streak_7", "Weekly Regular", "Use WhereTo 7 days in a row", "⚡", BadgeCategory.STREAK, 7),
    BadgeDefinition("streak_30", "Devoted Explorer", "Use WhereTo 30 days in a row", "\U0001f48e", BadgeCategory.STREAK, 30),
)

_DEFINITIONS_BY_TYPE: dict[str, BadgeDefinition] = {d.type: d for d in BADGE_DEFINITIONS}


def get_definition(badge_type: str) -> BadgeDefinition | None:
    return _DEFINITIONS_BY_TYPE.get(badge_type)


# ---------------------------------------------------------------------------
# Counters: snapshot of a user's aggregate activity
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BadgeCounters:
    """Aggregate activity counters, computed fresh for every evaluation.

    Parameters
    ----------
    visited_places : Distinct places with a verified visit.
    neighborhoods_explored : Distinct zones containing at least one visit.
    friends : Accepted friendships, either direction.
    recommendations_sent : Recommendations the user has sent.
    saves : Total saves.
    unique_intents : Distinct intents across the user's saves.
    current_streak : Consecutive-day activity streak (see :func:`day_streak`).
    """

    visited_places: int = 0
    neighborhoods_explored: int = 0
    friends: int = 0
    recommendations_sent: int = 0
    saves: int = 0
    unique_intents: int = 0
    current_streak: int = 0

    def progress(self) -> dict[str, int]:
        return {
            "visits": self.visited_places,
            "neighborhoods": self.neighborhoods_explored,
            "friends": self.friends,
            "saves": self.saves,
            "recommendations": self.recommendations_sent,
            "streak": self.current_streak,
            "unique_intents": self.unique_intents,
        }


def _visited(c: BadgeCounters) -> int:
    return c.visited_places


def _neighborhoods(c: BadgeCounters) -> int:
    return c.neighborhoods_explored


def _friends(c: BadgeCounters) -> int:
    return c.friends


def _recommendations(c: BadgeCounters) -> int:
    return c.recommendations_sent


def _saves(c: BadgeCounters) -> int:
    return c.saves


def _intents(c: BadgeCounters) -> int:
    return c.unique_intents


def _streak(c: BadgeCounters) -> int:
    return c.current_streak


# ---------------------------------------------------------------------------
# Rule table: badge type → counter selector
# ---------------------------------------------------------------------------
BADGE_COUNTERS: dict[str, Callable[[BadgeCounters], int]] = {
    "first_visit": _visited,
    "explorer_5": _visited,
    "explorer_10": _visited,
    "explorer_25": _visited,
    "explorer_50": _visited,
    "neighborhood_3": _neighborhoods,
    "neighborhood_10": _neighborhoods,
    "neighborhood_all": _neighborhoods,
    "first_friend": _friends,
    "friends_5": _friends,
    "first_rec": _recommendations,
    "rec_10": _recommendations,
    "first_save": _saves,
    "saves_25": _saves,
    "saves_50": _saves,
    "all_intents": _intents,
    "streak_3": _streak,
    "streak_7": _streak,
    "streak_30": _streak,
}


# ---------------------------------------------------------------------------
# Day streak
# ---------------------------------------------------------------------------
def utc_date(ts: datetime) -> date:
    """Calendar date of *ts* in UTC.  Naive timestamps are taken as UTC."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.date()


def day_streak(timestamps: Iterable[datetime]) -> int:
    """Length of the run of consecutive active days ending at the most
    recent one.

    Walks distinct UTC dates newest-first and stops at the first gap.  No
    activity gives 0; any activity gives at least 1.
    """
    days = sorted({utc_date(ts) for ts in timestamps}, reverse=True)
    if not days:
        return 0
    streak = 1
    for newer, older in zip(days, days[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


# ---------------------------------------------------------------------------
# Main check function
# ---------------------------------------------------------------------------
def effective_requirement(definition: BadgeDefinition, total_neighborhoods: int | None) -> int:
    if definition.covers_catalogue and total_neighborhoods:
        return total_neighborhoods
    return definition.requirement


def check_badges(
    counters: BadgeCounters,
    already_earned: set[str],
    *,
    total_neighborhoods: int | None = None,
) -> list[BadgeDefinition]:
    """Return the definitions newly satisfied by *counters*.

    Parameters
    ----------
    counters : Current activity counters for the user.
    already_earned : Badge types the user already holds; never re-checked.
    total_neighborhoods : Size of the active zone catalogue, for
        ``covers_catalogue`` badges.
    """
    newly_earned: list[BadgeDefinition] = []

    for definition in BADGE_DEFINITIONS:
        if definition.type in already_earned:
            continue

        selector = BADGE_COUNTERS.get(definition.type)
        if selector is None:
            logger.warning("No counter registered for badge type %s", definition.type)
            continue

        if selector(counters) >= effective_requirement(definition, total_neighborhoods):
            newly_earned.append(definition)

    return newly_earned
