"""
whereto.engine.exploration — Neighborhood Exploration Aggregates
=================================================================

Turns a user's verified visits into per-neighborhood exploration state,
detects first-ever visits into a neighborhood, and lines two users' maps up
against each other.

Every function takes the :class:`GeoZoneIndex` explicitly and iterates it in
declaration order, so two snapshots built from the same index are
index-aligned zone by zone.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from whereto.engine.geo import GeoZoneIndex, Neighborhood


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, like the client's Math.round."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Inputs / outputs
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class VisitRecord:
    """A verified visit joined with its place's coordinates."""

    place_id: str
    lat: float | None
    lng: float | None
    verified_at: datetime


@dataclass(slots=True)
class NeighborhoodStats:
    name: str
    area: str
    explored: bool = False
    visit_count: int = 0
    unique_place_count: int = 0
    first_visit_date: datetime | None = None
    popular_intents: tuple[str, ...] = ()


@dataclass(slots=True)
class ExplorationSnapshot:
    """Exploration state for every declared neighborhood plus totals."""

    neighborhoods: list[NeighborhoodStats] = field(default_factory=list)
    explored_count: int = 0
    total_neighborhoods: int = 0
    percentage: int = 0


@dataclass(frozen=True, slots=True)
class NeighborhoodUnlock:
    is_new: bool
    neighborhood: Neighborhood | None
    total_explored: int
    total_neighborhoods: int


@dataclass(slots=True)
class ExplorationComparison:
    user: ExplorationSnapshot
    friend: ExplorationSnapshot
    shared: int = 0
    only_user: int = 0
    only_friend: int = 0
    neither: int = 0


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
def explore(visits: Iterable[VisitRecord], index: GeoZoneIndex) -> ExplorationSnapshot:
    """Aggregate *visits* into one :class:`NeighborhoodStats` per zone.

    Undiscovered zones are present with ``explored=False``.  Visits whose
    place has no coordinates, or lies outside every zone, are skipped.
    """
    buckets = {
        zone.name: NeighborhoodStats(
            name=zone.name, area=zone.area, popular_intents=zone.popular_intents,
        )
        for zone in index
    }
    places: dict[str, set[str]] = {zone.name: set() for zone in index}

    for visit in visits:
        zone = index.zone_for(visit.lat, visit.lng)
        if zone is None:
            continue
        stats = buckets[zone.name]
        stats.explored = True
        stats.visit_count += 1
        places[zone.name].add(visit.place_id)
        if stats.first_visit_date is None or visit.verified_at < stats.first_visit_date:
            stats.first_visit_date = visit.verified_at

    for name, stats in buckets.items():
        stats.unique_place_count = len(places[name])

    neighborhoods = list(buckets.values())
    explored_count = sum(1 for n in neighborhoods if n.explored)
    total = len(index)
    return ExplorationSnapshot(
        neighborhoods=neighborhoods,
        explored_count=explored_count,
        total_neighborhoods=total,
        percentage=round_half_up(explored_count / total * 100) if total else 0,
    )


def explored_zone_names(visits: Iterable[VisitRecord], index: GeoZoneIndex) -> set[str]:
    """Names of the distinct zones touched by *visits*."""
    names: set[str] = set()
    for visit in visits:
        zone = index.zone_for(visit.lat, visit.lng)
        if zone is not None:
            names.add(zone.name)
    return names


# ---------------------------------------------------------------------------
# New-neighborhood detection
# ---------------------------------------------------------------------------
def detect_new_neighborhood(
    visits: list[VisitRecord],
    lat: float | None,
    lng: float | None,
    index: GeoZoneIndex,
) -> NeighborhoodUnlock:
    """Decide whether the visit just recorded at (*lat*, *lng*) unlocked a zone.

    *visits* must be the user's full visit list **after** the new visit was
    written.  The zone counts as newly unlocked when exactly one of those
    visits falls inside it: the one just recorded.  Zero (visit not yet
    persisted) and two-or-more (been here before) both report ``False``.
    """
    total = len(index)
    zone = index.zone_for(lat, lng)
    if zone is None:
        return NeighborhoodUnlock(False, None, 0, total)

    explored: set[str] = set()
    visits_in_zone = 0
    for visit in visits:
        hood = index.zone_for(visit.lat, visit.lng)
        if hood is None:
            continue
        explored.add(hood.name)
        if hood.name == zone.name:
            visits_in_zone += 1

    return NeighborhoodUnlock(
        is_new=visits_in_zone == 1,
        neighborhood=zone,
        total_explored=len(explored),
        total_neighborhoods=total,
    )


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------
def compare_exploration(
    user_visits: Iterable[VisitRecord],
    friend_visits: Iterable[VisitRecord],
    index: GeoZoneIndex,
) -> ExplorationComparison:
    """Snapshot both users over the same *index* and bucket every zone.

    Each zone lands in exactly one of shared / only_user / only_friend /
    neither, so the four counts always sum to ``len(index)``.
    """
    result = ExplorationComparison(
        user=explore(user_visits, index),
        friend=explore(friend_visits, index),
    )
    for mine, theirs in zip(result.user.neighborhoods, result.friend.neighborhoods, strict=True):
        if mine.explored and theirs.explored:
            result.shared += 1
        elif mine.explored:
            result.only_user += 1
        elif theirs.explored:
            result.only_friend += 1
        else:
            result.neither += 1
    return result
