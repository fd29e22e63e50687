"""
whereto.engine.compatibility — Taste Compatibility Score
=========================================================

Feed it two users' saves and get back a 0–100 score plus the breakdown the
friends drawer shows.

Weights are fixed::

    shared places   50   (saturates at 5 shared places)
    shared intents  30   (Jaccard over distinct intents)
    price match     10   (modal price level equal)
    rating match    10   (average ratings within 0.5)

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from whereto.constants import intent_label, price_level_to_string
from whereto.engine.exploration import round_half_up

T = TypeVar("T")

SHARED_PLACES_WEIGHT = 50
SHARED_PLACES_SATURATION = 5
INTENT_WEIGHT = 30
PRICE_WEIGHT = 10
RATING_WEIGHT = 10
RATING_TOLERANCE = 0.5
MAX_SHARED_INTENTS = 3


@dataclass(frozen=True, slots=True)
class SaveRow:
    """A save joined with the place fields the scorer needs."""

    place_id: str           # internal Place.id
    google_place_id: str    # stable external id, used for matching
    name: str
    photo_ref: str | None
    intent: str
    price_level: int | None
    rating: float | None


@dataclass(frozen=True, slots=True)
class SharedPlace:
    place_id: str
    google_place_id: str
    name: str
    photo_ref: str | None
    intent: str


@dataclass(slots=True)
class CompatibilityResult:
    score: int = 0
    shared_count: int = 0
    shared_intents: list[str] = field(default_factory=list)
    shared_price: str | None = None
    shared_places: list[SharedPlace] = field(default_factory=list)
    no_data: bool = True


def modal_value(values: Iterable[T]) -> T | None:
    """Most frequent value; ties go to the value seen first."""
    counts = Counter(values)
    if not counts:
        return None
    best, best_count = None, 0
    # Counter preserves first-insertion order, so strict '>' keeps the earliest.
    for value, count in counts.items():
        if count > best_count:
            best, best_count = value, count
    return best


def _mean(values: Sequence[float]) -> float | None:
    return sum(values) / len(values) if values else None


def score_compatibility(
    my_saves: Sequence[SaveRow],
    friend_saves: Sequence[SaveRow],
) -> CompatibilityResult:
    """Score how closely two save histories overlap."""
    no_data = not my_saves and not friend_saves

    # Shared places: matched on the external id, listed in friend order
    my_ids = {s.google_place_id for s in my_saves}
    shared = [s for s in friend_saves if s.google_place_id in my_ids]
    shared_places = [
        SharedPlace(
            place_id=s.place_id,
            google_place_id=s.google_place_id,
            name=s.name,
            photo_ref=s.photo_ref,
            intent=intent_label(s.intent),
        )
        for s in shared
    ]

    # Shared intents: Jaccard over distinct sets
    my_intents = {s.intent for s in my_saves}
    friend_intents = {s.intent for s in friend_saves}
    union = my_intents | friend_intents
    common = my_intents & friend_intents
    jaccard = len(common) / len(union) if union else 0.0

    intent_freq = Counter(
        s.intent for s in [*my_saves, *friend_saves] if s.intent in common
    )
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(intent_freq.items(), key=lambda kv: kv[1], reverse=True)
    shared_intents = [intent_label(i) for i, _ in ranked[:MAX_SHARED_INTENTS]]

    # Price affinity
    my_price = modal_value(s.price_level for s in my_saves if s.price_level is not None)
    friend_price = modal_value(
        s.price_level for s in friend_saves if s.price_level is not None
    )
    price_match = my_price is not None and my_price == friend_price
    shared_price = price_level_to_string(my_price) if price_match else None

    # Rating affinity
    my_rating = _mean([s.rating for s in my_saves if s.rating is not None])
    friend_rating = _mean([s.rating for s in friend_saves if s.rating is not None])
    rating_match = (
        my_rating is not None
        and friend_rating is not None
        and abs(my_rating - friend_rating) <= RATING_TOLERANCE
    )

    raw = (
        min(len(shared) / SHARED_PLACES_SATURATION, 1) * SHARED_PLACES_WEIGHT
        + jaccard * INTENT_WEIGHT
        + (PRICE_WEIGHT if price_match else 0)
        + (RATING_WEIGHT if rating_match else 0)
    )
    score = max(0, min(round_half_up(raw), 100))

    return CompatibilityResult(
        score=score,
        shared_count=len(shared),
        shared_intents=shared_intents,
        shared_price=shared_price,
        shared_places=shared_places,
        no_data=no_data,
    )
