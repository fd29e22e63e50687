"""
whereto.api.routes.friends — Friend compatibility & exploration compare
=========================================================================
Both endpoints require an accepted friendship (403 otherwise).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import Engine

from whereto.api.deps import get_current_user_id, get_engine, get_zone_index
from whereto.engine.exploration import ExplorationSnapshot
from whereto.engine.geo import GeoZoneIndex
from whereto.services import exploration_service, social_service
from whereto.services.exploration_service import ExplorerProfile

router = APIRouter(prefix="/friends", tags=["friends"])


def _side_dict(profile: ExplorerProfile, snapshot: ExplorationSnapshot) -> dict:
    return {
        "name": profile.name,
        "avatarUrl": profile.avatar_url,
        "visitCount": profile.visit_count,
        "neighborhoods": [
            {
                "name": n.name,
                "area": n.area,
                "explored": n.explored,
                "visitCount": n.visit_count,
            }
            for n in snapshot.neighborhoods
        ],
        "totalExplored": snapshot.explored_count,
        "percentage": snapshot.percentage,
    }


@router.get("/{friend_id}/compatibility")
def get_compatibility(
    friend_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
):
    result = social_service.get_compatibility(engine, user_id, friend_id)
    return {
        "score": result.score,
        "sharedCount": result.shared_count,
        "sharedIntents": result.shared_intents,
        "sharedPrice": result.shared_price,
        "sharedPlaces": [
            {
                "placeId": p.place_id,
                "googlePlaceId": p.google_place_id,
                "name": p.name,
                "photoRef": p.photo_ref,
                "intent": p.intent,
            }
            for p in result.shared_places
        ],
        "noData": result.no_data,
    }


@router.get("/{friend_id}/exploration-compare")
def get_exploration_compare(
    friend_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
    index: GeoZoneIndex = Depends(get_zone_index),
):
    view = exploration_service.compare_with_friend(engine, user_id, friend_id, index)
    cmp = view.comparison
    return {
        "user": _side_dict(view.user, cmp.user),
        "friend": _side_dict(view.friend, cmp.friend),
        "shared": cmp.shared,
        "onlyUser": cmp.only_user,
        "onlyFriend": cmp.only_friend,
        "neither": cmp.neither,
    }
