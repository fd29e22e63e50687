"""
whereto.api.routes.exploration — Neighborhood exploration endpoints
=====================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Engine

from whereto.api.deps import get_current_user_id, get_engine, get_zone_index
from whereto.engine.exploration import ExplorationSnapshot
from whereto.engine.geo import GeoZoneIndex
from whereto.services import exploration_service

router = APIRouter(prefix="/exploration-stats", tags=["exploration"])


def snapshot_dict(snapshot: ExplorationSnapshot) -> dict:
    return {
        "totalNeighborhoods": snapshot.total_neighborhoods,
        "exploredCount": snapshot.explored_count,
        "percentage": snapshot.percentage,
        "neighborhoods": [
            {
                "name": n.name,
                "area": n.area,
                "explored": n.explored,
                "visitCount": n.visit_count,
                "uniquePlaceCount": n.unique_place_count,
                "firstVisitDate": (
                    n.first_visit_date.isoformat() if n.first_visit_date else None
                ),
                "popularIntents": list(n.popular_intents),
            }
            for n in snapshot.neighborhoods
        ],
    }


@router.get("")
def get_exploration_stats(
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
    index: GeoZoneIndex = Depends(get_zone_index),
):
    """Exploration state of every neighborhood for the caller."""
    snapshot = exploration_service.get_exploration_stats(engine, user_id, index)
    return snapshot_dict(snapshot)


@router.get("/check-new-neighborhood")
def check_new_neighborhood(
    place_id: str | None = Query(None, alias="placeId"),
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
    index: GeoZoneIndex = Depends(get_zone_index),
):
    """Called right after a visit is recorded to decide on the unlock animation."""
    unlock = exploration_service.check_new_neighborhood(engine, user_id, place_id, index)
    hood = unlock.neighborhood
    return {
        "isNewNeighborhood": unlock.is_new,
        "neighborhood": {"name": hood.name, "area": hood.area} if hood else None,
        "totalExplored": unlock.total_explored,
        "totalNeighborhoods": unlock.total_neighborhoods,
    }
