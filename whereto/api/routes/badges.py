"""
whereto.api.routes.badges — Badge progress & award check
==========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import Engine

from whereto.api.deps import get_current_user_id, get_engine, get_zone_index
from whereto.engine.geo import GeoZoneIndex
from whereto.services import badge_service

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("")
def get_badges(
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
    index: GeoZoneIndex = Depends(get_zone_index),
):
    progress = badge_service.get_badge_progress(engine, user_id, index)
    counters = progress["progress"]
    return {
        "earned": [
            {
                "badgeType": b["badge_type"],
                "earnedAt": b["earned_at"].isoformat() if b["earned_at"] else None,
            }
            for b in progress["earned"]
        ],
        "definitions": [d.to_dict() for d in progress["definitions"]],
        "progress": {
            "visits": counters["visits"],
            "neighborhoods": counters["neighborhoods"],
            "friends": counters["friends"],
            "saves": counters["saves"],
            "recommendations": counters["recommendations"],
            "streak": counters["streak"],
            "uniqueIntents": counters["unique_intents"],
        },
    }


@router.post("/check")
def check_badges(
    user_id: str = Depends(get_current_user_id),
    engine: Engine = Depends(get_engine),
    index: GeoZoneIndex = Depends(get_zone_index),
):
    """Award newly qualified badges; returns only this call's delta."""
    awarded = badge_service.evaluate_badges(engine, user_id, index)
    return {"newBadges": [d.to_dict() for d in awarded]}
