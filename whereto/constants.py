"""
whereto.constants — Shared Constants & Helpers
================================================

Single source of truth for presentation constants.  Import from here
instead of duplicating in the engine, services, and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Save intents (swipe categories) → display label
# ---------------------------------------------------------------------------
INTENT_LABELS: dict[str, str] = {
    "study": "Study / Work",
    "date": "Date / Chill",
    "trending": "Trending Now",
    "quiet": "Quiet Cafés",
    "laptop": "Laptop-Friendly",
    "group": "Group Hangouts",
    "budget": "Budget Eats",
    "coffee": "Coffee & Catch-Up",
    "outdoor": "Outdoor / Patio",
}

MAX_PRICE_LEVEL = 4


def intent_label(intent: str) -> str:
    """Display label for *intent*; unknown keys pass through unchanged."""
    return INTENT_LABELS.get(intent, intent)


def price_level_to_string(level: int | None) -> str | None:
    """``2`` → ``"$$"``.  Missing or non-positive levels give ``None``."""
    if not level or level < 1:
        return None
    return "$" * min(level, MAX_PRICE_LEVEL)
