"""
WhereTo — Activity Analytics & Gamification Engine
====================================================
Turns verified visits, saves, friendships and recommendations into the
signals the app shows back to people: explored neighborhoods and
new-neighborhood unlocks, earned badges, taste compatibility with a
friend, and side-by-side exploration maps.

Package layout::

    whereto/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Intent labels, price formatting
    ├── errors.py          # Domain exceptions → HTTP status codes
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helpers
    │   └── models.py      # ORM models (read-only facts + earned_badges)
    ├── engine/
    │   ├── geo.py         # Neighborhood catalogue + zone lookup
    │   ├── exploration.py # Exploration snapshot, unlock detection, compare
    │   ├── compatibility.py # Taste compatibility score
    │   └── badges.py      # Badge definitions, rule table, day streak
    ├── services/
    │   ├── exploration_service.py  # Visits → exploration read models
    │   ├── social_service.py       # Friendship checks + compatibility
    │   └── badge_service.py        # Counters + idempotent badge awards
    └── api/
        ├── main.py        # FastAPI app + error handlers
        ├── deps.py        # JWT auth, engine, config, zone index
        └── routes/        # exploration, friends, badges
"""

__version__ = "0.1.0"
