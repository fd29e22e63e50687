"""
tests/conftest.py — Store, Auth & Client Fixtures
===================================================
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

# whereto.api.deps checks JWT_SECRET on import, so set it first.
os.environ.setdefault("JWT_SECRET", "pytest-signing-key-" + "0123456789abcdef" * 3)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from whereto.database.engine import init_db  # noqa: E402
from whereto.database.models import (  # noqa: E402
    Friendship,
    FriendshipStatus,
    Place,
    Recommendation,
    Save,
    User,
    Visit,
)

THE_BEACHES = (43.6710, -79.2967)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all WhereTo tables.

    StaticPool keeps one shared connection so every Session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return engine


class StoreBuilder:
    """Inserts fixture rows the way the CRUD layer would."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._place_seq = 0

    def user(self, user_id: str, name: str | None = None, image: str | None = None) -> str:
        with Session(self.engine) as session:
            session.add(User(id=user_id, name=name or user_id.title(), image=image))
            session.commit()
        return user_id

    def place(
        self,
        coords: tuple[float | None, float | None] = THE_BEACHES,
        *,
        google_id: str | None = None,
        name: str | None = None,
        price_level: int | None = None,
        rating: float | None = None,
    ) -> str:
        self._place_seq += 1
        place_id = f"place-{self._place_seq}"
        with Session(self.engine) as session:
            session.add(Place(
                id=place_id,
                google_place_id=google_id or f"g-{self._place_seq}",
                name=name or f"Place {self._place_seq}",
                lat=coords[0],
                lng=coords[1],
                price_level=price_level,
                rating=rating,
            ))
            session.commit()
        return place_id

    def visit(self, user_id: str, place_id: str, when: datetime | None = None) -> None:
        when = when or datetime.now(UTC)
        with Session(self.engine) as session:
            session.add(Visit(
                user_id=user_id, place_id=place_id, method="go_now",
                verified_at=when, created_at=when,
            ))
            session.commit()

    def save(
        self, user_id: str, place_id: str, intent: str, when: datetime | None = None,
    ) -> None:
        with Session(self.engine) as session:
            session.add(Save(
                user_id=user_id, place_id=place_id, intent=intent,
                created_at=when or datetime.now(UTC),
            ))
            session.commit()

    def friends(
        self, sender_id: str, receiver_id: str,
        status: FriendshipStatus = FriendshipStatus.ACCEPTED,
    ) -> None:
        with Session(self.engine) as session:
            session.add(Friendship(
                sender_id=sender_id, receiver_id=receiver_id, status=status.value,
            ))
            session.commit()

    def recommend(self, sender_id: str, receiver_id: str, place_id: str) -> None:
        with Session(self.engine) as session:
            session.add(Recommendation(
                sender_id=sender_id, receiver_id=receiver_id, place_id=place_id,
                note="try this",
            ))
            session.commit()


@pytest.fixture
def store(db_engine: Engine) -> StoreBuilder:
    return StoreBuilder(db_engine)


def make_token(sub: str = "alice") -> str:
    """Create a bearer JWT for *sub*.  Usable from any test module."""
    import jwt

    from whereto.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode({"sub": sub}, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def auth_headers():
    def _headers(sub: str = "alice") -> dict:
        return {"Authorization": f"Bearer {make_token(sub)}"}
    return _headers


@pytest.fixture
def client(db_engine: Engine):
    """FastAPI TestClient wired to the in-memory engine and a Toronto config."""
    from fastapi.testclient import TestClient

    from whereto.api.main import app
    from whereto.api.routes import badges as badge_routes
    from whereto.engine.geo import GeoZoneIndex

    # Key on the objects the routers captured; deps may have been reloaded.
    app.dependency_overrides[badge_routes.get_engine] = lambda: db_engine
    app.dependency_overrides[badge_routes.get_zone_index] = (
        lambda: GeoZoneIndex.for_city("toronto")
    )
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
