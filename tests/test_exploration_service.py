"""
tests/test_exploration_service.py — Exploration & Social Service Tests
========================================================================
Service-level tests that read visits, saves and friendships back out of an
in-memory SQLite store.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from whereto.database.models import FriendshipStatus
from whereto.engine.geo import GeoZoneIndex
from whereto.errors import ForbiddenError, InvalidInputError, NotFoundError
from whereto.services import exploration_service, social_service

KENSINGTON = (43.6548, -79.4007)
THE_BEACHES = (43.6710, -79.2967)
HIGH_PARK = (43.6465, -79.4637)
NOWHERE = (0.0, 0.0)

NOW = datetime(2026, 7, 1, 15, 0, tzinfo=UTC)


@pytest.fixture
def index() -> GeoZoneIndex:
    return GeoZoneIndex.for_city("toronto")


# ===========================================================================
# Exploration
# ===========================================================================
class TestLoadVisitRecords:
    def test_oldest_first_with_coordinates(self, db_engine, store):
        store.user("alice")
        late = store.place(HIGH_PARK)
        early = store.place(THE_BEACHES)
        store.visit("alice", late, NOW)
        store.visit("alice", early, NOW - timedelta(days=5))

        with Session(db_engine) as session:
            records = exploration_service.load_visit_records(session, "alice")

        assert [r.place_id for r in records] == [early, late]
        assert (records[0].lat, records[0].lng) == THE_BEACHES

    def test_other_users_excluded(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        store.visit("bob", store.place(), NOW)

        with Session(db_engine) as session:
            assert exploration_service.load_visit_records(session, "alice") == []


class TestExplorationStats:
    def test_two_neighborhoods(self, db_engine, store, index):
        store.user("alice")
        store.visit("alice", store.place(KENSINGTON), NOW)
        store.visit("alice", store.place(THE_BEACHES), NOW)
        store.visit("alice", store.place(NOWHERE), NOW)

        snap = exploration_service.get_exploration_stats(db_engine, "alice", index)

        assert snap.total_neighborhoods == 42
        assert snap.explored_count == 2
        assert snap.percentage == 5

    def test_user_without_visits(self, db_engine, store, index):
        store.user("alice")
        snap = exploration_service.get_exploration_stats(db_engine, "alice", index)
        assert snap.explored_count == 0
        assert len(snap.neighborhoods) == 42


class TestCheckNewNeighborhood:
    def test_missing_place_id(self, db_engine, index):
        with pytest.raises(InvalidInputError, match="Missing placeId"):
            exploration_service.check_new_neighborhood(db_engine, "alice", None, index)
        with pytest.raises(InvalidInputError):
            exploration_service.check_new_neighborhood(db_engine, "alice", "", index)

    def test_unknown_place(self, db_engine, index):
        with pytest.raises(NotFoundError, match="Place not found"):
            exploration_service.check_new_neighborhood(db_engine, "alice", "g-nope", index)

    def test_first_and_second_visit(self, db_engine, store, index, caplog):
        store.user("alice")
        first = store.place(THE_BEACHES, google_id="g-beach-1")
        second = store.place(THE_BEACHES, google_id="g-beach-2")

        store.visit("alice", first, NOW)
        caplog.set_level("INFO", logger="whereto")
        unlock = exploration_service.check_new_neighborhood(
            db_engine, "alice", "g-beach-1", index,
        )
        assert unlock.is_new is True
        assert unlock.neighborhood.name == "The Beaches"
        assert unlock.total_explored == 1
        assert "unlocked neighborhood The Beaches" in caplog.text

        store.visit("alice", second, NOW + timedelta(hours=1))
        unlock = exploration_service.check_new_neighborhood(
            db_engine, "alice", "g-beach-2", index,
        )
        assert unlock.is_new is False

    def test_place_outside_every_zone(self, db_engine, store, index):
        store.user("alice")
        store.visit("alice", store.place(NOWHERE, google_id="g-null-island"), NOW)

        unlock = exploration_service.check_new_neighborhood(
            db_engine, "alice", "g-null-island", index,
        )

        assert unlock.is_new is False
        assert unlock.neighborhood is None
        assert unlock.total_explored == 0

    def test_place_without_coordinates(self, db_engine, store, index):
        store.user("alice")
        store.place((None, None), google_id="g-unmapped")

        unlock = exploration_service.check_new_neighborhood(
            db_engine, "alice", "g-unmapped", index,
        )

        assert unlock.neighborhood is None


class TestCompareWithFriend:
    def test_requires_friendship(self, db_engine, store, index):
        store.user("alice")
        store.user("bob")
        with pytest.raises(ForbiddenError, match="Not friends"):
            exploration_service.compare_with_friend(db_engine, "alice", "bob", index)

    def test_pending_is_not_enough(self, db_engine, store, index):
        store.user("alice")
        store.user("bob")
        store.friends("alice", "bob", FriendshipStatus.PENDING)
        with pytest.raises(ForbiddenError):
            exploration_service.compare_with_friend(db_engine, "alice", "bob", index)

    def test_comparison_with_profiles(self, db_engine, store, index):
        store.user("alice", name="Alice", image="https://img/alice.png")
        store.user("bob", name="Bob")
        store.friends("bob", "alice")
        shared = store.place(HIGH_PARK)
        store.visit("alice", shared, NOW)
        store.visit("alice", store.place(THE_BEACHES), NOW)
        store.visit("bob", shared, NOW)

        view = exploration_service.compare_with_friend(db_engine, "alice", "bob", index)

        assert view.user.name == "Alice"
        assert view.user.avatar_url == "https://img/alice.png"
        assert view.user.visit_count == 2
        assert view.friend.visit_count == 1
        cmp = view.comparison
        assert (cmp.shared, cmp.only_user, cmp.only_friend, cmp.neither) == (1, 1, 0, 40)

    def test_missing_user_row(self, db_engine, store, index):
        store.user("alice")
        store.friends("alice", "ghost")
        with pytest.raises(NotFoundError, match="User not found"):
            exploration_service.compare_with_friend(db_engine, "alice", "ghost", index)

    def test_missing_friend_id(self, db_engine, index):
        with pytest.raises(InvalidInputError):
            exploration_service.compare_with_friend(db_engine, "alice", "", index)


# ===========================================================================
# Social
# ===========================================================================
class TestFriendship:
    def test_accepted_either_direction(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        store.friends("bob", "alice")
        with Session(db_engine) as session:
            assert social_service.are_friends(session, "alice", "bob")
            assert social_service.are_friends(session, "bob", "alice")
            assert social_service.count_friends(session, "alice") == 1

    def test_declined_is_not_friends(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        store.friends("alice", "bob", FriendshipStatus.DECLINED)
        with Session(db_engine) as session:
            assert not social_service.are_friends(session, "alice", "bob")
            with pytest.raises(ForbiddenError):
                social_service.require_friendship(session, "alice", "bob")


class TestGetCompatibility:
    def test_requires_friendship(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        with pytest.raises(ForbiddenError):
            social_service.get_compatibility(db_engine, "alice", "bob")

    def test_no_saves(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        store.friends("alice", "bob")
        result = social_service.get_compatibility(db_engine, "alice", "bob")
        assert result.no_data is True
        assert result.score == 0

    def test_scores_from_store(self, db_engine, store):
        store.user("alice")
        store.user("bob")
        store.friends("alice", "bob")
        places = [store.place(price_level=2, rating=4.4) for _ in range(5)]
        for p in places:
            store.save("alice", p, "coffee")
            store.save("bob", p, "coffee")

        result = social_service.get_compatibility(db_engine, "alice", "bob")

        assert result.score == 100
        assert result.shared_count == 5
        assert result.shared_intents == ["Coffee & Catch-Up"]
        assert result.shared_price == "$$"
        assert {p.place_id for p in result.shared_places} == set(places)

    def test_save_rows_carry_place_fields(self, db_engine, store):
        store.user("alice")
        pid = store.place(google_id="g-cafe", name="Cafe", price_level=1, rating=4.0)
        store.save("alice", pid, "quiet")
        with Session(db_engine) as session:
            (row,) = social_service.load_save_rows(session, "alice")
        assert row.place_id == pid
        assert row.google_place_id == "g-cafe"
        assert row.name == "Cafe"
        assert row.intent == "quiet"
        assert row.price_level == 1
        assert row.rating == 4.0
