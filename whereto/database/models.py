"""
whereto.database.models — SQLAlchemy 2.0 Data Models
=====================================================

Tables read by the analytics engine plus the one table it writes.

Tables:
- users            — Member profiles (id issued by the identity provider)
- places           — Google-sourced venues with coordinates and price/rating
- visits           — Verified visits, one row per (user, place)
- saves            — Swipe-to-save rows, one row per (user, place)
- friendships      — Friend requests; undirected once accepted
- recommendations  — Place recommendations sent between users
- earned_badges    — Append-only badge awards, unique per (user, badge_type)

Everything except ``earned_badges`` is owned by the CRUD layer; the engine
only reads it.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all WhereTo ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class VisitMethod(enum.StrEnum):
    """How a visit was verified."""
    GO_NOW = "go_now"
    MANUAL = "manual"


class FriendshipStatus(enum.StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(100), default=None)
    image: Mapped[str | None] = mapped_column(String(500), default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    visits: Mapped[list[Visit]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    saves: Mapped[list[Save]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    badges: Mapped[list[EarnedBadge]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id!r} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Places
# ---------------------------------------------------------------------------
class Place(Base):
    __tablename__ = "places"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    google_place_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), default=None)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, default=None)
    price_level: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1–4
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (
        UniqueConstraint("google_place_id", name="uq_places_google_place_id"),
    )

    def __repr__(self) -> str:
        return f"<Place id={self.id!r} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Visits: upserted per (user, place); verified_at moves on re-verification
# ---------------------------------------------------------------------------
class Visit(Base):
    __tablename__ = "visits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    place_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("places.id", ondelete="CASCADE"), nullable=False
    )
    method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VisitMethod.MANUAL.value
    )
    verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="visits")
    place: Mapped[Place] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "place_id", name="uq_visits_user_place"),
        Index("ix_visits_user_verified", "user_id", "verified_at"),
    )

    def __repr__(self) -> str:
        return f"<Visit user={self.user_id!r} place={self.place_id!r}>"


# ---------------------------------------------------------------------------
# Saves
# ---------------------------------------------------------------------------
class Save(Base):
    __tablename__ = "saves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    place_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("places.id", ondelete="CASCADE"), nullable=False
    )
    intent: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="saves")
    place: Mapped[Place] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "place_id", name="uq_saves_user_place"),
    )

    def __repr__(self) -> str:
        return f"<Save user={self.user_id!r} place={self.place_id!r} intent={self.intent!r}>"


# ---------------------------------------------------------------------------
# Friendships
# ---------------------------------------------------------------------------
class Friendship(Base):
    __tablename__ = "friendships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FriendshipStatus.PENDING.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id", name="uq_friendships_pair"),
        Index("ix_friendships_receiver_status", "receiver_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Friendship {self.sender_id!r}->{self.receiver_id!r} "
            f"status={self.status}>"
        )


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
class Recommendation(Base):
    __tablename__ = "recommendations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    place_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("places.id", ondelete="CASCADE"), nullable=False
    )
    note: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_recommendations_sender", "sender_id"),
    )

    def __repr__(self) -> str:
        return f"<Recommendation {self.sender_id!r}->{self.receiver_id!r}>"


# ---------------------------------------------------------------------------
# EarnedBadge: the only table the engine writes
# ---------------------------------------------------------------------------
class EarnedBadge(Base):
    """One row per badge a user has earned.

    ``uq_earned_badges_user_type`` is what keeps concurrent evaluations
    from awarding a badge twice; the service relies on it rather than on
    any in-process bookkeeping.
    """
    __tablename__ = "earned_badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    badge_type: Mapped[str] = mapped_column(String(50), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="badges")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_type", name="uq_earned_badges_user_type"),
    )

    def __repr__(self) -> str:
        return f"<EarnedBadge user={self.user_id!r} type={self.badge_type!r}>"
