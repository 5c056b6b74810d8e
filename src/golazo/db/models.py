"""ORM models for Golazo."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarative class."""


class TeamRow(Base):
    """Team metadata harvested from standings."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(128), primary_key=True)
    league: Mapped[str] = mapped_column(String(16), nullable=False)
    position: Mapped[int | None] = mapped_column(Integer)
    last_five: Mapped[str] = mapped_column(String(16), default="DDDDD")
    tournament: Mapped[str] = mapped_column(String(128), default="")
    original_name: Mapped[str | None] = mapped_column(String(128))


class MatchRow(Base):
    """Fixture with odds frozen at creation."""

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    team1: Mapped[str] = mapped_column(String(128), nullable=False)
    team2: Mapped[str] = mapped_column(String(128), nullable=False)
    team1_odds: Mapped[float] = mapped_column(Float, nullable=False)
    draw_odds: Mapped[float] = mapped_column(Float, nullable=False)
    team2_odds: Mapped[float] = mapped_column(Float, nullable=False)
    match_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="upcoming")
    result: Mapped[str | None] = mapped_column(String(16))
    score: Mapped[str | None] = mapped_column(String(16))
    wager_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    tournament: Mapped[str] = mapped_column(String(32), default="custom")
    is_custom: Mapped[bool] = mapped_column(Boolean, default=True)


class UserRow(Base):
    """Play-money account ledger."""

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(128), default="Player")
    balance: Mapped[float] = mapped_column(Float, nullable=False)
    total_bets: Mapped[int] = mapped_column(Integer, default=0)
    won_bets: Mapped[int] = mapped_column(Integer, default=0)
    lost_bets: Mapped[int] = mapped_column(Integer, default=0)
    total_winnings: Mapped[float] = mapped_column(Float, default=0.0)


class WagerRow(Base):
    """Placed wager; ``payload`` keeps the type-specific selection."""

    __tablename__ = "wagers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    match_id: Mapped[str] = mapped_column(String(32), nullable=False)
    bet_type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    odds: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(String(512), default="")
    status: Mapped[str] = mapped_column(String(16), default="pending")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class MatchResultRow(Base):
    """Resolution record for a finished match."""

    __tablename__ = "match_results"

    match_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    result: Mapped[str] = mapped_column(String(16), nullable=False)
    score: Mapped[str] = mapped_column(String(16), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_manual: Mapped[bool] = mapped_column(Boolean, default=False)
    special_results: Mapped[dict[str, bool]] = mapped_column(JSON, default=dict)
