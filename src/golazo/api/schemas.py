"""Pydantic schemas for the Golazo API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class OddsResponse(BaseModel):
    team1: float
    draw: float
    team2: float


class OddsBoardResponse(BaseModel):
    match_id: str
    team1: str
    team2: str
    status: str
    basic: dict[str, float]
    exact_scores: dict[str, float]
    specials: dict[str, float]


class MatchResponse(BaseModel):
    id: str
    team1: str
    team2: str
    odds: OddsResponse
    match_time: datetime
    status: str
    result: str | None = None
    score: str | None = None
    tournament: str
    is_custom: bool
    bets_count: int = 0


class CreateMatchRequest(BaseModel):
    team1: str = Field(min_length=1)
    team2: str = Field(min_length=1)
    tournament: str | None = None


class SimpleBetRequest(BaseModel):
    user_id: str
    match_id: str
    prediction: str = Field(pattern="^(team1|draw|team2)$")
    amount: float


class SpecialBetRequest(BaseModel):
    user_id: str
    match_id: str
    bet_type: str = Field(pattern="^(exact_score|special|special_combined)$")
    amount: float
    home: int | None = None
    away: int | None = None
    special_type: str | None = None
    special_bets: list[str] = Field(default_factory=list)


class WagerResponse(BaseModel):
    id: str
    user_id: str
    match_id: str
    bet_type: str
    description: str
    amount: float
    odds: float
    status: str
    potential_winning: int
    timestamp: datetime
    selection: dict[str, Any] = Field(default_factory=dict)
    new_balance: float | None = None


class ResultRequest(BaseModel):
    actor_id: str | None = None
    result: str
    score1: int = Field(ge=0)
    score2: int = Field(ge=0)
    special_events: list[str] = Field(default_factory=list)


class VerdictResponse(BaseModel):
    wager_id: str
    user_id: str
    won: bool
    payout: float


class SettlementResponse(BaseModel):
    match_id: str
    result: str
    score: str
    is_manual: bool
    verdicts: list[VerdictResponse]
    balances: dict[str, float]


class CancellationResponse(BaseModel):
    matches: list[str]
    wagers_cancelled: int
    refunds: dict[str, float]
    total_refunded: float


class TransferRequest(BaseModel):
    from_user: str
    to_user: str
    amount: float


class GrantRequest(BaseModel):
    actor_id: str
    to_user: str
    amount: float


class UserStatsResponse(BaseModel):
    user_id: str
    username: str
    balance: float
    total_bets: int
    won_bets: int
    lost_bets: int
    pending_bets: int
    total_winnings: float
    win_rate: float


class LeaderboardEntry(BaseModel):
    user_id: str
    username: str
    balance: float
    total_bets: int
    won_bets: int
    lost_bets: int
    total_winnings: float
    win_rate: float


class StatsResponse(BaseModel):
    total_users: int
    upcoming_matches: int
    finished_matches: int
    total_bets: int
    total_volume: float
    pending_bets: int
    richest_balance: float
    average_balance: float
