"""Dataclasses and enums for teams, matches and wagers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Union

from golazo.errors import UnknownMarketError, ValidationError

DEFAULT_POSITION = 10
DEFAULT_FORM = "DDDDD"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class League(str, Enum):
    D1 = "D1"
    D2 = "D2"
    D3 = "D3"
    CUSTOM = "CUSTOM"

    @property
    def rank(self) -> int:
        """Lower is stronger; custom teams sit below the lowest division."""

        return {"D1": 1, "D2": 2, "D3": 3}.get(self.value, 4)


class Outcome(str, Enum):
    TEAM1 = "team1"
    DRAW = "draw"
    TEAM2 = "team2"

    @classmethod
    def parse(cls, value: Outcome | str) -> Outcome:
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid outcome '{value}'. Use team1, draw or team2.") from exc


class MatchStatus(str, Enum):
    UPCOMING = "upcoming"
    FINISHED = "finished"


class BetStatus(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"


class BetType(str, Enum):
    SIMPLE = "simple"
    EXACT_SCORE = "exact_score"
    SPECIAL = "special"
    SPECIAL_COMBINED = "special_combined"


class SpecialMarket(str, Enum):
    """Stable vocabulary of special-event keys stored on wager records."""

    BOTH_TEAMS_SCORE = "both_teams_score"
    TOTAL_GOALS_OVER_2_5 = "total_goals_over_2_5"
    TOTAL_GOALS_UNDER_2_5 = "total_goals_under_2_5"
    HOME_GOALS_OVER_1_5 = "home_goals_over_1_5"
    AWAY_GOALS_OVER_1_5 = "away_goals_over_1_5"
    CORNER_GOAL = "corner_goal"
    FREE_KICK_GOAL = "free_kick_goal"
    BICYCLE_KICK_GOAL = "bicycle_kick_goal"
    HEADER_GOAL = "header_goal"
    STRIKER_GOAL = "striker_goal"
    MIDFIELDER_GOAL = "midfielder_goal"
    DEFENDER_GOAL = "defender_goal"
    GOALKEEPER_GOAL = "goalkeeper_goal"

    @classmethod
    def parse(cls, value: SpecialMarket | str) -> SpecialMarket:
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownMarketError(f"Unknown special market '{value}'") from exc

    @property
    def derived_from_score(self) -> bool:
        """True for markets settled from the score alone, False for flagged events."""

        return self in SCORE_MARKETS


SCORE_MARKETS = frozenset(
    {
        SpecialMarket.BOTH_TEAMS_SCORE,
        SpecialMarket.TOTAL_GOALS_OVER_2_5,
        SpecialMarket.TOTAL_GOALS_UNDER_2_5,
        SpecialMarket.HOME_GOALS_OVER_1_5,
        SpecialMarket.AWAY_GOALS_OVER_1_5,
    }
)


@dataclass(frozen=True)
class Score:
    home: int
    away: int

    def __post_init__(self) -> None:
        for goals in (self.home, self.away):
            if isinstance(goals, bool) or not isinstance(goals, int) or goals < 0:
                raise ValidationError("Goals must be whole numbers (0 or greater).")

    def __str__(self) -> str:
        return f"{self.home}-{self.away}"

    @classmethod
    def parse(cls, text: str) -> Score:
        home, sep, away = text.strip().partition("-")
        if not sep:
            raise ValidationError(f"Invalid score '{text}'. Expected 'H-A'.")
        try:
            return cls(int(home), int(away))
        except ValueError as exc:
            raise ValidationError(f"Invalid score '{text}'. Expected 'H-A'.") from exc

    @property
    def total(self) -> int:
        return self.home + self.away

    @property
    def outcome(self) -> Outcome:
        if self.home > self.away:
            return Outcome.TEAM1
        if self.away > self.home:
            return Outcome.TEAM2
        return Outcome.DRAW


@dataclass
class Team:
    """Team metadata as harvested from league standings."""

    name: str
    league: League
    position: int | None = None
    last_five: str = DEFAULT_FORM
    tournament: str = ""
    original_name: str | None = None

    def __post_init__(self) -> None:
        self.league = League(self.league)
        if self.position is not None and (isinstance(self.position, bool) or self.position < 1):
            raise ValidationError(f"Position for '{self.name}' must be a positive integer.")

    @property
    def effective_position(self) -> int:
        return self.position or DEFAULT_POSITION

    @property
    def short_name(self) -> str:
        return self.original_name or self.name

    @property
    def display_name(self) -> str:
        return f"{self.short_name} ({self.league.value})"


@dataclass(frozen=True)
class MatchOdds:
    team1: float
    draw: float
    team2: float

    def for_outcome(self, outcome: Outcome) -> float:
        return {
            Outcome.TEAM1: self.team1,
            Outcome.DRAW: self.draw,
            Outcome.TEAM2: self.team2,
        }[outcome]

    def as_dict(self) -> dict[str, float]:
        return {"team1": self.team1, "draw": self.draw, "team2": self.team2}


@dataclass
class Match:
    id: str
    team1: str
    team2: str
    odds: MatchOdds
    match_time: datetime
    status: MatchStatus = MatchStatus.UPCOMING
    result: Outcome | None = None
    score: Score | None = None
    wager_ids: list[str] = field(default_factory=list)
    tournament: str = "custom"
    is_custom: bool = True

    @property
    def is_upcoming(self) -> bool:
        return self.status is MatchStatus.UPCOMING


@dataclass
class MatchResult:
    outcome: Outcome
    score: Score
    timestamp: datetime = field(default_factory=utcnow)
    is_manual: bool = False
    special_results: dict[SpecialMarket, bool] = field(default_factory=dict)


@dataclass
class UserAccount:
    user_id: str
    balance: float
    total_bets: int = 0
    won_bets: int = 0
    lost_bets: int = 0
    total_winnings: float = 0.0
    username: str = "Player"

    @property
    def win_rate(self) -> float:
        return self.won_bets / self.total_bets * 100 if self.total_bets else 0.0


@dataclass(frozen=True)
class SimpleSelection:
    prediction: Outcome
    bet_type: ClassVar[BetType] = BetType.SIMPLE


@dataclass(frozen=True)
class ExactScoreSelection:
    score: Score
    bet_type: ClassVar[BetType] = BetType.EXACT_SCORE


@dataclass(frozen=True)
class SpecialSelection:
    market: SpecialMarket
    bet_type: ClassVar[BetType] = BetType.SPECIAL


@dataclass(frozen=True)
class CombinedLeg:
    market: SpecialMarket
    name: str
    odds: float


@dataclass(frozen=True)
class CombinedSpecialSelection:
    legs: tuple[CombinedLeg, ...]
    bet_type: ClassVar[BetType] = BetType.SPECIAL_COMBINED


Selection = Union[SimpleSelection, ExactScoreSelection, SpecialSelection, CombinedSpecialSelection]


@dataclass
class Wager:
    id: str
    user_id: str
    match_id: str
    selection: Selection
    amount: float
    odds: float
    description: str
    status: BetStatus = BetStatus.PENDING
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def bet_type(self) -> BetType:
        return self.selection.bet_type

    @property
    def potential_winnings(self) -> int:
        return round(self.amount * self.odds)


@dataclass(frozen=True)
class Verdict:
    wager_id: str
    user_id: str
    won: bool
    payout: float


@dataclass
class Settlement:
    match_id: str
    outcome: Outcome
    score: Score
    verdicts: list[Verdict]
    balances: dict[str, float]
    is_manual: bool = False

    @property
    def total_paid(self) -> float:
        return sum(v.payout for v in self.verdicts)
