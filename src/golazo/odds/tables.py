"""Hand-tuned lookup tables behind the odds heuristics.

Position tiers are ``(last_position_in_tier, multiplier...)`` rows scanned in
order; ``None`` closes the table. Form tables are ``(min_count, factor)`` rows
scanned in order, first hit wins.
"""

from __future__ import annotations

from typing import Final

from golazo.betting.types import League, SpecialMarket

# ---------------------------------------------------------------------------
# Regular season
# ---------------------------------------------------------------------------

BASE_STRENGTH: Final[float] = 100.0
MIN_STRENGTH: Final[float] = 10.0

REGULAR_LEAGUE_OFFSET: Final[dict[League, float]] = {
    League.D1: 150.0,
    League.D2: 50.0,
    League.D3: -50.0,
}

#: (last position, D1, D2, D3 and custom)
REGULAR_POSITION_MULTIPLIERS: Final = (
    (1, 2.8, 2.2, 1.8),
    (2, 2.4, 1.9, 1.6),
    (3, 2.1, 1.7, 1.4),
    (5, 1.8, 1.4, 1.2),
    (8, 1.5, 1.1, 1.0),
    (12, 1.2, 0.9, 0.8),
    (16, 1.0, 0.7, 0.6),
    (None, 0.8, 0.5, 0.4),
)

REGULAR_FORM_WIN_BONUS: Final = ((4, 1.25), (3, 1.15), (2, 1.08), (1, 1.02))
REGULAR_FORM_NO_WIN: Final[float] = 1.0
REGULAR_FORM_LOSS_PENALTY: Final = ((4, 0.75), (3, 0.85), (2, 0.92))
REGULAR_FORM_CLAMP: Final = (0.7, 1.3)

#: D1 position bucket -> rows of (min D2 position, D1 multiplier, D2 multiplier)
INTER_LEAGUE_MULTIPLIERS: Final = (
    (1, ((18, 8.0, 0.15), (15, 6.0, 0.2), (10, 4.5, 0.25), (5, 3.5, 0.35), (1, 2.8, 0.45))),
    (3, ((15, 4.5, 0.25), (8, 3.2, 0.35), (1, 2.5, 0.5))),
    (8, ((15, 3.0, 0.4), (8, 2.2, 0.55), (1, 1.8, 0.65))),
    (None, ((15, 2.0, 0.6), (1, 1.5, 0.75))),
)

REGULAR_SAME_LEAGUE_DRAW: Final = ((5, 0.18), (10, 0.22), (None, 0.25))
REGULAR_CROSS_LEAGUE_DRAW: Final = ((8, 0.08), (5, 0.10), (3, 0.12))
REGULAR_CROSS_LEAGUE_DRAW_BASE: Final[float] = 0.12
REGULAR_DRAW_CLAMP: Final = (0.08, 0.25)

REGULAR_TEAM_ODDS_CLAMP: Final = (1.01, 50.0)
REGULAR_DRAW_ODDS_CLAMP: Final = (2.5, 20.0)

#: D1 favourite vs D2 underdog hard limits:
#: (max D1 position, min D2 position, favourite cap, underdog floor, draw floor)
EXTREME_ODDS_LIMITS: Final = (
    (1, 18, 1.05, 25.0, 15.0),
    (1, 10, 1.10, 15.0, 12.0),
    (3, 15, 1.20, 12.0, 10.0),
)

# ---------------------------------------------------------------------------
# Knockout cups
# ---------------------------------------------------------------------------

CUP_LEAGUE_OFFSET: Final[dict[League, float]] = {
    League.D1: 60.0,
    League.D2: 20.0,
    League.D3: -30.0,
}

CUP_POSITION_MODIFIERS: Final[dict[League, tuple]] = {
    League.D1: ((1, 3.2), (2, 2.6), (3, 2.2), (5, 1.8), (8, 1.5), (12, 1.2), (16, 1.0), (None, 0.8)),
    League.D2: ((1, 2.0), (2, 1.7), (3, 1.5), (5, 1.3), (8, 1.0), (12, 0.8), (16, 0.6), (None, 0.4)),
    League.D3: ((1, 1.3), (3, 1.0), (8, 0.8), (None, 0.6)),
}

CUP_FORM_WIN_BONUS: Final = ((4, 1.35), (3, 1.25), (2, 1.15), (1, 1.05))
CUP_FORM_NO_WIN: Final[float] = 0.85
CUP_FORM_LOSS_PENALTY: Final = ((4, 0.65), (3, 0.75), (2, 0.85))
CUP_UNBEATEN_BONUS: Final[float] = 1.1
CUP_FORM_CLAMP: Final = (0.5, 1.8)

CUP_TOURNAMENT_FACTORS: Final[dict[str, dict[League, float]]] = {
    "maradei": {League.D1: 1.25, League.D2: 0.9},
    "cv": {},
    "cd2": {},
    "cd3": {},
    "izoro": {League.D1: 1.15},
    "izplata": {League.D2: 1.12},
}

CUP_LEADER_VS_D2_MID: Final[float] = 4.0
CUP_LEADER_VS_MINNOW: Final[float] = 6.0
CUP_LEADER_VS_D2_TOP: Final[float] = 2.5
CUP_TOP3_VS_D2_LOWER: Final[float] = 2.8

CUP_DRAW_BASE: Final[float] = 0.16
CUP_DRAW_BY_RATIO: Final = ((5, 0.10), (3, 0.12), (2, 0.14))

CUP_TEAM_ODDS_CLAMP: Final = (1.05, 30.0)
CUP_DRAW_ODDS_CLAMP: Final = (3.2, 10.0)

# ---------------------------------------------------------------------------
# Exact score and special markets
# ---------------------------------------------------------------------------

EXACT_SCORE_DRAWS: Final[dict[int, float]] = {0: 8.5, 1: 6.5, 2: 12.0}
EXACT_SCORE_HIGH_DRAW: Final[float] = 25.0
EXACT_SCORE_ONE_GOAL: Final = (2, 5.5, 9.0)
EXACT_SCORE_TWO_GOALS: Final = (3, 7.5, 15.0)
EXACT_SCORE_BLOWOUT_BASE: Final[float] = 20.0
EXACT_SCORE_BLOWOUT_PER_GOAL: Final[float] = 8.0
EXACT_SCORE_MISMATCH: Final = (10, 0.8)
EXACT_SCORE_EVEN: Final = (3, 1.3)
EXACT_SCORE_CLAMP: Final = (4.0, 80.0)

SPECIAL_BASE_ODDS: Final[dict[SpecialMarket, float]] = {
    SpecialMarket.BOTH_TEAMS_SCORE: 1.10,
    SpecialMarket.TOTAL_GOALS_OVER_2_5: 1.35,
    SpecialMarket.TOTAL_GOALS_UNDER_2_5: 2.25,
    SpecialMarket.HOME_GOALS_OVER_1_5: 1.25,
    SpecialMarket.AWAY_GOALS_OVER_1_5: 1.25,
    SpecialMarket.CORNER_GOAL: 8.5,
    SpecialMarket.FREE_KICK_GOAL: 6.0,
    SpecialMarket.BICYCLE_KICK_GOAL: 35.0,
    SpecialMarket.HEADER_GOAL: 3.2,
    SpecialMarket.STRIKER_GOAL: 1.6,
    SpecialMarket.MIDFIELDER_GOAL: 2.8,
    SpecialMarket.DEFENDER_GOAL: 6.5,
    SpecialMarket.GOALKEEPER_GOAL: 75.0,
}

SET_PIECE_MARKETS: Final = frozenset(
    {SpecialMarket.CORNER_GOAL, SpecialMarket.FREE_KICK_GOAL, SpecialMarket.HEADER_GOAL}
)
SPECIAL_TOP_TABLE: Final = (5, 0.85)
SPECIAL_BOTTOM_TABLE: Final = (15, 1.15)
SPECIAL_HOT_FORM: Final = (4, 0.9)
SPECIAL_COLD_FORM: Final = (1, 1.1)
SPECIAL_ODDS_CLAMP: Final = (1.1, 100.0)

SPECIAL_MARKET_NAMES: Final[dict[SpecialMarket, str]] = {
    SpecialMarket.BOTH_TEAMS_SCORE: "Both teams score",
    SpecialMarket.TOTAL_GOALS_OVER_2_5: "Over 2.5 goals",
    SpecialMarket.TOTAL_GOALS_UNDER_2_5: "Under 2.5 goals",
    SpecialMarket.HOME_GOALS_OVER_1_5: "Over 1.5 goals {team1}",
    SpecialMarket.AWAY_GOALS_OVER_1_5: "Over 1.5 goals {team2}",
    SpecialMarket.CORNER_GOAL: "Goal from a corner",
    SpecialMarket.FREE_KICK_GOAL: "Free-kick goal",
    SpecialMarket.BICYCLE_KICK_GOAL: "Bicycle-kick goal",
    SpecialMarket.HEADER_GOAL: "Headed goal",
    SpecialMarket.STRIKER_GOAL: "Striker scores",
    SpecialMarket.MIDFIELDER_GOAL: "Midfielder scores",
    SpecialMarket.DEFENDER_GOAL: "Defender scores",
    SpecialMarket.GOALKEEPER_GOAL: "Goalkeeper scores",
}
