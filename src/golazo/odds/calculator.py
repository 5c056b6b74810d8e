"""Match, exact-score and special-market odds.

Odds are decimal and shaded by a house margin::

    odds = clamp(1 / p * (1 - margin), floor, ceiling)

rounded half-up to two decimals. League fixtures and knockout cups use
different strength heuristics, margins and clamps; see ``golazo.odds.tables``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from golazo.betting.types import (
    League,
    Match,
    MatchOdds,
    Score,
    SpecialMarket,
    Team,
)
from golazo.config import get_settings
from golazo.errors import TeamNotFoundError, ValidationError
from golazo.odds import tables
from golazo.odds.strength import cup_strength, form_counts, regular_strengths

logger = logging.getLogger(__name__)

BOARD_MAX_GOALS = 3


def round_odds(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def _price(prob: float, margin: float, bounds: tuple[float, float]) -> float:
    return _clamp((1 / prob) * (1 - margin), bounds)


def _ratio(s1: float, s2: float) -> float:
    return max(s1, s2) / min(s1, s2)


@dataclass(frozen=True)
class OutcomeProbabilities:
    """Three-way split; ``team1 + draw + team2 == 1``."""

    team1: float
    draw: float
    team2: float


def is_knockout(tournament: str | None, knockout_tournaments: Iterable[str] | None = None) -> bool:
    if not tournament:
        return False
    if knockout_tournaments is None:
        knockout_tournaments = get_settings().knockout_tournaments
    return tournament.lower() in {name.lower() for name in knockout_tournaments}


def regular_draw_probability(team1: Team, team2: Team, s1: float, s2: float) -> float:
    if team1.league is not team2.league:
        ratio = _ratio(s1, s2)
        draw = tables.REGULAR_CROSS_LEAGUE_DRAW_BASE
        for threshold, value in tables.REGULAR_CROSS_LEAGUE_DRAW:
            if ratio > threshold:
                draw = value
                break
    else:
        avg_position = (team1.effective_position + team2.effective_position) / 2
        draw = tables.REGULAR_SAME_LEAGUE_DRAW[-1][1]
        for threshold, value in tables.REGULAR_SAME_LEAGUE_DRAW:
            if threshold is not None and avg_position <= threshold:
                draw = value
                break
    return _clamp(draw, tables.REGULAR_DRAW_CLAMP)


def cup_draw_probability(s1: float, s2: float) -> float:
    ratio = _ratio(s1, s2)
    for threshold, value in tables.CUP_DRAW_BY_RATIO:
        if ratio > threshold:
            return value
    return tables.CUP_DRAW_BASE


def _split(s1: float, s2: float, draw: float) -> OutcomeProbabilities:
    total = s1 + s2
    return OutcomeProbabilities(
        team1=s1 / total * (1 - draw),
        draw=draw,
        team2=s2 / total * (1 - draw),
    )


def regular_probabilities(team1: Team, team2: Team) -> OutcomeProbabilities:
    s1, s2 = regular_strengths(team1, team2)
    logger.debug("Regular strengths %s=%.2f %s=%.2f", team1.name, s1, team2.name, s2)
    return _split(s1, s2, regular_draw_probability(team1, team2, s1, s2))


def cup_probabilities(team1: Team, team2: Team, tournament: str) -> OutcomeProbabilities:
    s1 = cup_strength(team1, team2, tournament)
    s2 = cup_strength(team2, team1, tournament)
    logger.debug("Cup strengths (%s) %s=%.2f %s=%.2f", tournament, team1.name, s1, team2.name, s2)
    return _split(s1, s2, cup_draw_probability(s1, s2))


def apply_extreme_limits(team1: Team, team2: Team, odds: tuple[float, float, float]) -> tuple[float, float, float]:
    """Hard caps for a D1 leader against the bottom of D2, in either order."""

    team1_odds, draw_odds, team2_odds = odds
    if team1.league is League.D1 and team2.league is League.D2:
        favourite, underdog, flipped = team1, team2, False
    elif team1.league is League.D2 and team2.league is League.D1:
        favourite, underdog, flipped = team2, team1, True
    else:
        return odds

    for max_pos, min_pos, fav_cap, dog_floor, draw_floor in tables.EXTREME_ODDS_LIMITS:
        if favourite.effective_position <= max_pos and underdog.effective_position >= min_pos:
            fav_odds, dog_odds = (team2_odds, team1_odds) if flipped else (team1_odds, team2_odds)
            fav_odds = min(fav_odds, fav_cap)
            dog_odds = max(dog_odds, dog_floor)
            draw_odds = max(draw_odds, draw_floor)
            if flipped:
                return dog_odds, draw_odds, fav_odds
            return fav_odds, draw_odds, dog_odds
    return odds


def odds_for_teams(
    team1: Team,
    team2: Team,
    tournament: str | None = None,
    *,
    knockout_tournaments: Iterable[str] | None = None,
    regular_margin: float | None = None,
    cup_margin: float | None = None,
) -> MatchOdds:
    """Three-way decimal odds for a fixture between two known teams."""

    settings = get_settings()
    if is_knockout(tournament, knockout_tournaments):
        margin = settings.cup_margin if cup_margin is None else cup_margin
        probs = cup_probabilities(team1, team2, tournament or "")
        team_bounds, draw_bounds = tables.CUP_TEAM_ODDS_CLAMP, tables.CUP_DRAW_ODDS_CLAMP
        raw = (
            _price(probs.team1, margin, team_bounds),
            _price(probs.draw, margin, draw_bounds),
            _price(probs.team2, margin, team_bounds),
        )
    else:
        margin = settings.regular_margin if regular_margin is None else regular_margin
        probs = regular_probabilities(team1, team2)
        team_bounds, draw_bounds = tables.REGULAR_TEAM_ODDS_CLAMP, tables.REGULAR_DRAW_ODDS_CLAMP
        raw = apply_extreme_limits(
            team1,
            team2,
            (
                _price(probs.team1, margin, team_bounds),
                _price(probs.draw, margin, draw_bounds),
                _price(probs.team2, margin, team_bounds),
            ),
        )
    odds = MatchOdds(team1=round_odds(raw[0]), draw=round_odds(raw[1]), team2=round_odds(raw[2]))
    logger.debug("Odds %s vs %s (%s): %s", team1.name, team2.name, tournament or "league", odds)
    return odds


def compute_match_odds(
    teams: Mapping[str, Team],
    team1_name: str,
    team2_name: str,
    tournament: str | None = None,
    **kwargs,
) -> MatchOdds:
    """Look both teams up by display name and price the fixture."""

    missing = [name for name in (team1_name, team2_name) if name not in teams]
    if missing:
        raise TeamNotFoundError(missing[0])
    if team1_name == team2_name:
        raise ValidationError("A team cannot play against itself.")
    return odds_for_teams(teams[team1_name], teams[team2_name], tournament, **kwargs)


def _match_teams(match: Match, teams: Mapping[str, Team]) -> tuple[Team, Team] | None:
    team1 = teams.get(match.team1)
    team2 = teams.get(match.team2)
    if team1 is None or team2 is None:
        return None
    return team1, team2


def exact_score_base_odds(score: Score) -> float:
    home, away = score.home, score.away
    margin = abs(home - away)
    top = max(home, away)
    if margin == 0:
        return tables.EXACT_SCORE_DRAWS.get(home, tables.EXACT_SCORE_HIGH_DRAW)
    if margin == 1:
        max_top, low, high = tables.EXACT_SCORE_ONE_GOAL
        return low if top <= max_top else high
    if margin == 2:
        max_top, low, high = tables.EXACT_SCORE_TWO_GOALS
        return low if top <= max_top else high
    return tables.EXACT_SCORE_BLOWOUT_BASE + margin * tables.EXACT_SCORE_BLOWOUT_PER_GOAL


def exact_score_odds(match: Match, score: Score, teams: Mapping[str, Team]) -> float:
    odds = exact_score_base_odds(score)
    pair = _match_teams(match, teams)
    if pair:
        diff = abs(pair[0].effective_position - pair[1].effective_position)
        mismatch_at, mismatch_factor = tables.EXACT_SCORE_MISMATCH
        even_below, even_factor = tables.EXACT_SCORE_EVEN
        if diff > mismatch_at:
            odds *= mismatch_factor
        elif diff < even_below:
            odds *= even_factor
    return _clamp(round_odds(odds), tables.EXACT_SCORE_CLAMP)


def special_market_odds(match: Match, market: SpecialMarket | str, teams: Mapping[str, Team]) -> float:
    market = SpecialMarket.parse(market)
    odds = tables.SPECIAL_BASE_ODDS[market]
    pair = _match_teams(match, teams)
    if pair:
        team1, team2 = pair
        avg_position = (team1.effective_position + team2.effective_position) / 2
        top_at, top_factor = tables.SPECIAL_TOP_TABLE
        bottom_at, bottom_factor = tables.SPECIAL_BOTTOM_TABLE
        if avg_position <= top_at:
            if market in tables.SET_PIECE_MARKETS:
                odds *= top_factor
        elif avg_position >= bottom_at:
            odds *= bottom_factor

        avg_wins = (form_counts(team1.last_five)[0] + form_counts(team2.last_five)[0]) / 2
        hot_at, hot_factor = tables.SPECIAL_HOT_FORM
        cold_at, cold_factor = tables.SPECIAL_COLD_FORM
        if avg_wins >= hot_at:
            odds *= hot_factor
        elif avg_wins <= cold_at:
            odds *= cold_factor
    return _clamp(round_odds(odds), tables.SPECIAL_ODDS_CLAMP)


def combined_special_odds(
    match: Match,
    markets: Iterable[SpecialMarket | str],
    teams: Mapping[str, Team],
) -> float:
    """Product of each leg's own odds; legs are treated as independent."""

    total = 1.0
    for market in markets:
        total *= special_market_odds(match, market, teams)
    return total


def odds_board(match: Match, teams: Mapping[str, Team]) -> dict[str, dict[str, float]]:
    """Every market offered on a match, keyed for display."""

    exact = {
        str(Score(home, away)): exact_score_odds(match, Score(home, away), teams)
        for home in range(BOARD_MAX_GOALS + 1)
        for away in range(BOARD_MAX_GOALS + 1)
    }
    specials = {market.value: special_market_odds(match, market, teams) for market in SpecialMarket}
    return {"basic": match.odds.as_dict(), "exact_scores": exact, "specials": specials}
