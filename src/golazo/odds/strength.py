"""Team strength heuristics for league play and knockout cups."""

from __future__ import annotations

from golazo.betting.types import League, Team
from golazo.odds import tables


def _tier_lookup(position: int, rows) -> tuple:
    for row in rows:
        if row[0] is None or position <= row[0]:
            return row[1:]
    return rows[-1][1:]


def _first_threshold(count: float, rows, default: float) -> float:
    for threshold, value in rows:
        if count >= threshold:
            return value
    return default


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def form_counts(form: str) -> tuple[int, int]:
    """Return (wins, losses) in a W/D/L form string."""

    form = form.upper()
    return form.count("W"), form.count("L")


def regular_form_bonus(form: str) -> float:
    wins, losses = form_counts(form)
    bonus = _first_threshold(wins, tables.REGULAR_FORM_WIN_BONUS, tables.REGULAR_FORM_NO_WIN)
    bonus *= _first_threshold(losses, tables.REGULAR_FORM_LOSS_PENALTY, 1.0)
    return _clamp(bonus, tables.REGULAR_FORM_CLAMP)


def cup_form_bonus(form: str) -> float:
    wins, losses = form_counts(form)
    bonus = _first_threshold(wins, tables.CUP_FORM_WIN_BONUS, tables.CUP_FORM_NO_WIN)
    bonus *= _first_threshold(losses, tables.CUP_FORM_LOSS_PENALTY, 1.0)
    if losses == 0 and wins >= 2:
        bonus *= tables.CUP_UNBEATEN_BONUS
    return _clamp(bonus, tables.CUP_FORM_CLAMP)


def regular_position_multiplier(league: League, position: int) -> float:
    d1, d2, lower = _tier_lookup(position, tables.REGULAR_POSITION_MULTIPLIERS)
    if league is League.D1:
        return d1
    if league is League.D2:
        return d2
    return lower


def regular_strength(team: Team) -> float:
    """Strength score used for league and friendly fixtures."""

    strength = tables.BASE_STRENGTH + tables.REGULAR_LEAGUE_OFFSET.get(team.league, 0.0)
    strength *= regular_position_multiplier(team.league, team.effective_position)
    # Floor the table strength; form scales the floored value.
    strength = max(tables.MIN_STRENGTH, strength)
    return strength * regular_form_bonus(team.last_five)


def inter_league_multipliers(team1: Team, team2: Team) -> tuple[float, float]:
    """Gap amplifiers for a D1 side meeting a D2 side, in (team1, team2) order."""

    if team1.league is League.D2 and team2.league is League.D1:
        upper, lower = inter_league_multipliers(team2, team1)
        return lower, upper
    if not (team1.league is League.D1 and team2.league is League.D2):
        return 1.0, 1.0

    d1_position = team1.effective_position
    d2_position = team2.effective_position
    (rows,) = _tier_lookup(d1_position, tables.INTER_LEAGUE_MULTIPLIERS)
    for min_position, d1_multiplier, d2_multiplier in rows:
        if d2_position >= min_position:
            return d1_multiplier, d2_multiplier
    _, d1_multiplier, d2_multiplier = rows[-1]
    return d1_multiplier, d2_multiplier


def regular_strengths(team1: Team, team2: Team) -> tuple[float, float]:
    """Both regular strengths after the inter-league amplification step."""

    s1 = regular_strength(team1)
    s2 = regular_strength(team2)
    if team1.league is not team2.league:
        m1, m2 = inter_league_multipliers(team1, team2)
        s1 *= m1
        s2 *= m2
    return s1, s2


def cup_position_modifier(league: League, position: int) -> float:
    rows = tables.CUP_POSITION_MODIFIERS.get(league)
    if rows is None:
        return 1.0
    (modifier,) = _tier_lookup(position, rows)
    return modifier


def cup_tournament_factor(tournament: str | None, league: League) -> float:
    factors = tables.CUP_TOURNAMENT_FACTORS.get((tournament or "").lower(), {})
    return factors.get(league, 1.0)


def _cup_mismatch_multiplier(team: Team, opponent: Team) -> float:
    multiplier = 1.0
    position = team.effective_position
    opp_position = opponent.effective_position
    if team.league is League.D1 and position == 1:
        if opponent.league is League.D2 and opp_position >= 7:
            multiplier *= tables.CUP_LEADER_VS_D2_MID
        elif opponent.league is League.D3 or (opponent.league is League.D2 and opp_position >= 15):
            multiplier *= tables.CUP_LEADER_VS_MINNOW
        elif opponent.league is League.D2 and opp_position >= 4:
            multiplier *= tables.CUP_LEADER_VS_D2_TOP
    if team.league is League.D1 and position <= 3 and opponent.league is League.D2 and opp_position >= 8:
        multiplier *= tables.CUP_TOP3_VS_D2_LOWER
    return multiplier


def cup_strength(team: Team, opponent: Team, tournament: str | None) -> float:
    """Strength score for a knockout tie; the opponent drives the mismatch bonus."""

    strength = tables.BASE_STRENGTH + tables.CUP_LEAGUE_OFFSET.get(team.league, 0.0)
    strength *= cup_position_modifier(team.league, team.effective_position)
    strength *= cup_form_bonus(team.last_five)
    strength *= cup_tournament_factor(tournament, team.league)
    strength *= _cup_mismatch_multiplier(team, opponent)
    return strength
