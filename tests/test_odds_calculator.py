"""Odds engine tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from golazo.betting.types import League, Match, MatchOdds, Score, SpecialMarket, Team
from golazo.errors import TeamNotFoundError, UnknownMarketError, ValidationError
from golazo.odds import calculator


def _team(name: str, league: League, position: int | None, form: str = "DDDDD") -> Team:
    return Team(name=name, league=league, position=position, last_five=form)


def _match(team1: str = "Home FC", team2: str = "Away FC") -> Match:
    return Match(
        id="m1",
        team1=team1,
        team2=team2,
        odds=MatchOdds(2.5, 3.2, 2.8),
        match_time=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def test_round_odds_half_up() -> None:
    assert calculator.round_odds(2.2451) == pytest.approx(2.25)
    assert calculator.round_odds(2.2439) == pytest.approx(2.24)
    assert calculator.round_odds(6.0625) == pytest.approx(6.06)
    assert calculator.round_odds(1.0) == pytest.approx(1.0)


def test_even_league_fixture_prices() -> None:
    home = _team("Home FC", League.D2, 5)
    away = _team("Away FC", League.D2, 5)
    odds = calculator.odds_for_teams(home, away, regular_margin=0.08)
    assert odds.team1 == pytest.approx(2.24)
    assert odds.team2 == pytest.approx(2.24)
    assert odds.draw == pytest.approx(5.11)


def test_odds_within_bounds_and_carry_margin() -> None:
    home = _team("Home FC", League.D1, 4, "WWDLW")
    away = _team("Away FC", League.D1, 11, "LDLWD")
    odds = calculator.odds_for_teams(home, away)
    assert 1.01 <= odds.team1 <= 50.0
    assert 1.01 <= odds.team2 <= 50.0
    assert 2.5 <= odds.draw <= 20.0
    implied = 1 / odds.team1 + 1 / odds.draw + 1 / odds.team2
    assert implied > 1.0
    assert odds.team1 < odds.team2


def test_swapping_teams_mirrors_odds() -> None:
    big = _team("Big Club", League.D1, 2, "WWWDW")
    small = _team("Small Club", League.D2, 12, "LLDWL")
    forward = calculator.odds_for_teams(big, small)
    backward = calculator.odds_for_teams(small, big)
    assert forward.team1 == backward.team2
    assert forward.team2 == backward.team1
    assert forward.draw == backward.draw


def test_leader_against_bottom_of_lower_division() -> None:
    leader = _team("Leader", League.D1, 1, "WWWWW")
    bottom = _team("Bottom", League.D2, 20, "LLLLL")
    odds = calculator.odds_for_teams(leader, bottom)
    assert odds.team1 <= 1.10
    assert odds.team2 >= 15.0
    assert odds == MatchOdds(team1=1.01, draw=15.0, team2=50.0)

    flipped = calculator.odds_for_teams(bottom, leader)
    assert flipped == MatchOdds(team1=50.0, draw=15.0, team2=1.01)


def test_knockout_tie_uses_cup_model() -> None:
    home = _team("Home FC", League.D2, 5)
    away = _team("Away FC", League.D2, 5)
    odds = calculator.odds_for_teams(home, away, "cv", cup_margin=0.03)
    assert odds.team1 == pytest.approx(2.31)
    assert odds.team2 == pytest.approx(2.31)
    assert odds.draw == pytest.approx(6.06)


def test_non_knockout_tournament_uses_league_model() -> None:
    home = _team("Home FC", League.D2, 5)
    away = _team("Away FC", League.D2, 5)
    assert not calculator.is_knockout("d2")
    assert calculator.is_knockout("IZORO")
    assert calculator.odds_for_teams(home, away, "d2") == calculator.odds_for_teams(home, away)


def test_custom_teams_without_position_are_priced() -> None:
    home = _team("Friends XI", League.CUSTOM, None)
    away = _team("Office XI", League.CUSTOM, None)
    odds = calculator.odds_for_teams(home, away)
    assert odds.team1 == odds.team2


def test_compute_match_odds_rejects_unknown_and_identical_teams() -> None:
    teams = {"Home FC": _team("Home FC", League.D1, 3)}
    with pytest.raises(TeamNotFoundError):
        calculator.compute_match_odds(teams, "Home FC", "Nobody")
    with pytest.raises(ValidationError):
        calculator.compute_match_odds(teams, "Home FC", "Home FC")


def test_exact_score_base_table() -> None:
    assert calculator.exact_score_base_odds(Score(0, 0)) == 8.5
    assert calculator.exact_score_base_odds(Score(1, 1)) == 6.5
    assert calculator.exact_score_base_odds(Score(3, 3)) == 25.0
    assert calculator.exact_score_base_odds(Score(2, 1)) == 5.5
    assert calculator.exact_score_base_odds(Score(4, 3)) == 9.0
    assert calculator.exact_score_base_odds(Score(0, 2)) == 7.5
    assert calculator.exact_score_base_odds(Score(5, 0)) == 60.0


def test_exact_score_adjusts_for_position_gap() -> None:
    match = _match()
    even = {"Home FC": _team("Home FC", League.D1, 5), "Away FC": _team("Away FC", League.D1, 6)}
    lopsided = {"Home FC": _team("Home FC", League.D1, 1), "Away FC": _team("Away FC", League.D1, 15)}
    assert calculator.exact_score_odds(match, Score(1, 1), even) == pytest.approx(8.45)
    assert calculator.exact_score_odds(match, Score(1, 0), lopsided) == pytest.approx(4.4)
    assert calculator.exact_score_odds(match, Score(2, 1), {}) == pytest.approx(5.5)


def test_exact_score_clamped() -> None:
    match = _match()
    assert calculator.exact_score_odds(match, Score(9, 0), {}) <= 80.0


def test_special_market_adjustments() -> None:
    match = _match()
    hot_top = {
        "Home FC": _team("Home FC", League.D1, 1, "WWWWL"),
        "Away FC": _team("Away FC", League.D1, 3, "WWWWW"),
    }
    assert calculator.special_market_odds(match, SpecialMarket.CORNER_GOAL, hot_top) == pytest.approx(6.5)
    assert calculator.special_market_odds(match, "striker_goal", hot_top) == pytest.approx(1.44)
    assert calculator.special_market_odds(match, "goalkeeper_goal", {}) == pytest.approx(75.0)


def test_special_odds_never_below_floor() -> None:
    match = _match()
    teams = {
        "Home FC": _team("Home FC", League.D1, 1, "WWWWW"),
        "Away FC": _team("Away FC", League.D1, 2, "WWWWW"),
    }
    for market in SpecialMarket:
        assert calculator.special_market_odds(match, market, teams) >= 1.1


def test_unknown_special_market_rejected() -> None:
    with pytest.raises(UnknownMarketError):
        calculator.special_market_odds(_match(), "own_goal", {})


def test_combined_special_odds_is_product() -> None:
    match = _match()
    odds = calculator.combined_special_odds(match, ["both_teams_score", "total_goals_over_2_5"], {})
    assert odds == pytest.approx(1.10 * 1.35)


def test_odds_board_lists_every_market() -> None:
    board = calculator.odds_board(_match(), {})
    assert board["basic"] == {"team1": 2.5, "draw": 3.2, "team2": 2.8}
    assert len(board["exact_scores"]) == 16
    assert "3-3" in board["exact_scores"]
    assert set(board["specials"]) == {market.value for market in SpecialMarket}


def _catalog() -> list[Team]:
    return [
        _team(f"{league.value} {position} {form}", league, position, form)
        for league in League
        for position in (1, 4, 10, 18)
        for form in ("WWWWW", "DDDDD", "LLLLL")
    ]


@pytest.mark.parametrize("tournament", [None, "cv", "maradei"])
def test_every_pairing_is_bounded_mirrored_and_overround(tournament: str | None) -> None:
    teams = _catalog()
    knockout = calculator.is_knockout(tournament)
    team_low, team_high = (1.05, 30.0) if knockout else (1.01, 50.0)
    draw_low, draw_high = (3.2, 10.0) if knockout else (2.5, 20.0)
    for index, home in enumerate(teams):
        for away in teams[index + 1 :]:
            odds = calculator.odds_for_teams(home, away, tournament)
            assert team_low <= odds.team1 <= team_high
            assert team_low <= odds.team2 <= team_high
            assert draw_low <= odds.draw <= draw_high
            assert 1 / odds.team1 + 1 / odds.draw + 1 / odds.team2 > 1.0
            mirrored = calculator.odds_for_teams(away, home, tournament)
            assert (mirrored.team1, mirrored.draw, mirrored.team2) == (odds.team2, odds.draw, odds.team1)
