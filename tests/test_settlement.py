"""Result validation and wager settlement tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from golazo.betting import settlement, wagers
from golazo.betting.store import Store
from golazo.betting.types import (
    BetStatus,
    CombinedLeg,
    CombinedSpecialSelection,
    ExactScoreSelection,
    Match,
    MatchOdds,
    MatchStatus,
    Outcome,
    Score,
    SpecialMarket,
    SpecialSelection,
    Wager,
)
from golazo.errors import AlreadyResolvedError, InvalidResultError, MatchNotFoundError, UnknownMarketError


def _store_with_match(balance: float = 1000.0, odds: MatchOdds | None = None) -> Store:
    store = Store()
    store.ensure_user("u1", default_balance=balance)
    store.ensure_user("u2", default_balance=balance)
    store.matches["m1"] = Match(
        id="m1",
        team1="Home FC",
        team2="Away FC",
        odds=odds or MatchOdds(2.5, 3.2, 2.8),
        match_time=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    return store


def test_validate_result_checks_outcome_against_score() -> None:
    assert settlement.validate_result("team1", 2, 1) == (Outcome.TEAM1, Score(2, 1))
    assert settlement.validate_result("draw", 0, 0) == (Outcome.DRAW, Score(0, 0))
    with pytest.raises(InvalidResultError):
        settlement.validate_result("team1", 1, 1)
    with pytest.raises(InvalidResultError):
        settlement.validate_result("draw", 2, 0)


def test_market_hit_from_score() -> None:
    assert settlement.market_hit(SpecialMarket.BOTH_TEAMS_SCORE, Score(1, 1), {})
    assert not settlement.market_hit(SpecialMarket.BOTH_TEAMS_SCORE, Score(2, 0), {})
    assert settlement.market_hit(SpecialMarket.TOTAL_GOALS_OVER_2_5, Score(2, 1), {})
    assert settlement.market_hit(SpecialMarket.TOTAL_GOALS_UNDER_2_5, Score(1, 1), {})
    assert settlement.market_hit(SpecialMarket.HOME_GOALS_OVER_1_5, Score(2, 0), {})
    assert not settlement.market_hit(SpecialMarket.AWAY_GOALS_OVER_1_5, Score(2, 1), {})


def test_event_markets_need_explicit_flag() -> None:
    score = Score(3, 2)
    assert not settlement.market_hit(SpecialMarket.HEADER_GOAL, score, {})
    assert not settlement.market_hit(SpecialMarket.HEADER_GOAL, score, {SpecialMarket.HEADER_GOAL: False})
    assert settlement.market_hit(SpecialMarket.HEADER_GOAL, score, {SpecialMarket.HEADER_GOAL: True})


def test_winning_simple_bet_pays_stake_times_odds() -> None:
    store = _store_with_match()
    wager = wagers.place_simple_bet(store, "u1", "m1", "team1", 100)
    assert store.users["u1"].balance == pytest.approx(900.0)

    result = settlement.resolve_match(store, "m1", "team1", 2, 1)

    account = store.users["u1"]
    assert account.balance == pytest.approx(1150.0)
    assert account.won_bets == 1
    assert account.total_winnings == pytest.approx(250.0)
    assert wager.status is BetStatus.WON
    assert result.total_paid == pytest.approx(250.0)
    assert result.balances == {"u1": pytest.approx(1150.0)}
    assert result.is_manual

    match = store.matches["m1"]
    assert match.status is MatchStatus.FINISHED
    assert match.result is Outcome.TEAM1
    assert match.score == Score(2, 1)
    assert store.results["m1"].is_manual


def test_exact_score_bet_wins_only_on_exact_score() -> None:
    store = _store_with_match()
    hit = wagers.place_exact_score_bet(store, "u1", "m1", 2, 1, 50)
    miss = wagers.place_exact_score_bet(store, "u2", "m1", 1, 0, 50)

    settlement.resolve_match(store, "m1", "team1", 2, 1)

    assert hit.status is BetStatus.WON
    assert miss.status is BetStatus.LOST
    assert store.users["u1"].balance == pytest.approx(950.0 + 50 * hit.odds)
    assert store.users["u2"].balance == pytest.approx(950.0)
    assert store.users["u2"].lost_bets == 1


def test_combined_bet_needs_every_leg() -> None:
    legs = ["both_teams_score", "total_goals_over_2_5"]

    store = _store_with_match()
    wager = wagers.place_combined_special_bet(store, "u1", "m1", legs, 10)
    settlement.resolve_match(store, "m1", "draw", 2, 2)
    assert wager.status is BetStatus.WON
    assert store.users["u1"].balance == pytest.approx(990.0 + 10 * wager.odds)

    store = _store_with_match()
    wager = wagers.place_combined_special_bet(store, "u1", "m1", legs, 10)
    settlement.resolve_match(store, "m1", "team1", 1, 0)
    assert wager.status is BetStatus.LOST
    assert store.users["u1"].balance == pytest.approx(990.0)


def test_flagged_special_events_settle_event_markets() -> None:
    store = _store_with_match()
    header = wagers.place_special_bet(store, "u1", "m1", "header_goal", 10)
    keeper = wagers.place_special_bet(store, "u2", "m1", "goalkeeper_goal", 10)

    result = settlement.resolve_match(store, "m1", "team2", 0, 1, {"header_goal": True})

    assert header.status is BetStatus.WON
    assert keeper.status is BetStatus.LOST
    assert store.results["m1"].special_results == {SpecialMarket.HEADER_GOAL: True}
    assert len(result.verdicts) == 2


@pytest.mark.parametrize("flag", ["false", 1, "yes"])
def test_only_literal_true_flag_confirms_event(flag: object) -> None:
    store = _store_with_match()
    corner = wagers.place_special_bet(store, "u1", "m1", "corner_goal", 10)

    settlement.resolve_match(store, "m1", "team1", 1, 0, {"corner_goal": flag})

    assert corner.status is BetStatus.LOST
    assert store.users["u1"].balance == pytest.approx(990.0)
    assert store.results["m1"].special_results == {SpecialMarket.CORNER_GOAL: False}


def test_second_resolution_rejected_without_side_effects() -> None:
    store = _store_with_match()
    wagers.place_simple_bet(store, "u1", "m1", "team1", 100)
    settlement.resolve_match(store, "m1", "team1", 1, 0)
    balance = store.users["u1"].balance

    with pytest.raises(AlreadyResolvedError):
        settlement.resolve_match(store, "m1", "team2", 0, 1)

    assert store.users["u1"].balance == balance
    assert store.matches["m1"].result is Outcome.TEAM1


def test_invalid_result_leaves_store_untouched() -> None:
    store = _store_with_match()
    wager = wagers.place_simple_bet(store, "u1", "m1", "draw", 100)

    with pytest.raises(InvalidResultError):
        settlement.resolve_match(store, "m1", "draw", 2, 0)
    with pytest.raises(UnknownMarketError):
        settlement.resolve_match(store, "m1", "draw", 1, 1, {"own_goal": True})

    assert wager.status is BetStatus.PENDING
    assert store.matches["m1"].status is MatchStatus.UPCOMING
    assert "m1" not in store.results


def test_unknown_match_rejected() -> None:
    with pytest.raises(MatchNotFoundError):
        settlement.resolve_match(Store(), "nope", "draw", 0, 0)


def test_resolution_without_wagers() -> None:
    store = _store_with_match()
    result = settlement.resolve_match(store, "m1", "draw", 0, 0, manual=False)
    assert result.verdicts == []
    assert result.total_paid == 0
    assert not store.results["m1"].is_manual


def _exact_wager(store: Store, odds: float = 6.0) -> Wager:
    wager = Wager(
        id="w1",
        user_id="u1",
        match_id="m1",
        selection=ExactScoreSelection(Score(2, 1)),
        amount=50,
        odds=odds,
        description="Exact score 2-1",
    )
    store.wagers[wager.id] = wager
    store.matches["m1"].wager_ids.append(wager.id)
    store.users["u1"].balance -= wager.amount
    store.users["u1"].total_bets += 1
    return wager


def test_exact_score_payout_at_fixed_odds() -> None:
    store = _store_with_match()
    _exact_wager(store)
    result = settlement.resolve_match(store, "m1", "team1", 2, 1)
    assert result.verdicts[0].payout == pytest.approx(300.0)
    assert store.users["u1"].balance == pytest.approx(1250.0)

    store = _store_with_match()
    _exact_wager(store)
    result = settlement.resolve_match(store, "m1", "team1", 2, 0)
    assert result.verdicts[0].payout == 0.0
    assert store.users["u1"].balance == pytest.approx(950.0)


def test_combined_wins_iff_every_leg_wins_alone() -> None:
    legs = (SpecialMarket.BOTH_TEAMS_SCORE, SpecialMarket.TOTAL_GOALS_OVER_2_5, SpecialMarket.HEADER_GOAL)
    combined = CombinedSpecialSelection(tuple(CombinedLeg(market, market.value, 2.0) for market in legs))
    for flags in ({}, {SpecialMarket.HEADER_GOAL: True}):
        for home in range(4):
            for away in range(4):
                score = Score(home, away)
                alone = all(settlement.selection_wins(SpecialSelection(m), score.outcome, score, flags) for m in legs)
                assert settlement.selection_wins(combined, score.outcome, score, flags) is alone
