"""Settle every wager on a match against its final score and special events."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime

from golazo.betting.store import Store
from golazo.betting.types import (
    BetStatus,
    CombinedSpecialSelection,
    ExactScoreSelection,
    MatchResult,
    MatchStatus,
    Outcome,
    Score,
    Selection,
    Settlement,
    SimpleSelection,
    SpecialMarket,
    SpecialSelection,
    Verdict,
    Wager,
    utcnow,
)
from golazo.errors import AlreadyResolvedError, InvalidResultError

logger = logging.getLogger(__name__)

SpecialFlags = Mapping[SpecialMarket | str, bool]


def validate_result(outcome: Outcome | str, home_goals: int, away_goals: int) -> tuple[Outcome, Score]:
    """Check that the outcome label agrees with the score."""

    outcome = Outcome.parse(outcome)
    score = Score(home_goals, away_goals)
    if score.outcome is not outcome:
        raise InvalidResultError(f"Score {score} does not match outcome '{outcome.value}'.")
    return outcome, score


def normalise_flags(flags: SpecialFlags | None) -> dict[SpecialMarket, bool]:
    """Parse flag keys; only a literal ``True`` confirms an event."""

    return {SpecialMarket.parse(key): value is True for key, value in (flags or {}).items()}


def market_hit(market: SpecialMarket, score: Score, flags: Mapping[SpecialMarket, bool]) -> bool:
    if market is SpecialMarket.BOTH_TEAMS_SCORE:
        return score.home > 0 and score.away > 0
    if market is SpecialMarket.TOTAL_GOALS_OVER_2_5:
        return score.total > 2.5
    if market is SpecialMarket.TOTAL_GOALS_UNDER_2_5:
        return score.total < 2.5
    if market is SpecialMarket.HOME_GOALS_OVER_1_5:
        return score.home > 1.5
    if market is SpecialMarket.AWAY_GOALS_OVER_1_5:
        return score.away > 1.5
    # Scorer and goal-type markets only win when explicitly flagged.
    return flags.get(market) is True


def selection_wins(
    selection: Selection,
    outcome: Outcome,
    score: Score,
    flags: Mapping[SpecialMarket, bool],
) -> bool:
    if isinstance(selection, SimpleSelection):
        return selection.prediction is outcome
    if isinstance(selection, ExactScoreSelection):
        return selection.score == score
    if isinstance(selection, SpecialSelection):
        return market_hit(selection.market, score, flags)
    if isinstance(selection, CombinedSpecialSelection):
        return all(market_hit(leg.market, score, flags) for leg in selection.legs)
    raise TypeError(f"Unsupported selection {selection!r}")


def evaluate_wager(
    wager: Wager,
    outcome: Outcome,
    score: Score,
    flags: Mapping[SpecialMarket, bool],
) -> Verdict:
    won = selection_wins(wager.selection, outcome, score, flags)
    payout = wager.amount * wager.odds if won else 0.0
    return Verdict(wager_id=wager.id, user_id=wager.user_id, won=won, payout=payout)


def resolve_match(
    store: Store,
    match_id: str,
    outcome: Outcome | str,
    home_goals: int,
    away_goals: int,
    special_flags: SpecialFlags | None = None,
    *,
    manual: bool = True,
    now: datetime | None = None,
) -> Settlement:
    """Finish an upcoming match and settle all of its pending wagers.

    Validation and every verdict are computed before anything is written, so a
    rejected call leaves the store untouched and an accepted one moves the
    match, its wagers and the affected balances together.
    """

    match = store.get_match(match_id)
    if match.status is not MatchStatus.UPCOMING:
        raise AlreadyResolvedError(f"Match '{match_id}' already has a result.")
    outcome, score = validate_result(outcome, home_goals, away_goals)
    flags = normalise_flags(special_flags)

    pending = [wager for wager in store.match_wagers(match) if wager.status is BetStatus.PENDING]
    accounts = {wager.user_id: store.get_user(wager.user_id) for wager in pending}
    verdicts = [evaluate_wager(wager, outcome, score, flags) for wager in pending]

    match.status = MatchStatus.FINISHED
    match.result = outcome
    match.score = score
    store.results[match.id] = MatchResult(
        outcome=outcome,
        score=score,
        timestamp=now or utcnow(),
        is_manual=manual,
        special_results=flags,
    )
    for wager, verdict in zip(pending, verdicts):
        account = accounts[wager.user_id]
        if verdict.won:
            wager.status = BetStatus.WON
            account.balance += verdict.payout
            account.won_bets += 1
            account.total_winnings += verdict.payout
        else:
            wager.status = BetStatus.LOST
            account.lost_bets += 1
        logger.debug("Wager %s (%s) -> %s", wager.id, wager.description, wager.status.value)

    settlement = Settlement(
        match_id=match.id,
        outcome=outcome,
        score=score,
        verdicts=verdicts,
        balances={user_id: account.balance for user_id, account in accounts.items()},
        is_manual=manual,
    )
    logger.info(
        "Settled match %s %s (%s): %d wagers, %.2f paid",
        match.id,
        score,
        outcome.value,
        len(verdicts),
        settlement.total_paid,
    )
    return settlement
