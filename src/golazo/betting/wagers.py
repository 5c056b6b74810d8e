"""Match creation, wager placement, cancellation and fund transfers."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import numpy as np

from golazo.betting.store import Store, new_id
from golazo.betting.types import (
    BetStatus,
    CombinedLeg,
    CombinedSpecialSelection,
    ExactScoreSelection,
    Match,
    MatchStatus,
    Outcome,
    Score,
    Selection,
    SimpleSelection,
    SpecialMarket,
    SpecialSelection,
    Wager,
    utcnow,
)
from golazo.data.teams import resolve_team
from golazo.errors import InsufficientFundsError, NotEligibleError, ValidationError
from golazo.odds import tables
from golazo.odds.calculator import exact_score_odds, odds_for_teams, special_market_odds

logger = logging.getLogger(__name__)

SCHEDULE_WINDOW = timedelta(hours=24)


@dataclass
class CancellationSummary:
    matches: list[str] = field(default_factory=list)
    wagers_cancelled: int = 0
    refunds: dict[str, float] = field(default_factory=dict)

    @property
    def total_refunded(self) -> float:
        return sum(self.refunds.values())


def _validate_amount(amount: float) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError("Amount must be a number greater than 0.")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a number greater than 0.")
    return float(amount)


def create_match(
    store: Store,
    team1_name: str,
    team2_name: str,
    tournament: str | None = None,
    *,
    rng: np.random.Generator | None = None,
    now: datetime | None = None,
) -> Match:
    """Resolve both teams, freeze their odds and schedule the match."""

    team1 = resolve_team(store.teams, team1_name, tournament)
    team2 = resolve_team(store.teams, team2_name, tournament)
    if team1.name == team2.name:
        raise ValidationError("A team cannot play against itself.")

    rng = rng or np.random.default_rng()
    now = now or utcnow()
    match = Match(
        id=new_id(),
        team1=team1.name,
        team2=team2.name,
        odds=odds_for_teams(team1, team2, tournament),
        match_time=now + SCHEDULE_WINDOW * float(rng.random()),
        tournament=tournament or "custom",
        is_custom=True,
    )
    store.matches[match.id] = match
    logger.info("Created match %s: %s vs %s (%s) odds=%s", match.id, team1.name, team2.name, match.tournament, match.odds)
    return match


def market_name(market: SpecialMarket, match: Match, store: Store) -> str:
    def short(name: str) -> str:
        team = store.teams.get(name)
        return team.short_name if team else name

    return tables.SPECIAL_MARKET_NAMES[market].format(team1=short(match.team1), team2=short(match.team2))


def _open_match(store: Store, match_id: str) -> Match:
    match = store.get_match(match_id)
    if not match.is_upcoming:
        raise NotEligibleError("Bets can only be placed on upcoming matches.")
    return match


def _place(
    store: Store,
    user_id: str,
    match: Match,
    selection: Selection,
    odds: float,
    description: str,
    amount: float,
) -> Wager:
    if store.available_balance(user_id) < amount:
        raise InsufficientFundsError("Not enough balance for this bet.")
    account = store.ensure_user(user_id)

    wager = Wager(
        id=new_id(),
        user_id=user_id,
        match_id=match.id,
        selection=selection,
        amount=amount,
        odds=odds,
        description=description,
    )
    store.wagers[wager.id] = wager
    account.balance -= amount
    account.total_bets += 1
    match.wager_ids.append(wager.id)
    logger.info("Wager %s: %s stakes %.2f on '%s' @ %.2f", wager.id, user_id, amount, description, odds)
    return wager


def place_simple_bet(store: Store, user_id: str, match_id: str, prediction: Outcome | str, amount: float) -> Wager:
    match = _open_match(store, match_id)
    prediction = Outcome.parse(prediction)
    amount = _validate_amount(amount)
    labels = {Outcome.TEAM1: match.team1, Outcome.DRAW: "Draw", Outcome.TEAM2: match.team2}
    return _place(
        store,
        user_id,
        match,
        SimpleSelection(prediction),
        match.odds.for_outcome(prediction),
        labels[prediction],
        amount,
    )


def place_exact_score_bet(store: Store, user_id: str, match_id: str, home: int, away: int, amount: float) -> Wager:
    match = _open_match(store, match_id)
    score = Score(home, away)
    amount = _validate_amount(amount)
    return _place(
        store,
        user_id,
        match,
        ExactScoreSelection(score),
        exact_score_odds(match, score, store.teams),
        f"Exact score {score}",
        amount,
    )


def place_special_bet(store: Store, user_id: str, match_id: str, market: SpecialMarket | str, amount: float) -> Wager:
    match = _open_match(store, match_id)
    market = SpecialMarket.parse(market)
    amount = _validate_amount(amount)
    return _place(
        store,
        user_id,
        match,
        SpecialSelection(market),
        special_market_odds(match, market, store.teams),
        market_name(market, match, store),
        amount,
    )


def place_combined_special_bet(
    store: Store,
    user_id: str,
    match_id: str,
    markets: Iterable[SpecialMarket | str],
    amount: float,
) -> Wager:
    """Parlay of special markets; the stored odds are the product of the legs."""

    match = _open_match(store, match_id)
    parsed = [SpecialMarket.parse(market) for market in markets]
    if not parsed:
        raise ValidationError("A combined bet needs at least one special market.")
    amount = _validate_amount(amount)

    legs = tuple(
        CombinedLeg(
            market=market,
            name=market_name(market, match, store),
            odds=special_market_odds(match, market, store.teams),
        )
        for market in parsed
    )
    odds = 1.0
    for leg in legs:
        odds *= leg.odds
    return _place(
        store,
        user_id,
        match,
        CombinedSpecialSelection(legs),
        odds,
        " + ".join(leg.name for leg in legs),
        amount,
    )


def _cancel_match(store: Store, match: Match, summary: CancellationSummary) -> None:
    for wager in store.match_wagers(match):
        if wager.status is not BetStatus.PENDING:
            continue
        account = store.get_user(wager.user_id)
        account.balance += wager.amount
        account.total_bets -= 1
        summary.refunds[wager.user_id] = summary.refunds.get(wager.user_id, 0.0) + wager.amount
        summary.wagers_cancelled += 1
        del store.wagers[wager.id]
    del store.matches[match.id]
    summary.matches.append(match.id)


def delete_match(store: Store, match_id: str) -> CancellationSummary:
    """Remove an upcoming match and refund every pending stake on it."""

    match = store.get_match(match_id)
    if match.status is not MatchStatus.UPCOMING:
        raise NotEligibleError("A finished match cannot be deleted.")
    for wager in store.match_wagers(match):
        store.get_user(wager.user_id)

    summary = CancellationSummary()
    _cancel_match(store, match, summary)
    logger.info("Deleted match %s, refunded %d wagers", match_id, summary.wagers_cancelled)
    return summary


def delete_upcoming_matches(store: Store) -> CancellationSummary:
    upcoming = [match for match in store.matches.values() if match.is_upcoming]
    for match in upcoming:
        for wager in store.match_wagers(match):
            store.get_user(wager.user_id)

    summary = CancellationSummary()
    for match in upcoming:
        _cancel_match(store, match, summary)
    logger.info(
        "Deleted %d upcoming matches, refunded %.2f across %d wagers",
        len(summary.matches),
        summary.total_refunded,
        summary.wagers_cancelled,
    )
    return summary


def clear_finished_matches(store: Store) -> int:
    """Drop finished matches and their result records; wagers stay as history."""

    finished = [match_id for match_id, match in store.matches.items() if not match.is_upcoming]
    for match_id in finished:
        del store.matches[match_id]
        store.results.pop(match_id, None)
    logger.info("Cleared %d finished matches", len(finished))
    return len(finished)


def transfer_funds(
    store: Store,
    from_user: str,
    to_user: str,
    amount: float,
    *,
    admin: bool = False,
) -> tuple[float, float]:
    """Move balance between accounts; admin grants do not debit the sender."""

    amount = _validate_amount(amount)
    if not admin:
        if from_user == to_user:
            raise ValidationError("Cannot transfer funds to yourself.")
        if store.available_balance(from_user) < amount:
            raise InsufficientFundsError("Not enough balance to transfer that amount.")
    sender = store.ensure_user(from_user)
    receiver = store.ensure_user(to_user)
    if not admin:
        sender.balance -= amount
    receiver.balance += amount
    logger.info("Transfer %.2f from %s to %s (admin=%s)", amount, from_user, to_user, admin)
    return sender.balance, receiver.balance
