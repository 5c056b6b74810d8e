"""Snapshot the in-memory store to the database and back."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from golazo.betting.store import FlushHook, Store
from golazo.betting.types import (
    BetStatus,
    BetType,
    CombinedLeg,
    CombinedSpecialSelection,
    ExactScoreSelection,
    League,
    Match,
    MatchOdds,
    MatchResult,
    MatchStatus,
    Outcome,
    Score,
    Selection,
    SimpleSelection,
    SpecialMarket,
    SpecialSelection,
    Team,
    UserAccount,
    Wager,
)
from golazo.db.database import SessionLocal, get_session
from golazo.db.models import MatchResultRow, MatchRow, TeamRow, UserRow, WagerRow


def selection_to_payload(selection: Selection) -> dict[str, Any]:
    """Wire shape of a selection; the keys are shared with stored wager records."""

    if isinstance(selection, SimpleSelection):
        return {"prediction": selection.prediction.value}
    if isinstance(selection, ExactScoreSelection):
        return {"exactScore": {"home": selection.score.home, "away": selection.score.away}}
    if isinstance(selection, SpecialSelection):
        return {"specialType": selection.market.value}
    if isinstance(selection, CombinedSpecialSelection):
        return {
            "specialBets": [
                {"type": leg.market.value, "name": leg.name, "odds": leg.odds} for leg in selection.legs
            ]
        }
    raise TypeError(f"Unsupported selection {selection!r}")


def selection_from_payload(bet_type: BetType | str, payload: Mapping[str, Any]) -> Selection:
    bet_type = BetType(bet_type)
    if bet_type is BetType.SIMPLE:
        return SimpleSelection(Outcome(payload["prediction"]))
    if bet_type is BetType.EXACT_SCORE:
        exact = payload["exactScore"]
        return ExactScoreSelection(Score(int(exact["home"]), int(exact["away"])))
    if bet_type is BetType.SPECIAL:
        return SpecialSelection(SpecialMarket(payload["specialType"]))
    return CombinedSpecialSelection(
        tuple(
            CombinedLeg(market=SpecialMarket(leg["type"]), name=leg["name"], odds=float(leg["odds"]))
            for leg in payload["specialBets"]
        )
    )


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _sync(session: Session, model, key_column, rows: dict[str, Any]) -> None:
    existing = set(session.scalars(select(key_column)))
    stale = existing - set(rows)
    if stale:
        session.execute(delete(model).where(key_column.in_(stale)))
    for row in rows.values():
        session.merge(row)


def save_store(session: Session, store: Store) -> None:
    """Write the whole store; rows missing from the store are deleted."""

    _sync(
        session,
        TeamRow,
        TeamRow.name,
        {
            team.name: TeamRow(
                name=team.name,
                league=team.league.value,
                position=team.position,
                last_five=team.last_five,
                tournament=team.tournament,
                original_name=team.original_name,
            )
            for team in store.teams.values()
        },
    )
    _sync(
        session,
        UserRow,
        UserRow.user_id,
        {
            account.user_id: UserRow(
                user_id=account.user_id,
                username=account.username,
                balance=account.balance,
                total_bets=account.total_bets,
                won_bets=account.won_bets,
                lost_bets=account.lost_bets,
                total_winnings=account.total_winnings,
            )
            for account in store.users.values()
        },
    )
    _sync(
        session,
        MatchRow,
        MatchRow.id,
        {
            match.id: MatchRow(
                id=match.id,
                team1=match.team1,
                team2=match.team2,
                team1_odds=match.odds.team1,
                draw_odds=match.odds.draw,
                team2_odds=match.odds.team2,
                match_time=match.match_time,
                status=match.status.value,
                result=match.result.value if match.result else None,
                score=str(match.score) if match.score else None,
                wager_ids=list(match.wager_ids),
                tournament=match.tournament,
                is_custom=match.is_custom,
            )
            for match in store.matches.values()
        },
    )
    _sync(
        session,
        WagerRow,
        WagerRow.id,
        {
            wager.id: WagerRow(
                id=wager.id,
                user_id=wager.user_id,
                match_id=wager.match_id,
                bet_type=wager.bet_type.value,
                payload=selection_to_payload(wager.selection),
                amount=wager.amount,
                odds=wager.odds,
                description=wager.description,
                status=wager.status.value,
                timestamp=wager.timestamp,
            )
            for wager in store.wagers.values()
        },
    )
    _sync(
        session,
        MatchResultRow,
        MatchResultRow.match_id,
        {
            match_id: MatchResultRow(
                match_id=match_id,
                result=result.outcome.value,
                score=str(result.score),
                timestamp=result.timestamp,
                is_manual=result.is_manual,
                special_results={market.value: flag for market, flag in result.special_results.items()},
            )
            for match_id, result in store.results.items()
        },
    )


def load_store(session: Session) -> Store:
    store = Store()
    for row in session.scalars(select(TeamRow)):
        store.teams[row.name] = Team(
            name=row.name,
            league=League(row.league),
            position=row.position,
            last_five=row.last_five,
            tournament=row.tournament,
            original_name=row.original_name,
        )
    for row in session.scalars(select(UserRow)):
        store.users[row.user_id] = UserAccount(
            user_id=row.user_id,
            balance=row.balance,
            total_bets=row.total_bets,
            won_bets=row.won_bets,
            lost_bets=row.lost_bets,
            total_winnings=row.total_winnings,
            username=row.username,
        )
    for row in session.scalars(select(MatchRow)):
        store.matches[row.id] = Match(
            id=row.id,
            team1=row.team1,
            team2=row.team2,
            odds=MatchOdds(team1=row.team1_odds, draw=row.draw_odds, team2=row.team2_odds),
            match_time=_aware(row.match_time),
            status=MatchStatus(row.status),
            result=Outcome(row.result) if row.result else None,
            score=Score.parse(row.score) if row.score else None,
            wager_ids=list(row.wager_ids or []),
            tournament=row.tournament,
            is_custom=row.is_custom,
        )
    for row in session.scalars(select(WagerRow)):
        store.wagers[row.id] = Wager(
            id=row.id,
            user_id=row.user_id,
            match_id=row.match_id,
            selection=selection_from_payload(row.bet_type, row.payload),
            amount=row.amount,
            odds=row.odds,
            description=row.description,
            status=BetStatus(row.status),
            timestamp=_aware(row.timestamp),
        )
    for row in session.scalars(select(MatchResultRow)):
        store.results[row.match_id] = MatchResult(
            outcome=Outcome(row.result),
            score=Score.parse(row.score),
            timestamp=_aware(row.timestamp),
            is_manual=row.is_manual,
            special_results={SpecialMarket(key): bool(flag) for key, flag in (row.special_results or {}).items()},
        )
    return store


def make_flush_hook(factory: sessionmaker = SessionLocal) -> FlushHook:
    """Persistence hook that rewrites the snapshot inside one transaction."""

    def flush(store: Store) -> None:
        with get_session(factory) as session:
            save_store(session, store)

    return flush
