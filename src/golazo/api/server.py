"""FastAPI backend for the Golazo betting bot."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware

from golazo import __version__
from golazo.api.schemas import (
    CancellationResponse,
    CreateMatchRequest,
    GrantRequest,
    LeaderboardEntry,
    MatchResponse,
    OddsBoardResponse,
    OddsResponse,
    ResultRequest,
    SettlementResponse,
    SimpleBetRequest,
    SpecialBetRequest,
    StatsResponse,
    TransferRequest,
    UserStatsResponse,
    VerdictResponse,
    WagerResponse,
)
from golazo.betting.service import BettingService
from golazo.betting.types import Match, Settlement, Wager
from golazo.betting.wagers import CancellationSummary
from golazo.config import get_api_access_key, get_settings
from golazo.data.schemas import TeamRecordSchema
from golazo.db.database import get_session, init_db
from golazo.db.repository import load_store, make_flush_hook, selection_to_payload
from golazo.errors import NotFoundError, StateError, ValidationError

app = FastAPI(
    title="Golazo Betting API",
    version=__version__,
    description="Virtual-currency football betting: odds, wagers, settlement and stats.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_service() -> BettingService:
    """Rebuild the store from the database and persist every later mutation."""

    init_db()
    with get_session() as session:
        store = load_store(session)
    store.flush_hook = make_flush_hook()
    return BettingService(store)


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    expected = get_api_access_key()
    if not x_api_key or x_api_key != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def _require_admin(actor_id: str | None) -> None:
    admins = get_settings().admin_ids
    if admins and actor_id not in admins:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")


@contextmanager
def _core_errors() -> Iterator[None]:
    try:
        yield
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


ServiceDep = Annotated[BettingService, Depends(get_service)]
APIKeyDep = Annotated[None, Depends(require_api_key)]
LimitQuery = Annotated[int, Query(ge=1, le=100)]


def _match_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        team1=match.team1,
        team2=match.team2,
        odds=OddsResponse(**match.odds.as_dict()),
        match_time=match.match_time,
        status=match.status.value,
        result=match.result.value if match.result else None,
        score=str(match.score) if match.score else None,
        tournament=match.tournament,
        is_custom=match.is_custom,
        bets_count=len(match.wager_ids),
    )


def _wager_response(wager: Wager, new_balance: float | None = None) -> WagerResponse:
    return WagerResponse(
        id=wager.id,
        user_id=wager.user_id,
        match_id=wager.match_id,
        bet_type=wager.bet_type.value,
        description=wager.description,
        amount=wager.amount,
        odds=wager.odds,
        status=wager.status.value,
        potential_winning=wager.potential_winnings,
        timestamp=wager.timestamp,
        selection=selection_to_payload(wager.selection),
        new_balance=new_balance,
    )


def _settlement_response(result: Settlement) -> SettlementResponse:
    return SettlementResponse(
        match_id=result.match_id,
        result=result.outcome.value,
        score=str(result.score),
        is_manual=result.is_manual,
        verdicts=[
            VerdictResponse(wager_id=v.wager_id, user_id=v.user_id, won=v.won, payout=v.payout)
            for v in result.verdicts
        ],
        balances=result.balances,
    )


def _cancellation_response(summary: CancellationSummary) -> CancellationResponse:
    return CancellationResponse(
        matches=summary.matches,
        wagers_cancelled=summary.wagers_cancelled,
        refunds=summary.refunds,
        total_refunded=summary.total_refunded,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    return {"name": "golazo-bets", "version": __version__}


@app.post("/teams")
def load_teams(
    records: list[TeamRecordSchema],
    _: APIKeyDep,
    service: ServiceDep,
) -> dict[str, int]:
    return {"loaded": service.load_teams(records)}


@app.get("/teams/search")
def search_teams(
    q: Annotated[str, Query(min_length=1)],
    _: APIKeyDep,
    service: ServiceDep,
    tournament: str | None = None,
) -> list[dict[str, Any]]:
    return [
        {
            "name": team.name,
            "display_name": team.display_name,
            "league": team.league.value,
            "position": team.position,
        }
        for team in service.team_suggestions(q, tournament)
    ]


@app.get("/odds", response_model=OddsResponse)
def quote_odds(
    team1: str,
    team2: str,
    _: APIKeyDep,
    service: ServiceDep,
    tournament: str | None = None,
) -> OddsResponse:
    with _core_errors():
        odds = service.match_odds(team1, team2, tournament)
    return OddsResponse(**odds.as_dict())


@app.get("/matches", response_model=list[MatchResponse])
def list_upcoming(_: APIKeyDep, service: ServiceDep) -> list[MatchResponse]:
    return [_match_response(match) for match in service.upcoming_matches()]


@app.get("/matches/finished", response_model=list[MatchResponse])
def list_finished(
    _: APIKeyDep,
    service: ServiceDep,
    limit: LimitQuery = 20,
) -> list[MatchResponse]:
    return [_match_response(match) for match in service.finished_matches(limit)]


@app.post("/matches", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
def create_match(
    payload: CreateMatchRequest,
    _: APIKeyDep,
    service: ServiceDep,
) -> MatchResponse:
    with _core_errors():
        match = service.create_match(payload.team1, payload.team2, payload.tournament)
    return _match_response(match)


@app.get("/matches/{match_id}/odds", response_model=OddsBoardResponse)
def match_odds_board(match_id: str, _: APIKeyDep, service: ServiceDep) -> OddsBoardResponse:
    with _core_errors():
        match = service.store.get_match(match_id)
        board = service.odds_board(match_id)
    return OddsBoardResponse(
        match_id=match.id,
        team1=match.team1,
        team2=match.team2,
        status=match.status.value,
        **board,
    )


@app.delete("/matches", response_model=CancellationResponse)
def delete_upcoming(_: APIKeyDep, service: ServiceDep) -> CancellationResponse:
    return _cancellation_response(service.delete_upcoming_matches())


@app.post("/matches/clear-finished")
def clear_finished(_: APIKeyDep, service: ServiceDep) -> dict[str, int]:
    return {"cleared": service.clear_finished_matches()}


@app.delete("/matches/{match_id}", response_model=CancellationResponse)
def delete_match(match_id: str, _: APIKeyDep, service: ServiceDep) -> CancellationResponse:
    with _core_errors():
        summary = service.delete_match(match_id)
    return _cancellation_response(summary)


@app.post("/matches/{match_id}/result", response_model=SettlementResponse)
def set_result(
    match_id: str,
    payload: ResultRequest,
    _: APIKeyDep,
    service: ServiceDep,
) -> SettlementResponse:
    _require_admin(payload.actor_id)
    flags = {event: True for event in payload.special_events}
    with _core_errors():
        result = service.resolve_match(match_id, payload.result, payload.score1, payload.score2, flags)
    return _settlement_response(result)


@app.post("/matches/{match_id}/simulate", response_model=SettlementResponse)
def simulate(match_id: str, _: APIKeyDep, service: ServiceDep) -> SettlementResponse:
    with _core_errors():
        result = service.simulate_match(match_id)
    return _settlement_response(result)


@app.post("/bets", response_model=WagerResponse, status_code=status.HTTP_201_CREATED)
def place_bet(
    payload: SimpleBetRequest,
    _: APIKeyDep,
    service: ServiceDep,
) -> WagerResponse:
    with _core_errors():
        wager = service.place_simple_bet(payload.user_id, payload.match_id, payload.prediction, payload.amount)
        balance = service.balance(payload.user_id)
    return _wager_response(wager, balance)


@app.post("/bets/special", response_model=WagerResponse, status_code=status.HTTP_201_CREATED)
def place_special_bet(
    payload: SpecialBetRequest,
    _: APIKeyDep,
    service: ServiceDep,
) -> WagerResponse:
    with _core_errors():
        if payload.bet_type == "exact_score":
            if payload.home is None or payload.away is None:
                raise ValidationError("Exact score bets need both home and away goals.")
            wager = service.place_exact_score_bet(
                payload.user_id, payload.match_id, payload.home, payload.away, payload.amount
            )
        elif payload.bet_type == "special":
            if not payload.special_type:
                raise ValidationError("Special bets need a special_type.")
            wager = service.place_special_bet(payload.user_id, payload.match_id, payload.special_type, payload.amount)
        else:
            wager = service.place_combined_special_bet(
                payload.user_id, payload.match_id, payload.special_bets, payload.amount
            )
        balance = service.balance(payload.user_id)
    return _wager_response(wager, balance)


@app.get("/users/{user_id}/stats", response_model=UserStatsResponse)
def user_stats(user_id: str, _: APIKeyDep, service: ServiceDep) -> UserStatsResponse:
    with _core_errors():
        return UserStatsResponse(**service.user_stats(user_id))


@app.get("/users/{user_id}/bets", response_model=list[WagerResponse])
def user_bets(user_id: str, _: APIKeyDep, service: ServiceDep) -> list[WagerResponse]:
    return [_wager_response(wager) for wager in service.user_wagers(user_id)]


@app.post("/transfers")
def transfer(payload: TransferRequest, _: APIKeyDep, service: ServiceDep) -> dict[str, float]:
    with _core_errors():
        sender, receiver = service.transfer_funds(payload.from_user, payload.to_user, payload.amount)
    return {"from_balance": sender, "to_balance": receiver}


@app.post("/grants")
def grant(payload: GrantRequest, _: APIKeyDep, service: ServiceDep) -> dict[str, float]:
    _require_admin(payload.actor_id)
    with _core_errors():
        _, receiver = service.transfer_funds(payload.actor_id, payload.to_user, payload.amount, admin=True)
    return {"to_balance": receiver}


@app.get("/leaderboard", response_model=list[LeaderboardEntry])
def leaderboard(
    _: APIKeyDep,
    service: ServiceDep,
    limit: LimitQuery = 10,
) -> list[LeaderboardEntry]:
    return [LeaderboardEntry(**row) for row in service.leaderboard(limit)]


@app.get("/stats", response_model=StatsResponse)
def stats(_: APIKeyDep, service: ServiceDep) -> StatsResponse:
    return StatsResponse(**service.platform_stats())
