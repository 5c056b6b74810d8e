"""Serialized facade over the betting core for request-driven hosts."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from golazo.betting import settlement, simulation, stats, wagers
from golazo.betting.store import Store
from golazo.betting.types import Match, MatchOdds, Outcome, Settlement, SpecialMarket, Team, UserAccount, Wager
from golazo.config import get_settings
from golazo.data.schemas import TeamRecordSchema
from golazo.data.teams import find_team, load_teams, team_suggestions
from golazo.odds import calculator


class BettingService:
    """Run core operations one at a time and flush after every mutation."""

    def __init__(self, store: Store | None = None, rng: np.random.Generator | None = None) -> None:
        self.store = store or Store()
        self.rng = rng or np.random.default_rng(get_settings().simulation_seed)
        self._lock = threading.RLock()

    def _mutate(self, fn, *args, **kwargs):
        with self._lock:
            result = fn(self.store, *args, **kwargs)
            self.store.flush()
            return result

    # Teams ------------------------------------------------------------------

    def load_teams(self, records: Iterable[TeamRecordSchema | Mapping[str, Any]]) -> int:
        """Merge a standings snapshot into the catalog; returns the team count."""

        loaded = load_teams(records)
        with self._lock:
            self.store.teams.update(loaded)
            self.store.flush()
        return len(loaded)

    def team_suggestions(self, search: str, tournament: str | None = None) -> list[Team]:
        with self._lock:
            found = find_team(self.store.teams, search, tournament)
            if found is not None:
                return [found]
            return team_suggestions(self.store.teams, search, tournament=tournament)

    # Odds -----------------------------------------------------------------

    def match_odds(self, team1: str, team2: str, tournament: str | None = None) -> MatchOdds:
        with self._lock:
            return calculator.compute_match_odds(self.store.teams, team1, team2, tournament)

    def odds_board(self, match_id: str) -> dict[str, dict[str, float]]:
        with self._lock:
            return calculator.odds_board(self.store.get_match(match_id), self.store.teams)

    # Matches ----------------------------------------------------------------

    def create_match(self, team1: str, team2: str, tournament: str | None = None) -> Match:
        return self._mutate(wagers.create_match, team1, team2, tournament, rng=self.rng)

    def delete_match(self, match_id: str) -> wagers.CancellationSummary:
        return self._mutate(wagers.delete_match, match_id)

    def delete_upcoming_matches(self) -> wagers.CancellationSummary:
        return self._mutate(wagers.delete_upcoming_matches)

    def clear_finished_matches(self) -> int:
        return self._mutate(wagers.clear_finished_matches)

    def upcoming_matches(self) -> list[Match]:
        with self._lock:
            return sorted(
                (match for match in self.store.matches.values() if match.is_upcoming),
                key=lambda match: match.match_time,
            )

    def finished_matches(self, limit: int = 20) -> list[Match]:
        with self._lock:
            finished = [match for match in self.store.matches.values() if not match.is_upcoming]
            finished.sort(key=lambda match: match.match_time, reverse=True)
            return finished[:limit]

    # Wagers -----------------------------------------------------------------

    def register_user(self, user_id: str, username: str | None = None) -> UserAccount:
        return self._mutate(lambda store: store.ensure_user(user_id, username))

    def user_wagers(self, user_id: str) -> list[Wager]:
        with self._lock:
            return sorted(self.store.user_wagers(user_id), key=lambda wager: wager.timestamp, reverse=True)

    def balance(self, user_id: str) -> float:
        with self._lock:
            return self.store.get_user(user_id).balance

    def place_simple_bet(self, user_id: str, match_id: str, prediction: Outcome | str, amount: float) -> Wager:
        return self._mutate(wagers.place_simple_bet, user_id, match_id, prediction, amount)

    def place_exact_score_bet(self, user_id: str, match_id: str, home: int, away: int, amount: float) -> Wager:
        return self._mutate(wagers.place_exact_score_bet, user_id, match_id, home, away, amount)

    def place_special_bet(self, user_id: str, match_id: str, market: SpecialMarket | str, amount: float) -> Wager:
        return self._mutate(wagers.place_special_bet, user_id, match_id, market, amount)

    def place_combined_special_bet(
        self,
        user_id: str,
        match_id: str,
        markets: Iterable[SpecialMarket | str],
        amount: float,
    ) -> Wager:
        return self._mutate(wagers.place_combined_special_bet, user_id, match_id, list(markets), amount)

    def transfer_funds(self, from_user: str, to_user: str, amount: float, *, admin: bool = False) -> tuple[float, float]:
        return self._mutate(wagers.transfer_funds, from_user, to_user, amount, admin=admin)

    # Results ----------------------------------------------------------------

    def resolve_match(
        self,
        match_id: str,
        outcome: Outcome | str,
        home_goals: int,
        away_goals: int,
        special_flags: dict[str, bool] | None = None,
    ) -> Settlement:
        return self._mutate(settlement.resolve_match, match_id, outcome, home_goals, away_goals, special_flags)

    def simulate_match(self, match_id: str) -> Settlement:
        return self._mutate(simulation.simulate_match, match_id, self.rng)

    # Stats ------------------------------------------------------------------

    def user_stats(self, user_id: str) -> dict[str, Any]:
        with self._lock:
            return stats.user_stats(self.store, user_id)

    def leaderboard(self, limit: int = stats.LEADERBOARD_SIZE) -> list[dict[str, Any]]:
        with self._lock:
            return stats.leaderboard(self.store, limit)

    def platform_stats(self) -> dict[str, Any]:
        with self._lock:
            return stats.platform_stats(self.store)
