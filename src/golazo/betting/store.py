"""In-memory collections the betting core reads and mutates."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from golazo.betting.types import Match, MatchResult, Team, UserAccount, Wager
from golazo.config import get_settings
from golazo.errors import MatchNotFoundError, NotFoundError, TeamNotFoundError

logger = logging.getLogger(__name__)

FlushHook = Callable[["Store"], None]


def new_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class Store:
    """Teams, matches, wagers, accounts and result records.

    The store assumes exclusive access for the duration of a call; hosts that
    serve concurrent requests serialize mutations (see ``BettingService``).
    """

    teams: dict[str, Team] = field(default_factory=dict)
    matches: dict[str, Match] = field(default_factory=dict)
    wagers: dict[str, Wager] = field(default_factory=dict)
    users: dict[str, UserAccount] = field(default_factory=dict)
    results: dict[str, MatchResult] = field(default_factory=dict)
    flush_hook: FlushHook | None = None

    def get_team(self, name: str) -> Team:
        try:
            return self.teams[name]
        except KeyError:
            raise TeamNotFoundError(name) from None

    def get_match(self, match_id: str) -> Match:
        try:
            return self.matches[match_id]
        except KeyError:
            raise MatchNotFoundError(match_id) from None

    def get_wager(self, wager_id: str) -> Wager:
        try:
            return self.wagers[wager_id]
        except KeyError:
            raise NotFoundError(f"Wager '{wager_id}' not found") from None

    def get_user(self, user_id: str) -> UserAccount:
        try:
            return self.users[user_id]
        except KeyError:
            raise NotFoundError(f"User '{user_id}' not found") from None

    def ensure_user(
        self,
        user_id: str,
        username: str | None = None,
        default_balance: float | None = None,
    ) -> UserAccount:
        """Return the account, creating it with the starting balance on first use."""

        account = self.users.get(user_id)
        if account is None:
            balance = get_settings().default_balance if default_balance is None else default_balance
            account = UserAccount(user_id=user_id, balance=balance, username=username or "Player")
            self.users[user_id] = account
            logger.info("Created account %s with balance %.2f", user_id, balance)
        elif username and account.username != username:
            account.username = username
        return account

    def available_balance(self, user_id: str) -> float:
        """Balance the user could spend now, counting the starting grant for newcomers."""

        account = self.users.get(user_id)
        return get_settings().default_balance if account is None else account.balance

    def match_wagers(self, match: Match) -> list[Wager]:
        return [self.wagers[wager_id] for wager_id in match.wager_ids if wager_id in self.wagers]

    def user_wagers(self, user_id: str) -> list[Wager]:
        return [wager for wager in self.wagers.values() if wager.user_id == user_id]

    def flush(self) -> None:
        """Hand the current state to the persistence hook, if any."""

        if self.flush_hook is None:
            return
        try:
            self.flush_hook(self)
        except Exception as exc:  # pragma: no cover - persistence is the host's concern
            logger.error("Persistence flush failed: %s", exc)
