"""Account and platform statistics."""

from __future__ import annotations

from typing import Any

import pandas as pd

from golazo.betting.store import Store
from golazo.betting.types import BetStatus

LEADERBOARD_SIZE = 10


def _accounts_frame(store: Store) -> pd.DataFrame:
    rows = [
        {
            "user_id": account.user_id,
            "username": account.username,
            "balance": account.balance,
            "total_bets": account.total_bets,
            "won_bets": account.won_bets,
            "lost_bets": account.lost_bets,
            "total_winnings": account.total_winnings,
        }
        for account in store.users.values()
    ]
    return pd.DataFrame(
        rows,
        columns=["user_id", "username", "balance", "total_bets", "won_bets", "lost_bets", "total_winnings"],
    )


def user_stats(store: Store, user_id: str) -> dict[str, Any]:
    account = store.get_user(user_id)
    wagers = store.user_wagers(user_id)
    return {
        "user_id": account.user_id,
        "username": account.username,
        "balance": account.balance,
        "total_bets": account.total_bets,
        "won_bets": account.won_bets,
        "lost_bets": account.lost_bets,
        "pending_bets": sum(1 for wager in wagers if wager.status is BetStatus.PENDING),
        "total_winnings": account.total_winnings,
        "win_rate": round(account.win_rate, 1),
    }


def leaderboard(store: Store, limit: int = LEADERBOARD_SIZE) -> list[dict[str, Any]]:
    """Richest accounts first."""

    df = _accounts_frame(store)
    if df.empty:
        return []
    df["win_rate"] = (df["won_bets"] / df["total_bets"].where(df["total_bets"] > 0) * 100).fillna(0.0).round(1)
    top = df.sort_values("balance", ascending=False, kind="stable").head(limit)
    return top.to_dict(orient="records")


def platform_stats(store: Store) -> dict[str, Any]:
    df = _accounts_frame(store)
    upcoming = sum(1 for match in store.matches.values() if match.is_upcoming)
    stakes = pd.Series([wager.amount for wager in store.wagers.values()], dtype="float64")
    return {
        "total_users": int(len(df)),
        "upcoming_matches": upcoming,
        "finished_matches": len(store.matches) - upcoming,
        "total_bets": len(store.wagers),
        "total_volume": float(stakes.sum()),
        "pending_bets": sum(1 for wager in store.wagers.values() if wager.status is BetStatus.PENDING),
        "richest_balance": float(df["balance"].max()) if not df.empty else 0.0,
        "average_balance": float(round(df["balance"].mean())) if not df.empty else 0.0,
    }
