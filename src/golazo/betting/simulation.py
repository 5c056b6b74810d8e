"""Random outcomes for matches nobody resolves by hand."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

from golazo.betting.settlement import resolve_match
from golazo.betting.store import Store
from golazo.betting.types import Match, Outcome, Score, Settlement, Team
from golazo.errors import NotEligibleError, TeamNotFoundError
from golazo.odds.calculator import regular_probabilities
from golazo.odds.strength import regular_strengths

logger = logging.getLogger(__name__)

#: A winner at least this many times stronger tends to win by a wide margin.
BLOWOUT_RATIO = 3.0


@dataclass(frozen=True)
class SimulatedResult:
    outcome: Outcome
    score: Score


def _is_blowout(winner: Team, loser: Team, winner_strength: float, loser_strength: float) -> bool:
    if winner.league.rank < loser.league.rank:
        return True
    return winner_strength >= loser_strength * BLOWOUT_RATIO


def _winning_score(rng: np.random.Generator, blowout: bool) -> tuple[int, int]:
    if blowout:
        winner = int(rng.integers(2, 6))
        loser = int(rng.integers(0, 2))
    else:
        winner = int(rng.integers(1, 4))
        loser = int(rng.integers(0, winner))
    return winner, loser


def simulate_outcome(match: Match, teams: Mapping[str, Team], rng: np.random.Generator) -> SimulatedResult:
    """Draw one (outcome, score) pair from the regular-season model."""

    if not match.is_upcoming:
        raise NotEligibleError(f"Match '{match.id}' is not upcoming.")
    for name in (match.team1, match.team2):
        if name not in teams:
            raise TeamNotFoundError(name)
    team1, team2 = teams[match.team1], teams[match.team2]

    probs = regular_probabilities(team1, team2)
    draw = float(rng.random())
    if draw < probs.team1:
        outcome = Outcome.TEAM1
    elif draw < probs.team1 + probs.team2:
        outcome = Outcome.TEAM2
    else:
        outcome = Outcome.DRAW

    s1, s2 = regular_strengths(team1, team2)
    if outcome is Outcome.TEAM1:
        goals1, goals2 = _winning_score(rng, _is_blowout(team1, team2, s1, s2))
    elif outcome is Outcome.TEAM2:
        goals2, goals1 = _winning_score(rng, _is_blowout(team2, team1, s2, s1))
    else:
        goals1 = goals2 = int(rng.integers(0, 3))
    return SimulatedResult(outcome=outcome, score=Score(goals1, goals2))


def simulate_match(store: Store, match_id: str, rng: np.random.Generator) -> Settlement:
    """Simulate an upcoming match and settle it with the drawn result."""

    match = store.get_match(match_id)
    simulated = simulate_outcome(match, store.teams, rng)
    logger.info("Simulated match %s: %s (%s)", match_id, simulated.score, simulated.outcome.value)
    return resolve_match(
        store,
        match_id,
        simulated.outcome,
        simulated.score.home,
        simulated.score.away,
        manual=False,
    )
