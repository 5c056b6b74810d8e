"""Exception hierarchy raised by the betting core.

Every operation validates its inputs before it mutates anything, so catching
one of these means the store is exactly as it was before the call.
"""

from __future__ import annotations


class GolazoError(Exception):
    """Base class for all core errors."""


class ValidationError(GolazoError):
    """Malformed or out-of-range input."""


class InvalidResultError(ValidationError):
    """Outcome label does not agree with the final score."""


class InsufficientFundsError(ValidationError):
    """Balance is lower than the requested amount."""


class UnknownMarketError(ValidationError):
    """Special-market key outside the supported vocabulary."""


class NotFoundError(GolazoError):
    """Unknown team, match, wager or user id."""


class TeamNotFoundError(NotFoundError):
    def __init__(self, name: str, suggestions: list[str] | None = None) -> None:
        self.name = name
        self.suggestions = suggestions or []
        message = f"Team '{name}' not found"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class MatchNotFoundError(NotFoundError):
    def __init__(self, match_id: str) -> None:
        self.match_id = match_id
        super().__init__(f"Match '{match_id}' not found")


class StateError(GolazoError):
    """Operation not allowed in the match's current lifecycle state."""


class AlreadyResolvedError(StateError):
    """A result was already recorded for the match."""


class NotEligibleError(StateError):
    """The match cannot take part in the requested operation."""
