"""Team catalog loading and forgiving name lookup."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from golazo.betting.types import Team
from golazo.data.schemas import TeamRecordSchema
from golazo.errors import TeamNotFoundError

TOURNAMENT_NAMES = {
    "d1": "Liga D1",
    "d2": "Liga D2",
    "d3": "Liga D3",
    "maradei": "Copa Maradei",
    "cv": "Copa ValencARc",
    "cd2": "Copa D2",
    "cd3": "Copa D3",
    "izoro": "Copa Intrazonal de Oro",
    "izplata": "Copa Intrazonal de Plata",
}

SUGGESTION_THRESHOLD = 0.3
_TAG = re.compile(r" \([^)]+\)")


def load_teams(records: Iterable[TeamRecordSchema | Mapping[str, Any]]) -> dict[str, Team]:
    """Validate scraper rows and key the resulting teams by name."""

    teams: dict[str, Team] = {}
    for record in records:
        if not isinstance(record, TeamRecordSchema):
            record = TeamRecordSchema.model_validate(record)
        team = record.to_team()
        teams[team.name] = team
    return teams


def _bare(name: str) -> str:
    return _TAG.sub("", name, count=1).lower()


def _in_tournament(team: Team, tournament: str) -> bool:
    code = tournament.lower()
    return (
        team.league.value.lower() == code
        or team.tournament.lower() == code
        or team.tournament == TOURNAMENT_NAMES.get(code)
    )


def _candidates(teams: Mapping[str, Team], tournament: str | None) -> list[Team]:
    pool = list(teams.values())
    if tournament:
        pool = [team for team in pool if _in_tournament(team, tournament)]
    return pool


def find_team(teams: Mapping[str, Team], search: str, tournament: str | None = None) -> Team | None:
    """Exact name, then name without tag, then substring, then every word."""

    if not search or not search.strip():
        return None
    needle = search.lower().strip()
    pool = _candidates(teams, tournament)

    for team in pool:
        if team.name.lower() == needle:
            return team
    for team in pool:
        if _bare(team.name) == needle or team.short_name.lower() == needle:
            return team
    for team in pool:
        bare = _bare(team.name)
        if needle in bare or bare in needle:
            return team
    words = needle.split()
    for team in pool:
        name_words = _bare(team.name).split()
        if all(any(word in part or part in word for part in name_words) for word in words):
            return team
    return None


def similarity(a: str, b: str) -> float:
    longer, shorter = (a, b) if len(a) > len(b) else (b, a)
    if not longer:
        return 1.0
    hits = sum(1 for ch in shorter if ch in longer)
    return hits / len(longer)


def team_suggestions(
    teams: Mapping[str, Team],
    search: str,
    limit: int = 5,
    tournament: str | None = None,
) -> list[Team]:
    if not search:
        return []
    needle = search.lower().strip()
    scored = [
        (similarity(needle, _bare(team.name)), team)
        for team in _candidates(teams, tournament)
    ]
    scored = [item for item in scored if item[0] > SUGGESTION_THRESHOLD]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [team for _, team in scored[:limit]]


def resolve_team(teams: Mapping[str, Team], search: str, tournament: str | None = None) -> Team:
    team = find_team(teams, search, tournament)
    if team is None:
        hints = [t.name for t in team_suggestions(teams, search, limit=3, tournament=tournament)]
        raise TeamNotFoundError(search, hints)
    return team
