"""Pydantic schemas for harvested team standings."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from golazo.betting.types import DEFAULT_FORM, League, Team

_LEAGUE_CODES = frozenset(league.value for league in League)


class TeamRecordSchema(BaseModel):
    """One row of the standings scraper's output."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    league: League = League.CUSTOM
    position: int | None = Field(default=None, gt=0)
    last_five_matches: str = Field(
        default=DEFAULT_FORM,
        validation_alias=AliasChoices("lastFiveMatches", "last_five_matches"),
    )
    tournament: str = ""
    original_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("originalName", "original_name"),
    )

    @model_validator(mode="before")
    @classmethod
    def _split_league(cls, data: Any) -> Any:
        # Cup-only rows carry their tournament code in the league column.
        if not isinstance(data, dict) or not isinstance(data.get("league"), str):
            return data
        code = data["league"].strip()
        if code.upper() in _LEAGUE_CODES:
            return {**data, "league": code.upper()}
        data = {**data, "league": League.CUSTOM}
        if not data.get("tournament"):
            data["tournament"] = code.lower()
        return data

    @field_validator("last_five_matches")
    @classmethod
    def _normalise_form(cls, value: str) -> str:
        form = value.strip().upper()
        if any(ch not in "WDL" for ch in form):
            raise ValueError("form must only contain W, D or L")
        return form or DEFAULT_FORM

    def to_team(self) -> Team:
        return Team(
            name=self.name,
            league=self.league,
            position=self.position,
            last_five=self.last_five_matches,
            tournament=self.tournament,
            original_name=self.original_name,
        )
