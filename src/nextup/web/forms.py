"""Pydantic models for HTML form submissions proxied to the backend."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class _FormModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_fields(cls, data: Any) -> Any:
        # Browsers submit untouched inputs as "", which should fall back to defaults.
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value != ""}
        return data

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GoalForm(_FormModel):
    goal_type: str = Field(..., min_length=1)
    target_value: int = Field(default=0, ge=0)
    current_value: int = Field(default=0, ge=0)
    season: Optional[str] = None
    player_id: Optional[int] = None


class TeamForm(_FormModel):
    name: str = Field(..., min_length=1)
    school: Optional[str] = None
    mascot: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    division: Optional[str] = None
    conference: Optional[str] = None
    is_public: bool = False


class GameForm(_FormModel):
    home_team_id: int
    away_team_id: int
    game_date: str = Field(..., min_length=1)
    game_time: str = Field(..., min_length=1)
    season: int
    location: Optional[str] = None
    week: Optional[int] = Field(default=None, ge=0)
    status: str = "Scheduled"
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    @model_validator(mode="after")
    def _distinct_teams(self) -> "GameForm":
        if self.home_team_id == self.away_team_id:
            raise ValueError("Home and away teams must be different")
        return self

    def to_payload(self) -> Dict[str, Any]:
        return {
            "homeTeamId": self.home_team_id,
            "awayTeamId": self.away_team_id,
            "gameDate": f"{self.game_date}T{self.game_time}",
            "location": self.location,
            "season": str(self.season),
            "week": self.week,
            "status": self.status,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
        }


class _RegistrationForm(_FormModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class PlayerRegistration(_RegistrationForm):
    team_id: int
    position: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    height: Optional[str] = None
    weight: Optional[int] = Field(default=None, ge=0)
    jersey_number: Optional[int] = Field(default=None, ge=0)


class CoachRegistration(_RegistrationForm):
    experience_years: Optional[int] = Field(default=None, ge=0)
    specialty: Optional[str] = None
    certification: Optional[str] = None
    bio: Optional[str] = None


def describe_errors(exc: ValidationError) -> str:
    """Flatten a validation error into one line for an inline notice."""

    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "__root__")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
