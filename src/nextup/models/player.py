"""Backend payload models for teams, players, games and goals."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class _BackendModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # The backend serializes missing strings and collections as null.
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TeamRef(_BackendModel):
    """Weak reference to a team as embedded in player and game payloads."""

    team_id: Optional[int] = None
    name: Optional[str] = None
    location: Optional[str] = None


class Player(_BackendModel):
    """Player as returned by the domain API.

    ``position`` is the raw backend spelling; ``stats`` keeps whatever key
    casing the backend used.
    """

    player_id: Optional[int] = None
    name: str = ""
    position: Optional[str] = None
    jersey_number: Optional[int] = None
    height: Optional[str] = None
    weight: Optional[int] = None
    age: Optional[int] = None
    team: Optional[TeamRef] = None
    stats: Dict[str, Any] = Field(default_factory=dict)


class Team(_BackendModel):
    team_id: Optional[int] = None
    name: str = ""
    location: Optional[str] = None
    school: Optional[str] = None
    mascot: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    division: Optional[str] = None
    conference: Optional[str] = None
    is_public: bool = False
    wins: Optional[int] = None
    losses: Optional[int] = None
    players: List[Player] = Field(default_factory=list)

    @property
    def record(self) -> str:
        return f"{self.wins or 0}-{self.losses or 0}"


class Game(_BackendModel):
    game_id: Optional[int] = None
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    home_team: Optional[TeamRef] = None
    away_team: Optional[TeamRef] = None
    game_date: Optional[str] = None
    location: Optional[str] = None
    week: Optional[int] = None
    season: Optional[int] = None
    status: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    is_completed: bool = False


class PlayerGoal(_BackendModel):
    player_goal_id: Optional[int] = None
    player_id: Optional[int] = None
    goal_type: str = ""
    target_value: int = 0
    current_value: int = 0
    season: Optional[str] = None

    @property
    def progress(self) -> float:
        if self.target_value <= 0:
            return 0.0
        return min(1.0, max(0.0, self.current_value / self.target_value))


class Coach(_BackendModel):
    coach_id: Optional[int] = None
    name: str = ""
    specialty: Optional[str] = None
    experience_years: Optional[int] = None
    team: Optional[TeamRef] = None
