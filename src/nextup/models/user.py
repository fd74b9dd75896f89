"""Authenticated identity as reported by the auth gateway."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class User(BaseModel):
    """Identity returned by ``/auth/me``.

    The backend has shipped both camelCase and PascalCase spellings, so each
    field accepts either.
    """

    role: Optional[str] = Field(default=None, validation_alias=AliasChoices("role", "Role"))
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "Name"))
    email: Optional[str] = Field(default=None, validation_alias=AliasChoices("email", "Email"))
    is_authenticated: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_authenticated", "isAuthenticated", "IsAuthenticated"),
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("is_authenticated", mode="before")
    @classmethod
    def _null_is_anonymous(cls, value):
        return False if value is None else value

    @property
    def first_name(self) -> str:
        if not self.name:
            return ""
        return self.name.split(" ")[0]
