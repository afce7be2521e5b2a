"""Candidate domain model."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_KEY_NOISE_RE = re.compile(r"[_\-\s]")


def _normalize_key(key: str) -> str:
    return _KEY_NOISE_RE.sub("", key).lower()


class Candidate(BaseModel):
    """A candidate profile, identified by email."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    current_role: str = ""
    skills: list[str] = Field(default_factory=list)
    spoken_languages: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _match_field_names(cls, data: Any) -> Any:
        # Accept snake_case, camelCase and PascalCase keys alike.
        if not isinstance(data, dict):
            return data
        lookup = {_normalize_key(name): name for name in cls.model_fields}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            field_name = lookup.get(_normalize_key(key))
            if field_name is not None:
                normalized[field_name] = value
        return normalized

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def matches(self, term: str) -> bool:
        """Return True when ``term`` occurs in any text field, ignoring case."""
        term = term.lower()
        scalars = (self.first_name, self.last_name, self.email, self.current_role)
        if any(term in value.lower() for value in scalars):
            return True
        return any(term in value.lower() for value in (*self.skills, *self.spoken_languages))
