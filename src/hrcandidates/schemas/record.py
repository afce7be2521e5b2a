"""Persisted representation of a candidate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

CANDIDATE_PARTITION = "Candidate"


class CandidateRecord(BaseModel):
    """A candidate as stored in the table: scalar columns plus JSON-encoded lists."""

    partition_key: str = CANDIDATE_PARTITION
    row_key: str
    version: str | None = None
    first_name: str = ""
    last_name: str = ""
    current_role: str = ""
    skills_json: str = "[]"
    spoken_languages_json: str = "[]"

    model_config = ConfigDict(extra="forbid")
