"""Conversion between ``Candidate`` and ``CandidateRecord``."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import structlog

from .schemas import CANDIDATE_PARTITION, Candidate, CandidateRecord

_logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class FieldWarning:
    """A list column that could not be decoded and was replaced with ``[]``."""

    field: str
    raw: str
    reason: str


@dataclass(slots=True)
class DecodeResult:
    """Decoded candidate plus any field-level warnings."""

    candidate: Candidate
    warnings: list[FieldWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def to_record(candidate: Candidate, *, version: str | None = None) -> CandidateRecord:
    return CandidateRecord(
        partition_key=CANDIDATE_PARTITION,
        row_key=candidate.email,
        version=version,
        first_name=candidate.first_name,
        last_name=candidate.last_name,
        current_role=candidate.current_role,
        skills_json=json.dumps(list(candidate.skills), ensure_ascii=False),
        spoken_languages_json=json.dumps(list(candidate.spoken_languages), ensure_ascii=False),
    )


def decode_record(record: CandidateRecord) -> DecodeResult:
    """Decode a record, substituting ``[]`` for any malformed list column."""
    warnings: list[FieldWarning] = []
    skills = _decode_string_list("skills_json", record.skills_json, warnings)
    spoken_languages = _decode_string_list(
        "spoken_languages_json", record.spoken_languages_json, warnings
    )
    candidate = Candidate(
        first_name=record.first_name,
        last_name=record.last_name,
        email=record.row_key,
        current_role=record.current_role,
        skills=skills,
        spoken_languages=spoken_languages,
    )
    for warning in warnings:
        _logger.warning(
            "codec.field_warning",
            email=record.row_key,
            field=warning.field,
            reason=warning.reason,
        )
    return DecodeResult(candidate=candidate, warnings=warnings)


def to_candidate(record: CandidateRecord) -> Candidate:
    return decode_record(record).candidate


def _decode_string_list(name: str, raw: str | None, warnings: list[FieldWarning]) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        warnings.append(FieldWarning(field=name, raw=raw, reason=f"invalid JSON ({exc.msg})"))
        return []
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        warnings.append(FieldWarning(field=name, raw=raw, reason="not a JSON array of strings"))
        return []
    return value


__all__ = ["DecodeResult", "FieldWarning", "decode_record", "to_candidate", "to_record"]
