from __future__ import annotations

import json

from hrcandidates.codec import decode_record, to_candidate, to_record
from hrcandidates.schemas import CANDIDATE_PARTITION, Candidate, CandidateRecord


def build_candidate() -> Candidate:
    return Candidate(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        current_role="Rear Admiral",
        skills=["COBOL", "Compilers"],
        spoken_languages=["English", "日本語"],
    )


def test_to_record_uses_email_as_row_key_and_encodes_lists():
    record = to_record(build_candidate())

    assert record.partition_key == CANDIDATE_PARTITION
    assert record.row_key == "grace@example.com"
    assert record.version is None
    assert json.loads(record.skills_json) == ["COBOL", "Compilers"]
    assert json.loads(record.spoken_languages_json) == ["English", "日本語"]


def test_round_trip_reproduces_candidate():
    candidate = build_candidate()

    assert to_candidate(to_record(candidate)) == candidate


def test_malformed_skills_degrade_to_empty_list():
    record = to_record(build_candidate()).model_copy(update={"skills_json": "[not json"})

    result = decode_record(record)

    assert result.candidate.skills == []
    assert result.candidate.spoken_languages == ["English", "日本語"]
    assert result.candidate.first_name == "Grace"
    assert result.candidate.email == "grace@example.com"
    assert not result.ok
    assert [warning.field for warning in result.warnings] == ["skills_json"]


def test_non_string_arrays_are_treated_as_malformed():
    record = CandidateRecord(
        row_key="x@example.com",
        skills_json='{"python": 5}',
        spoken_languages_json="[1, 2]",
    )

    result = decode_record(record)

    assert result.candidate.skills == []
    assert result.candidate.spoken_languages == []
    assert {warning.field for warning in result.warnings} == {"skills_json", "spoken_languages_json"}


def test_empty_and_null_columns_decode_without_warnings():
    record = CandidateRecord(row_key="y@example.com", skills_json="", spoken_languages_json="null")

    result = decode_record(record)

    assert result.ok
    assert result.candidate.skills == []
    assert result.candidate.spoken_languages == []
