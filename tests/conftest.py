from __future__ import annotations

import itertools

import pytest

from hrcandidates.adapters import WriteConflict, WriteOk, WriteOutcome
from hrcandidates.schemas import Candidate, CandidateRecord
from hrcandidates.seeding import CandidateSeeder
from hrcandidates.store import CandidateStore


class InMemoryTableAdapter:
    """Table adapter fake with ETag-style versioning."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], CandidateRecord] = {}
        self.ensure_calls = 0
        self.writes = 0
        self._versions = itertools.count(1)

    def ensure_table(self) -> None:
        self.ensure_calls += 1

    def query_partition(self, partition_key: str) -> list[CandidateRecord]:
        return [
            record.model_copy()
            for (partition, _), record in self.rows.items()
            if partition == partition_key
        ]

    def get(self, partition_key: str, row_key: str) -> CandidateRecord | None:
        record = self.rows.get((partition_key, row_key))
        return record.model_copy() if record is not None else None

    def insert(self, record: CandidateRecord) -> WriteOutcome:
        key = (record.partition_key, record.row_key)
        if key in self.rows:
            return WriteConflict(reason="row already exists")
        return self._store(key, record)

    def replace(self, record: CandidateRecord, expected_version: str | None) -> WriteOutcome:
        key = (record.partition_key, record.row_key)
        current = self.rows.get(key)
        if current is None or current.version != expected_version:
            return WriteConflict(reason="version mismatch")
        return self._store(key, record)

    def delete(self, partition_key: str, row_key: str) -> None:
        self.rows.pop((partition_key, row_key), None)
        self.writes += 1

    def put_raw(self, record: CandidateRecord) -> None:
        key = (record.partition_key, record.row_key)
        self._store(key, record)

    def _store(self, key: tuple[str, str], record: CandidateRecord) -> WriteOk:
        version = f'W/"{next(self._versions)}"'
        self.rows[key] = record.model_copy(update={"version": version})
        self.writes += 1
        return WriteOk(version=version)


def make_candidate(**overrides) -> Candidate:
    defaults = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "current_role": "Engineer",
        "skills": ["Python", "Mathematics"],
        "spoken_languages": ["English", "French"],
    }
    defaults.update(overrides)
    return Candidate(**defaults)


@pytest.fixture
def adapter() -> InMemoryTableAdapter:
    return InMemoryTableAdapter()


@pytest.fixture
def store(adapter: InMemoryTableAdapter) -> CandidateStore:
    return CandidateStore(adapter)


@pytest.fixture
def seeder(store: CandidateStore) -> CandidateSeeder:
    return CandidateSeeder(store)


@pytest.fixture
def candidate_factory():
    return make_candidate
