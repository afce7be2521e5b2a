"""Candidate storage service."""

from __future__ import annotations

import threading
from typing import Callable

import structlog

from .adapters import TableAdapter, WriteConflict
from .codec import decode_record, to_record
from .errors import CandidateStoreError, Conflict, InvalidArgument, StoreUnavailable
from .schemas import CANDIDATE_PARTITION, Candidate, CandidateRecord

Mutation = Callable[[Candidate], Candidate]


class CandidateStore:
    """CRUD and substring search over candidates kept in a single table partition.

    Every call reads through to the table. The only in-memory state is the
    "table exists" flag, which is cleared whenever the table becomes
    unavailable so the next call ensures it again. Updates are optimistic:
    the record's version is captured at read time and the write is rejected
    with ``Conflict`` if another writer got there first.
    """

    def __init__(self, adapter: TableAdapter, *, partition_key: str = CANDIDATE_PARTITION) -> None:
        self._adapter = adapter
        self._partition_key = partition_key
        self._ready = False
        self._ready_lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    def ensure_ready(self) -> None:
        if self._ready:
            return
        with self._ready_lock:
            if self._ready:
                return
            self._adapter.ensure_table()
            self._ready = True

    def list_all(self) -> list[Candidate]:
        self.ensure_ready()
        candidates = [decode_record(record).candidate for record in self._scan()]
        self._logger.info("candidates.listed", count=len(candidates))
        return candidates

    def get(self, email: str) -> Candidate | None:
        _require_email(email)
        self.ensure_ready()
        try:
            record = self._adapter.get(self._partition_key, email)
        except CandidateStoreError as exc:
            self._reset_if_unavailable(exc)
            raise
        if record is None:
            return None
        return decode_record(record).candidate

    def add(self, candidate: Candidate | None) -> bool:
        if candidate is None:
            raise InvalidArgument("candidate is required")
        _require_email(candidate.email)
        self.ensure_ready()

        log = self._logger.bind(email=candidate.email)
        try:
            if self._adapter.get(self._partition_key, candidate.email) is not None:
                log.warning("candidates.already_exists")
                return False

            outcome = self._adapter.insert(self._encode(candidate))
        except CandidateStoreError as exc:
            self._reset_if_unavailable(exc)
            log.error("candidates.add_failed", error=str(exc))
            raise

        if isinstance(outcome, WriteConflict):
            # Lost the race against a concurrent add for the same email.
            log.warning("candidates.add_conflict", reason=outcome.reason)
            return False
        log.info("candidates.added", full_name=candidate.full_name)
        return True

    def update(self, email: str, mutate: Mutation | None) -> bool:
        _require_email(email)
        if mutate is None or not callable(mutate):
            raise InvalidArgument("mutate must be a callable")
        self.ensure_ready()

        log = self._logger.bind(email=email)
        try:
            snapshot = self._adapter.get(self._partition_key, email)
            if snapshot is None:
                log.warning("candidates.update_missing")
                return False

            current = decode_record(snapshot).candidate
            updated = mutate(current.model_copy(deep=True))
            if not isinstance(updated, Candidate):
                raise InvalidArgument("mutate must return a Candidate")
            if updated.email != email:
                raise InvalidArgument("mutate must not change the candidate email")

            outcome = self._adapter.replace(
                self._encode(updated, version=snapshot.version),
                snapshot.version,
            )
        except CandidateStoreError as exc:
            self._reset_if_unavailable(exc)
            log.error("candidates.update_failed", error=str(exc))
            raise

        if isinstance(outcome, WriteConflict):
            log.warning("candidates.update_conflict", expected_version=snapshot.version)
            raise Conflict(email, snapshot.version)
        log.info("candidates.updated", version=outcome.version)
        return True

    def remove(self, email: str) -> bool:
        _require_email(email)
        self.ensure_ready()

        log = self._logger.bind(email=email)
        try:
            if self._adapter.get(self._partition_key, email) is None:
                log.warning("candidates.remove_missing")
                return False
            self._adapter.delete(self._partition_key, email)
        except CandidateStoreError as exc:
            self._reset_if_unavailable(exc)
            log.error("candidates.remove_failed", error=str(exc))
            raise
        log.info("candidates.removed")
        return True

    def search(self, term: str | None) -> list[Candidate]:
        if term is None or not term.strip():
            return self.list_all()

        self.ensure_ready()
        needle = term.strip().lower()
        matches = [
            candidate
            for candidate in (decode_record(record).candidate for record in self._scan())
            if candidate.matches(needle)
        ]
        self._logger.info("candidates.searched", term=term, count=len(matches))
        return matches

    def _scan(self) -> list[CandidateRecord]:
        try:
            return list(self._adapter.query_partition(self._partition_key))
        except CandidateStoreError as exc:
            self._reset_if_unavailable(exc)
            self._logger.error("candidates.scan_failed", error=str(exc))
            raise

    def _reset_if_unavailable(self, exc: CandidateStoreError) -> None:
        # The table may have been dropped; re-create it on the next call.
        if isinstance(exc, StoreUnavailable):
            self._ready = False

    def _encode(self, candidate: Candidate, *, version: str | None = None) -> CandidateRecord:
        record = to_record(candidate, version=version)
        if record.partition_key != self._partition_key:
            record = record.model_copy(update={"partition_key": self._partition_key})
        return record


def _require_email(email: str | None) -> None:
    if email is None or not str(email).strip():
        raise InvalidArgument("email cannot be empty")


__all__ = ["CandidateStore", "Mutation"]
