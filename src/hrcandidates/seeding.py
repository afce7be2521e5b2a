"""One-shot seeding of an empty candidate store."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import structlog
from pydantic import ValidationError

from .errors import CandidateStoreError
from .schemas import Candidate
from .store import CandidateStore

SeedStatus = Literal[
    "seeded",
    "disabled",
    "store_not_empty",
    "source_missing",
    "source_unreadable",
    "source_invalid",
    "store_unavailable",
]


@dataclass(slots=True)
class SeedFailure:
    """A seed entry that was parsed but could not be added."""

    email: str
    reason: str


@dataclass(slots=True)
class SeedReport:
    """Outcome of a seeding run.

    ``attempted`` counts entries that parsed into candidates. Entries
    rejected by the parser are listed in ``invalid`` and excluded from it.
    """

    status: SeedStatus
    source: str
    added: int = 0
    attempted: int = 0
    invalid: list[str] = field(default_factory=list)
    failures: list[SeedFailure] = field(default_factory=list)

    @property
    def seeded(self) -> bool:
        return self.status == "seeded"


class SeedDocumentError(ValueError):
    """Raised when the seed document cannot be read as a JSON array."""


class SeedDocumentParser:
    """Parse seed documents into candidates, entry by entry."""

    def parse(self, text: str) -> tuple[list[Candidate], list[str]]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SeedDocumentError(f"invalid JSON ({exc})") from exc
        if not isinstance(data, list):
            raise SeedDocumentError("seed document must be a JSON array")

        candidates: list[Candidate] = []
        errors: list[str] = []
        for idx, entry in enumerate(data):
            if not isinstance(entry, dict):
                errors.append(f"entry {idx}: expected an object, got {type(entry).__name__}")
                continue
            try:
                candidates.append(Candidate.model_validate(entry))
            except ValidationError as exc:
                errors.append(f"entry {idx}: {_summarize(exc)}")
        return candidates, errors


class CandidateSeeder:
    """Populate the store from a seed document, only when it is empty."""

    def __init__(self, store: CandidateStore, *, parser: SeedDocumentParser | None = None) -> None:
        self._store = store
        self._parser = parser or SeedDocumentParser()
        self._logger = structlog.get_logger(__name__)

    def seed_if_empty(self, source: str | Path) -> SeedReport:
        source = Path(source)
        log = self._logger.bind(source=str(source))

        try:
            existing = self._store.list_all()
        except CandidateStoreError as exc:
            log.error("seeding.store_unavailable", error=str(exc))
            return SeedReport(status="store_unavailable", source=str(source))

        if existing:
            log.info("seeding.skipped", existing=len(existing))
            return SeedReport(status="store_not_empty", source=str(source))

        log.info("seeding.started")
        try:
            text = source.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.warning("seeding.source_missing")
            return SeedReport(status="source_missing", source=str(source))
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("seeding.source_unreadable", error=str(exc))
            return SeedReport(status="source_unreadable", source=str(source))

        try:
            candidates, invalid = self._parser.parse(text)
        except SeedDocumentError as exc:
            log.warning("seeding.source_invalid", error=str(exc))
            return SeedReport(status="source_invalid", source=str(source))

        if invalid:
            log.warning("seeding.invalid_entries", errors=invalid)
        if not candidates:
            log.warning("seeding.no_candidates")

        report = SeedReport(
            status="seeded",
            source=str(source),
            attempted=len(candidates),
            invalid=invalid,
        )
        for candidate in candidates:
            self._seed_one(candidate, report)

        log.info("seeding.finished", added=report.added, attempted=report.attempted)
        return report

    def _seed_one(self, candidate: Candidate, report: SeedReport) -> None:
        try:
            added = self._store.add(candidate)
        except Exception as exc:  # noqa: BLE001
            self._logger.error("seeding.candidate_failed", email=candidate.email, error=str(exc))
            report.failures.append(SeedFailure(email=candidate.email, reason=str(exc)))
            return
        if added:
            report.added += 1
        else:
            report.failures.append(SeedFailure(email=candidate.email, reason="already exists"))


def _summarize(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "entry"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


__all__ = [
    "CandidateSeeder",
    "SeedDocumentError",
    "SeedDocumentParser",
    "SeedFailure",
    "SeedReport",
]
