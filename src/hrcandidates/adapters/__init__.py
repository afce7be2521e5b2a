"""Table storage adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Union, runtime_checkable

from ..schemas import CandidateRecord


@dataclass(frozen=True, slots=True)
class WriteOk:
    """The write was applied; ``version`` is the record's new version token."""

    version: str | None


@dataclass(frozen=True, slots=True)
class WriteConflict:
    """The write was rejected because the row exists or its version moved on."""

    reason: str = ""


WriteOutcome = Union[WriteOk, WriteConflict]


@runtime_checkable
class TableAdapter(Protocol):
    """Storage boundary contract for a single partitioned table.

    Implementations raise ``StoreUnavailable`` for transport or backend
    failures and never leak SDK exceptions.
    """

    def ensure_table(self) -> None:
        """Create the backing table when it does not exist."""

    def query_partition(self, partition_key: str) -> Iterable[CandidateRecord]:
        """Return every record stored under ``partition_key``."""

    def get(self, partition_key: str, row_key: str) -> CandidateRecord | None:
        """Return the record or ``None`` when absent."""

    def insert(self, record: CandidateRecord) -> WriteOutcome:
        """Insert a new row; ``WriteConflict`` when the row key is taken."""

    def replace(self, record: CandidateRecord, expected_version: str | None) -> WriteOutcome:
        """Replace a row only if its current version equals ``expected_version``."""

    def delete(self, partition_key: str, row_key: str) -> None:
        """Delete a row unconditionally."""


from .azure_tables import AzureTableAdapter  # noqa: E402

__all__ = ["TableAdapter", "WriteOk", "WriteConflict", "WriteOutcome", "AzureTableAdapter"]
