"""Azure Table Storage adapter."""

from __future__ import annotations

from typing import Any, Mapping

import structlog
from azure.core import MatchConditions
from azure.core.exceptions import (
    AzureError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)
from azure.data.tables import TableServiceClient, UpdateMode

from ..errors import ConfigurationError, StoreUnavailable
from ..schemas import CandidateRecord
from ..schemas.config import DEFAULT_TABLE_NAME
from . import WriteConflict, WriteOk, WriteOutcome

_COLUMNS: dict[str, str] = {
    "first_name": "FirstName",
    "last_name": "LastName",
    "current_role": "CurrentRole",
    "skills_json": "SkillsJson",
    "spoken_languages_json": "SpokenLanguagesJson",
}


class AzureTableAdapter:
    """Adapter storing candidate records as Azure Table entities."""

    def __init__(
        self,
        connection_string: str | None = None,
        table_name: str = DEFAULT_TABLE_NAME,
        *,
        service: Any | None = None,
    ) -> None:
        if service is None:
            if not connection_string:
                raise ConfigurationError("A table storage connection string is required")
            try:
                service = TableServiceClient.from_connection_string(connection_string)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid table storage connection string: {exc}") from exc
        self._service = service
        self._table_name = table_name
        self._table = service.get_table_client(table_name)
        self._logger = structlog.get_logger(__name__).bind(table=table_name)
        self._logger.info("tables.client_initialized")

    @property
    def table_name(self) -> str:
        return self._table_name

    def ensure_table(self) -> None:
        try:
            self._service.create_table_if_not_exists(self._table_name)
        except AzureError as exc:
            self._logger.error("tables.create_failed", error=str(exc))
            raise StoreUnavailable(f"Failed to create table {self._table_name!r}") from exc
        self._logger.debug("tables.ensured")

    def query_partition(self, partition_key: str) -> list[CandidateRecord]:
        try:
            entities = self._table.query_entities(
                "PartitionKey eq @pk",
                parameters={"pk": partition_key},
            )
            return [entity_to_record(entity) for entity in entities]
        except AzureError as exc:
            raise StoreUnavailable(f"Failed to query partition {partition_key!r}") from exc

    def get(self, partition_key: str, row_key: str) -> CandidateRecord | None:
        try:
            entity = self._table.get_entity(partition_key=partition_key, row_key=row_key)
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            raise StoreUnavailable(f"Failed to read row {row_key!r}") from exc
        return entity_to_record(entity)

    def insert(self, record: CandidateRecord) -> WriteOutcome:
        try:
            metadata = self._table.create_entity(entity=record_to_entity(record))
        except ResourceExistsError:
            return WriteConflict(reason="row already exists")
        except AzureError as exc:
            raise StoreUnavailable(f"Failed to insert row {record.row_key!r}") from exc
        return WriteOk(version=_etag(metadata))

    def replace(self, record: CandidateRecord, expected_version: str | None) -> WriteOutcome:
        try:
            metadata = self._table.update_entity(
                entity=record_to_entity(record),
                mode=UpdateMode.REPLACE,
                etag=expected_version,
                match_condition=MatchConditions.IfNotModified,
            )
        except ResourceModifiedError:
            return WriteConflict(reason="version mismatch")
        except ResourceNotFoundError:
            # Deleted between read and write; the snapshot is stale either way.
            return WriteConflict(reason="row no longer exists")
        except AzureError as exc:
            raise StoreUnavailable(f"Failed to replace row {record.row_key!r}") from exc
        return WriteOk(version=_etag(metadata))

    def delete(self, partition_key: str, row_key: str) -> None:
        try:
            self._table.delete_entity(partition_key=partition_key, row_key=row_key)
        except ResourceNotFoundError:
            return
        except AzureError as exc:
            raise StoreUnavailable(f"Failed to delete row {row_key!r}") from exc


def record_to_entity(record: CandidateRecord) -> dict[str, Any]:
    entity: dict[str, Any] = {
        "PartitionKey": record.partition_key,
        "RowKey": record.row_key,
    }
    for attr, column in _COLUMNS.items():
        entity[column] = getattr(record, attr)
    return entity


def entity_to_record(entity: Mapping[str, Any]) -> CandidateRecord:
    values = {attr: str(entity.get(column) or "") for attr, column in _COLUMNS.items()}
    return CandidateRecord(
        partition_key=entity["PartitionKey"],
        row_key=entity["RowKey"],
        version=_etag(getattr(entity, "metadata", None)),
        **values,
    )


def _etag(metadata: Mapping[str, Any] | None) -> str | None:
    if not metadata:
        return None
    etag = metadata.get("etag")
    return str(etag) if etag is not None else None


__all__ = ["AzureTableAdapter", "entity_to_record", "record_to_entity"]
