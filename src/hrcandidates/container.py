"""Dependency injection container for the candidate store."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
from dependency_injector import containers, providers

from .adapters import AzureTableAdapter, TableAdapter
from .schemas import AppConfig, load_config
from .seeding import CandidateSeeder, SeedReport
from .store import CandidateStore


class StoreContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    settings = providers.Object(AppConfig())

    table_adapter = providers.Singleton(
        AzureTableAdapter,
        connection_string=config.connection_string,
        table_name=config.table_name,
    )

    store = providers.Singleton(CandidateStore, adapter=table_adapter)

    seeder = providers.Factory(CandidateSeeder, store=store)


def create_container(
    *,
    settings: AppConfig | dict[str, Any] | None = None,
    adapter: TableAdapter | None = None,
) -> StoreContainer:
    """Instantiate the container.

    The connection string is resolved eagerly so a missing value fails at
    startup with ``ConfigurationError``. Passing ``adapter`` replaces the
    Azure adapter and skips that resolution.
    """

    app_config = settings if isinstance(settings, AppConfig) else load_config(settings)

    container = StoreContainer()
    container.settings.override(providers.Object(app_config))
    container.config.from_dict({"table_name": app_config.storage.table_name})

    if adapter is not None:
        container.table_adapter.override(providers.Object(adapter))
    else:
        container.config.connection_string.from_value(app_config.connection_string())

    return container


def bootstrap(container: StoreContainer, source: str | Path | None = None) -> SeedReport:
    """Seed the store when seeding is enabled.

    ``source`` overrides the configured seed document path.
    """
    app_config: AppConfig = container.settings()
    source = Path(source) if source is not None else app_config.seeding.candidates_path
    if not app_config.seeding.enabled:
        structlog.get_logger(__name__).info("seeding.disabled", source=str(source))
        return SeedReport(status="disabled", source=str(source))
    return container.seeder().seed_if_empty(source)


__all__ = ["StoreContainer", "bootstrap", "create_container"]
