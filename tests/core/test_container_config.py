from __future__ import annotations

import json
from pathlib import Path

import pytest

from hrcandidates.adapters import AzureTableAdapter
from hrcandidates.config import ConfigManager, load_settings
from hrcandidates.container import bootstrap, create_container
from hrcandidates.errors import ConfigurationError
from hrcandidates.schemas import AppConfig, load_config
from hrcandidates.schemas.config import CONNECTION_STRING_ENV
from hrcandidates.store import CandidateStore

AZURITE_CONNECTION = (
    "DefaultEndpointsProtocol=http;AccountName=devstoreaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
    "TableEndpoint=http://127.0.0.1:10002/devstoreaccount1;"
)


def test_connection_string_prefers_named_setting(monkeypatch):
    monkeypatch.setenv(CONNECTION_STRING_ENV, "from-env")
    config = AppConfig(connection_strings={"TableStorage": "from-config"})

    assert config.connection_string() == "from-config"


def test_connection_string_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv(CONNECTION_STRING_ENV, "from-env")

    assert AppConfig().connection_string() == "from-env"


def test_missing_connection_string_fails_at_startup(monkeypatch):
    monkeypatch.delenv(CONNECTION_STRING_ENV, raising=False)

    with pytest.raises(ConfigurationError):
        create_container(settings={})


def test_container_builds_azure_adapter(monkeypatch):
    monkeypatch.delenv(CONNECTION_STRING_ENV, raising=False)
    container = create_container(
        settings={
            "connection_strings": {"TableStorage": AZURITE_CONNECTION},
            "storage": {"table_name": "CandidatesTest"},
        }
    )

    adapter = container.table_adapter()

    assert isinstance(adapter, AzureTableAdapter)
    assert adapter.table_name == "CandidatesTest"
    assert isinstance(container.store(), CandidateStore)


def test_container_uses_adapter_override(adapter):
    container = create_container(adapter=adapter)

    assert container.store() is container.store()
    container.store().list_all()
    assert adapter.ensure_calls == 1


def test_bootstrap_seeds_from_configured_path(tmp_path: Path, adapter):
    source = tmp_path / "seed.json"
    source.write_text(
        json.dumps([{"email": "ada@example.com", "first_name": "Ada"}]),
        encoding="utf-8",
    )
    container = create_container(
        settings={"seeding": {"candidates_path": str(source)}},
        adapter=adapter,
    )

    report = bootstrap(container)

    assert report.added == 1
    assert bootstrap(container).status == "store_not_empty"


def test_bootstrap_respects_disabled_seeding(adapter):
    container = create_container(settings={"seeding": {"enabled": False}}, adapter=adapter)

    report = bootstrap(container)

    assert report.status == "disabled"
    assert not report.seeded
    assert adapter.ensure_calls == 0


def test_yaml_settings_are_validated(tmp_path: Path):
    (tmp_path / "settings.yaml").write_text(
        "storage:\n  table_name: People\nlogging:\n  level: DEBUG\n",
        encoding="utf-8",
    )

    settings = ConfigManager(tmp_path).settings()

    assert settings.storage.table_name == "People"
    assert settings.logging.level == "DEBUG"
    assert load_settings(None) == AppConfig()


def test_load_config_rejects_non_mapping():
    with pytest.raises(ConfigurationError):
        load_config(["not", "a", "mapping"])
