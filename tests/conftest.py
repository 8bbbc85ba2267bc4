"""Shared test fixtures for confimpact."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.history.models import HistoryEntry
from confimpact.history.store import MemoryHistoryStore

CONFIG_V1 = {
    "name": "orders-service",
    "version": "1.4.0",
    "enabled": True,
    "database": {
        "host": "db-primary.internal",
        "port": 5432,
        "timeout": 30,
        "pool": {"max_size": 20, "min_size": 2},
    },
    "api_key": "k-123",
    "features": ["search", "export"],
    "log_level": "info",
}

CONFIG_V2 = {
    "name": "orders-service",
    "version": "1.5.0",
    "enabled": False,
    "database": {
        "host": "db-replica.internal",
        "port": "5432",
        "timeout": 10,
        "pool": {"max_size": 50, "min_size": 2},
    },
    "features": ["search", "export", "audit"],
    "log_level": "debug",
    "cache_ttl": 300,
}

YAML_V1 = """\
# orders service
name: orders-service
enabled: true
database:
  host: db-primary.internal
  port: 5432
  timeout: 30
released: 2024-05-01
"""

SCHEMA = {
    "required": ["name", "enabled", "database"],
    "properties": {
        "name": {"type": "string"},
        "enabled": {"type": "boolean"},
        "log_level": {"type": "string", "enum": ["debug", "info", "warning", "error"]},
        "database": {
            "type": "object",
            "required": ["host"],
            "properties": {
                "host": {"type": "string"},
                "port": {"type": "integer"},
            },
        },
    },
}


@pytest.fixture
def config_files(tmp_path: Path) -> tuple[Path, Path]:
    """Two JSON config versions on disk."""
    a = tmp_path / "config-v1.json"
    b = tmp_path / "config-v2.json"
    a.write_text(json.dumps(CONFIG_V1, indent=2))
    b.write_text(json.dumps(CONFIG_V2, indent=2))
    return a, b


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA))
    return path


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(YAML_V1)
    return path


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "history.json"


def make_entry(name: str, *paths: str) -> HistoryEntry:
    """A history entry whose changes modify the given paths."""
    return HistoryEntry(
        name=name,
        timestamp="2026-01-01T00:00:00+00:00",
        file_a="a.json",
        file_b="b.json",
        changes=[
            ChangeRecord(kind=ChangeKind.MODIFIED, path=p, old_value=1, new_value=2)
            for p in paths
        ],
    )


@pytest.fixture
def memory_store() -> MemoryHistoryStore:
    return MemoryHistoryStore()


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def config_docs() -> tuple[dict, dict]:
    """The two sample config versions as in-memory documents."""
    return copy.deepcopy(CONFIG_V1), copy.deepcopy(CONFIG_V2)


@pytest.fixture
def schema() -> dict:
    return copy.deepcopy(SCHEMA)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's real config and history out of every test."""
    home = tmp_path / "home"
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CONFIMPACT_HISTORY_FILE", raising=False)
    return home
