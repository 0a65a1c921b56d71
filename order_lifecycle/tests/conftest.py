"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from order_lifecycle.config.schema import ServiceConfig, StorageBackend, StorageConfig
from order_lifecycle.service.factory import build_service
from order_lifecycle.service.lifecycle import OrderLifecycleService
from order_lifecycle.storage.database import connect, run_migrations
from order_lifecycle.storage.document_store import MemoryDocumentStore
from order_lifecycle.storage.sqlite_store import SqliteDocumentStore
from order_lifecycle.tests.helpers import CountingStore


@pytest.fixture
def memory_config() -> ServiceConfig:
    return ServiceConfig(storage=StorageConfig(backend=StorageBackend.MEMORY))


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def service(memory_config: ServiceConfig, store: CountingStore) -> OrderLifecycleService:
    return build_service(memory_config, store)


@pytest.fixture
def sqlite_store(tmp_path: Path):
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    s = SqliteDocumentStore(conn)
    yield s
    s.close()


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path: Path):
    """Each document store implementation in turn."""
    if request.param == "memory":
        yield MemoryDocumentStore()
        return
    conn = connect(tmp_path / "param.db")
    run_migrations(conn)
    s = SqliteDocumentStore(conn)
    yield s
    s.close()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "storage": {"backend": "sqlite", "db_path": str(tmp_path / "cfg.db")},
        "orders": {"default_currency": "KES"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
