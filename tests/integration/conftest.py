"""
Fixtures for integration tests.

These tests use the real application, lifespan included, with actual file
storage in a temporary directory.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from bytestore.app import create_app
from bytestore.config import clear_settings_cache
from bytestore.core.state import reset_app_state
from tests.factories import create_config_yaml

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(scope="module")
def integration_client(tmp_path_factory: pytest.TempPathFactory) -> Iterator[TestClient]:
    """
    Create test client with the real application.

    Uses a temporary directory for storage to avoid polluting real data.
    """
    tmp_dir = tmp_path_factory.mktemp("bytestore_integration")
    config_file = tmp_dir / "config.yaml"
    config_file.write_text(create_config_yaml(tmp_dir / "containers", 300))
    os.environ["CONFIG_PATH"] = str(config_file)

    clear_settings_cache()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client

    clear_settings_cache()
    reset_app_state()
    os.environ.pop("CONFIG_PATH", None)


@pytest.fixture
def client(integration_client: TestClient) -> Iterator[TestClient]:
    """
    Per-test client that deletes every container before each test.
    """
    for container_id in integration_client.get("/containers").json()["containers"]:
        integration_client.delete(f"/containers/{container_id}")
    yield integration_client


@pytest.fixture
def store_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """
    Point the service at a fresh store root for restart tests.

    Yields the store root; each test starts and stops its own app instances.
    """
    store_root = tmp_path / "containers"
    config_file = tmp_path / "config.yaml"
    config_file.write_text(create_config_yaml(store_root, 300))
    monkeypatch.setenv("CONFIG_PATH", str(config_file))
    clear_settings_cache()
    yield store_root
    clear_settings_cache()
    reset_app_state()
