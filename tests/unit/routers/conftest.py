"""
Fixtures for router tests.

The app is created without running its lifespan; application state is
initialized directly with an index over a temporary directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from bytestore.app import create_app
from bytestore.config import clear_settings_cache
from bytestore.core.state import init_app_state, reset_app_state
from bytestore.services.download_tokens import DownloadTokenRegistry
from tests.factories import create_config_yaml

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from bytestore.core.state import AppState
    from bytestore.services.container_index import ContainerIndex

# Small enough that tests can exceed it cheaply.
ROUTER_LIST_LIMIT = 5


@pytest.fixture
def app_state(
    index: ContainerIndex,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[AppState]:
    """Application state wired to a real index and token registry."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(create_config_yaml(index.root, ROUTER_LIST_LIMIT))
    monkeypatch.setenv("CONFIG_PATH", str(config_file))
    clear_settings_cache()

    state = init_app_state()
    state.container_index = index
    state.download_tokens = DownloadTokenRegistry()
    yield state
    reset_app_state()


@pytest.fixture
def client(app_state: AppState) -> TestClient:
    """Test client for the app; the lifespan is not entered."""
    return TestClient(create_app(), raise_server_exceptions=False)
