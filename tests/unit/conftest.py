"""
Shared fixtures for unit tests.

Provides test isolation fixtures to ensure clean state between tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from bytestore.config import clear_settings_cache
from tests.factories import create_index

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from bytestore.services.container import Container
    from bytestore.services.container_index import ContainerIndex


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    """
    Ensure settings cache is cleared before and after each test.

    This prevents test pollution where one test's configuration
    affects another test's behavior.
    """
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """Object store root inside the test's temporary directory."""
    return tmp_path / "containers"


@pytest.fixture
def index(store_root: Path) -> ContainerIndex:
    """Empty container index over store_root."""
    return create_index(store_root)


@pytest.fixture
def container(index: ContainerIndex) -> Container:
    """A freshly created, empty container."""
    return index.get_or_create(uuid4())
