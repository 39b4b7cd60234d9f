"""Unit tests for container endpoints."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING
from unittest.mock import patch
from uuid import uuid4

import pytest

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from bytestore.services.container_index import ContainerIndex


@pytest.mark.unit
class TestListContainers:
    """Tests for GET /containers."""

    def test_empty(self, client: TestClient) -> None:
        """No containers yields an empty list."""
        response = client.get("/containers")

        assert response.status_code == 200
        assert response.json() == {"containers": []}

    def test_lists_identifiers(self, client: TestClient, index: ContainerIndex) -> None:
        """Identifiers come back in canonical text form."""
        ids = {str(index.get_or_create(uuid4()).id) for _ in range(3)}

        response = client.get("/containers")

        assert set(response.json()["containers"]) == ids

    def test_limit_parameter(self, client: TestClient, index: ContainerIndex) -> None:
        """The limit query parameter bounds the listing."""
        for _ in range(4):
            index.get_or_create(uuid4())

        response = client.get("/containers", params={"limit": 2})

        assert len(response.json()["containers"]) == 2

    def test_capped_at_configured_limit(self, client: TestClient, index: ContainerIndex) -> None:
        """Listings never exceed the configured maximum."""
        for _ in range(7):
            index.get_or_create(uuid4())

        assert len(client.get("/containers").json()["containers"]) == 5
        assert len(client.get("/containers", params={"limit": 100}).json()["containers"]) == 5

    def test_zero_limit_rejected(self, client: TestClient) -> None:
        """Limit must be positive."""
        response = client.get("/containers", params={"limit": 0})

        assert response.status_code == 422


@pytest.mark.unit
class TestDeleteContainer:
    """Tests for DELETE /containers/{container_id}."""

    def test_delete_returns_204(self, client: TestClient, index: ContainerIndex) -> None:
        """Deleting removes the container and its directory."""
        container = index.get_or_create(uuid4())
        container.add_object("a", "", io.BytesIO(b"x"))

        response = client.delete(f"/containers/{container.id}")

        assert response.status_code == 204
        assert index.get(container.id) is None
        assert not container.directory.exists()

    def test_delete_unknown_returns_404(self, client: TestClient) -> None:
        """Deleting an unknown container is not found."""
        response = client.delete(f"/containers/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "container_not_found"

    def test_delete_invalid_id_returns_400(self, client: TestClient) -> None:
        """Malformed identifiers are rejected."""
        response = client.delete("/containers/not-a-uuid")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "invalid_id"
        assert data["details"] == {"container_id": "not-a-uuid"}

    def test_delete_failure_returns_503(self, client: TestClient, index: ContainerIndex) -> None:
        """A failed directory removal is a storage error."""
        container = index.get_or_create(uuid4())

        with patch("shutil.rmtree", side_effect=PermissionError("denied")):
            response = client.delete(f"/containers/{container.id}")

        assert response.status_code == 503
        assert response.json()["error"] == "storage_remove_container_failed"
