"""
Integration tests for the bytestore HTTP API.

Exercises full request flows against the real application and disk.
"""

from __future__ import annotations

import hashlib
import os
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


@pytest.mark.integration
class TestOperations:
    """Health and info on a started service."""

    def test_health_is_healthy(self, client: TestClient) -> None:
        """Startup leaves the service healthy."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_info_counts_follow_uploads(self, client: TestClient) -> None:
        """Info totals track the index."""
        container_id = uuid4()
        for i in range(3):
            client.post(
                f"/containers/{container_id}/objects", params={"name": f"f{i}"}, content=b"x"
            )

        storage = client.get("/info").json()["storage"]

        assert storage["container_count"] == 1
        assert storage["object_count"] == 3


@pytest.mark.integration
class TestObjectLifecycle:
    """Upload, read, list and delete through the API."""

    def test_upload_and_download(self, client: TestClient) -> None:
        """An uploaded document reads back with its metadata."""
        container_id = uuid4()

        created = client.post(
            f"/containers/{container_id}/objects",
            params={"name": "report.pdf", "tag": "v1"},
            content=b"%PDF-1.4 body",
        )
        assert created.status_code == 201
        object_id = created.json()["Id"]

        meta = client.get(f"/containers/{container_id}/objects/{object_id}").json()
        assert meta["FileName"] == "report.pdf"
        assert meta["Meta"] == "v1"
        assert meta["ContainerId"] == str(container_id)

        content = client.get(f"/containers/{container_id}/objects/{object_id}/content")
        assert content.content == b"%PDF-1.4 body"

        listed = client.get(f"/containers/{container_id}/objects").json()["objects"]
        assert listed == [object_id]
        assert str(container_id) in client.get("/containers").json()["containers"]

    def test_binary_payload_round_trip(self, client: TestClient) -> None:
        """Arbitrary bytes come back unchanged."""
        container_id = uuid4()
        payload = os.urandom(3 * 1024 * 1024 + 17)

        object_id = client.post(
            f"/containers/{container_id}/objects", params={"name": "blob"}, content=payload
        ).json()["Id"]
        content = client.get(f"/containers/{container_id}/objects/{object_id}/content").content

        assert hashlib.sha256(content).hexdigest() == hashlib.sha256(payload).hexdigest()

    def test_delete_object(self, client: TestClient) -> None:
        """Deleted objects disappear from listings and lookups."""
        container_id = uuid4()
        keep = client.post(
            f"/containers/{container_id}/objects", params={"name": "keep"}, content=b"1"
        ).json()["Id"]
        drop = client.post(
            f"/containers/{container_id}/objects", params={"name": "drop"}, content=b"2"
        ).json()["Id"]

        assert client.delete(f"/containers/{container_id}/objects/{drop}").status_code == 204

        assert client.get(f"/containers/{container_id}/objects").json()["objects"] == [keep]
        assert client.get(f"/containers/{container_id}/objects/{drop}").status_code == 404

    def test_delete_container(self, client: TestClient) -> None:
        """Deleting a container removes its objects; reuse starts empty."""
        container_id = uuid4()
        object_id = client.post(
            f"/containers/{container_id}/objects", params={"name": "a"}, content=b"x"
        ).json()["Id"]

        assert client.delete(f"/containers/{container_id}").status_code == 204
        assert client.get(f"/containers/{container_id}/objects").status_code == 404
        assert client.get("/containers").json()["containers"] == []

        client.post(f"/containers/{container_id}/objects", params={"name": "b"}, content=b"y")
        objects = client.get(f"/containers/{container_id}/objects").json()["objects"]
        assert object_id not in objects
        assert len(objects) == 1


@pytest.mark.integration
class TestDownloadTokens:
    """Token issue and redemption through the API."""

    def test_token_downloads_once(self, client: TestClient) -> None:
        """A token works exactly once."""
        container_id = uuid4()
        object_id = client.post(
            f"/containers/{container_id}/objects", params={"name": "a.txt"}, content=b"hello"
        ).json()["Id"]

        token = client.post(f"/containers/{container_id}/objects/{object_id}/tokens").json()[
            "token"
        ]

        first = client.get(f"/downloads/{token}")
        second = client.get(f"/downloads/{token}")

        assert first.status_code == 200
        assert first.content == b"hello"
        assert second.status_code == 404


@pytest.mark.integration
class TestErrors:
    """Error responses from the running service."""

    def test_invalid_id(self, client: TestClient) -> None:
        """Malformed identifiers return 400 with the standard error body."""
        response = client.get("/containers/xyz/objects")

        assert response.status_code == 400
        assert set(response.json()) == {"error", "message", "details"}

    def test_unknown_container(self, client: TestClient) -> None:
        """Unknown containers return 404."""
        response = client.get(f"/containers/{uuid4()}/objects/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "container_not_found"
