"""Integration tests for file endpoints

The object store is replaced with an in-memory ObjectStoragePort so the
tests exercise key scoping without network access.
"""

from typing import Dict

import pytest

from micromeet.storage.dependencies import get_storage
from micromeet.storage.ports import ObjectStoragePort, StorageError

pytestmark = pytest.mark.integration

API = "/api/v1"


class InMemoryStorage(ObjectStoragePort):

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.broken = False

    def _check(self):
        if self.broken:
            raise StorageError("connection refused")

    def generate_upload_url(self, storage_key, content_type, expires_in_seconds=3600):
        self._check()
        return f"https://storage.test/{storage_key}?upload&expires={expires_in_seconds}"

    def generate_download_url(self, storage_key, expires_in_seconds=3600):
        self._check()
        if storage_key not in self.objects:
            raise FileNotFoundError(storage_key)
        return f"https://storage.test/{storage_key}?expires={expires_in_seconds}"

    def file_exists(self, storage_key):
        self._check()
        return storage_key in self.objects

    def delete_file(self, storage_key):
        self._check()
        return self.objects.pop(storage_key, None) is not None


@pytest.fixture
def storage(client):
    store = InMemoryStorage()
    client.app.dependency_overrides[get_storage] = lambda: store
    yield store
    client.app.dependency_overrides.pop(get_storage, None)


class TestFiles:

    def test_upload_url_is_scoped_to_org(self, client, owner, org, auth_headers, storage):
        response = client.post(f"{API}/files/upload-url", headers=auth_headers(owner), json={
            "filename": "Logo Perusahaan.PNG",
            "content_type": "image/png",
            "category": "logo",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["storage_key"].startswith(f"{org.id}/logo/")
        assert body["storage_key"].endswith(".png")
        assert body["upload_url"].startswith("https://storage.test/")
        assert body["expires_in"] == 3600

    def test_unknown_category(self, client, owner, auth_headers, storage):
        response = client.post(f"{API}/files/upload-url", headers=auth_headers(owner), json={
            "filename": "a.png",
            "content_type": "image/png",
            "category": "wallpaper",
        })
        assert response.status_code == 422

    def test_download_url(self, client, owner, org, auth_headers, storage):
        key = f"{org.id}/attachment/kontrak.pdf"
        storage.objects[key] = b"%PDF"

        response = client.get(f"{API}/files/url", headers=auth_headers(owner), params={"key": key})
        assert response.status_code == 200
        assert response.json()["url"].startswith(f"https://storage.test/{key}")

    def test_missing_file(self, client, owner, org, auth_headers, storage):
        response = client.get(
            f"{API}/files/url", headers=auth_headers(owner), params={"key": f"{org.id}/attachment/hilang.pdf"}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "File tidak ditemukan"

    def test_foreign_key_is_not_found(self, client, owner, other_org, auth_headers, storage):
        key = f"{other_org.id}/logo/rahasia.png"
        storage.objects[key] = b"png"

        download = client.get(f"{API}/files/url", headers=auth_headers(owner), params={"key": key})
        delete = client.delete(f"{API}/files", headers=auth_headers(owner), params={"key": key})

        assert download.status_code == 404
        assert delete.status_code == 404
        assert key in storage.objects

    @pytest.mark.parametrize("key", ["../etc/passwd", "{org}/../other/file.png", "{org}"])
    def test_malformed_keys(self, client, owner, org, auth_headers, storage, key):
        response = client.get(
            f"{API}/files/url", headers=auth_headers(owner), params={"key": key.format(org=org.id)}
        )
        assert response.status_code in (404, 422)

    def test_delete(self, client, owner, org, auth_headers, storage):
        key = f"{org.id}/stamp/cap.png"
        storage.objects[key] = b"png"

        assert client.delete(f"{API}/files", headers=auth_headers(owner), params={"key": key}).status_code == 204
        assert key not in storage.objects

    def test_storage_outage(self, client, owner, auth_headers, storage):
        storage.broken = True

        response = client.post(f"{API}/files/upload-url", headers=auth_headers(owner), json={
            "filename": "a.png",
            "content_type": "image/png",
        })
        assert response.status_code == 502
        assert response.json()["error"] == "external_service_failure"

    def test_requires_organization(self, client, make_user, auth_headers, storage):
        loner = make_user("loner@example.com")

        response = client.post(f"{API}/files/upload-url", headers=auth_headers(loner), json={
            "filename": "a.png",
            "content_type": "image/png",
        })
        assert response.status_code == 403
