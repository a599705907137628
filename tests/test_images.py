"""
Tests for the image registry and the local blob store.
"""

import hashlib
import os

import pytest

from glimpse.crud.images import ImagesCRUD
from glimpse.errors import StorageUnavailable
from glimpse.storage import LocalBlobStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "media"), "/media/")


@pytest.fixture
def images(db, users, blob_store, clock):
    return ImagesCRUD(db, blob_store=blob_store, clock=clock)


class TestLocalBlobStore:
    def test_store_is_content_addressed(self, blob_store, tmp_path):
        locator = blob_store.store_blob(PNG_BYTES)

        assert locator == hashlib.sha256(PNG_BYTES).hexdigest()
        path = tmp_path / "media" / locator[:2] / locator
        assert path.read_bytes() == PNG_BYTES

    def test_same_bytes_same_locator(self, blob_store):
        assert blob_store.store_blob(PNG_BYTES) == blob_store.store_blob(PNG_BYTES)

    def test_url_for(self, blob_store):
        assert blob_store.url_for("abcdef") == "/media/ab/abcdef"

    def test_unwritable_root_raises_storage_unavailable(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_bytes(b"")
        store = LocalBlobStore(str(blocker))

        with pytest.raises(StorageUnavailable):
            store.store_blob(PNG_BYTES)


class TestImageRegistry:
    def test_register_image_records_metadata(self, images, clock):
        image = images.register_image("alice", "loc-1", {
            "url": "/media/lo/loc-1",
            "mime_type": "image/png",
            "size_bytes": 40,
            "width": 4,
            "height": 3,
        })

        assert image.id
        assert image.owner_id == "alice"
        assert image.storage_locator == "loc-1"
        assert image.width == 4 and image.height == 3
        assert image.created_at == clock()

    def test_register_requires_locator(self, images):
        with pytest.raises(ValueError):
            images.register_image("alice", "", {"url": "/media/x", "mime_type": "image/png"})

    def test_upload_stores_blob_then_registers(self, images, blob_store):
        image = images.upload_image("alice", PNG_BYTES, filename="cat.png", mime_type="image/png")

        locator = hashlib.sha256(PNG_BYTES).hexdigest()
        assert image.storage_locator == locator
        assert image.url == blob_store.url_for(locator)
        assert image.size_bytes == len(PNG_BYTES)
        assert image.filename == "cat.png"

    def test_same_bytes_twice_are_two_images(self, images):
        first = images.upload_image("alice", PNG_BYTES, filename=None, mime_type="image/png")
        second = images.upload_image("bob", PNG_BYTES, filename=None, mime_type="image/png")

        assert first.id != second.id
        assert first.storage_locator == second.storage_locator

    def test_list_user_images_only_returns_own(self, images, clock):
        images.upload_image("alice", PNG_BYTES, filename="a.png", mime_type="image/png")
        clock.advance(1)
        images.upload_image("alice", PNG_BYTES + b"1", filename="b.png", mime_type="image/png")
        images.upload_image("bob", PNG_BYTES, filename="c.png", mime_type="image/png")

        listed = images.list_user_images("alice")

        assert [i.filename for i in listed] == ["b.png", "a.png"]

    def test_soft_delete_hides_image_but_keeps_blob(self, images, blob_store, tmp_path):
        image = images.upload_image("alice", PNG_BYTES, filename=None, mime_type="image/png")

        assert images.soft_delete_image(image) is True
        assert images.soft_delete_image(image) is False
        assert images.get_image(image.id) is None
        assert os.path.exists(tmp_path / "media" / image.storage_locator[:2] / image.storage_locator)


class TestImageRoutes:
    def _upload(self, client, headers, data=PNG_BYTES, content_type="image/png"):
        return client.post(
            "/images/upload",
            files={"image": ("photo.png", data, content_type)},
            data={"width": "8", "height": "6"},
            headers=headers,
        )

    def test_upload_and_fetch(self, client, as_user):
        response = self._upload(client, as_user("alice"))
        assert response.status_code == 201
        body = response.json()
        assert body["owner_id"] == "alice"
        assert body["mime_type"] == "image/png"
        assert body["width"] == 8
        assert body["url"].startswith("/media/")

        blob = client.get(body["url"])
        assert blob.status_code == 200
        assert blob.content == PNG_BYTES

        response = client.get(f"/images/{body['id']}", headers=as_user("alice"))
        assert response.status_code == 200
        assert client.get("/images", headers=as_user("alice")).json()["total_count"] == 1

    def test_unsupported_type_is_rejected(self, client, as_user):
        response = self._upload(client, as_user("alice"), data=b"hello", content_type="text/plain")

        assert response.status_code == 415

    def test_empty_file_is_rejected(self, client, as_user):
        response = self._upload(client, as_user("alice"), data=b"")

        assert response.status_code == 422

    def test_other_users_image_is_hidden(self, client, as_user):
        image_id = self._upload(client, as_user("alice")).json()["id"]

        assert client.get(f"/images/{image_id}", headers=as_user("bob")).status_code == 404
        assert client.delete(f"/images/{image_id}", headers=as_user("bob")).status_code == 404

    def test_delete_image(self, client, as_user):
        image_id = self._upload(client, as_user("alice")).json()["id"]

        response = client.delete(f"/images/{image_id}", headers=as_user("alice"))

        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert client.get(f"/images/{image_id}", headers=as_user("alice")).status_code == 404
