"""Tests for the disk-backed object storage."""

import uuid

import pytest

from folio.services.storage import ObjectStorage, StorageError, detect_image_type, validate_image
from factories import JPEG_BYTES, PNG_BYTES


@pytest.fixture
def storage(tmp_path) -> ObjectStorage:
    return ObjectStorage(tmp_path, "/storage/", max_bytes=1024)


class TestImageValidation:
    def test_detects_png_and_jpeg(self):
        assert detect_image_type(PNG_BYTES) == "png"
        assert detect_image_type(JPEG_BYTES) == "jpeg"
        assert detect_image_type(b"not an image") is None

    def test_empty_file_is_rejected(self):
        with pytest.raises(StorageError) as exc_info:
            validate_image(b"", "image/png", 1024)
        assert exc_info.value.code == "invalid"

    def test_oversized_file_is_rejected(self):
        with pytest.raises(StorageError):
            validate_image(PNG_BYTES + b"\x00" * 2048, "image/png", 1024)

    def test_mismatched_content_type_is_rejected(self):
        with pytest.raises(StorageError):
            validate_image(PNG_BYTES, "image/gif", 1024)

    def test_jpg_alias_is_accepted(self):
        assert validate_image(JPEG_BYTES, "image/jpg", 1024).extension == ".jpg"


class TestObjectStorage:
    async def test_upload_writes_file_and_returns_public_url(self, storage, tmp_path):
        url = await storage.upload("avatars/a.png", PNG_BYTES)

        assert url == "/storage/avatars/a.png"
        assert (tmp_path / "avatars" / "a.png").read_bytes() == PNG_BYTES

    async def test_upload_image_names_object_after_owner(self, storage):
        owner = uuid.uuid4()

        url = await storage.upload_image("projects", owner, PNG_BYTES, "image/png")

        assert url.startswith(f"/storage/projects/{owner}-")
        assert url.endswith(".png")

    async def test_path_traversal_is_rejected(self, storage):
        with pytest.raises(StorageError):
            await storage.upload("../escape.png", PNG_BYTES)

    async def test_remove_deletes_issued_object(self, storage, tmp_path):
        url = await storage.upload("avatars/a.png", PNG_BYTES)

        assert await storage.remove(storage.path_from_url(url)) is True
        assert not (tmp_path / "avatars" / "a.png").exists()
        assert await storage.remove("avatars/a.png") is False

    def test_foreign_urls_have_no_object_path(self, storage):
        assert storage.path_from_url("https://cdn.example.com/a.png") is None
        assert storage.path_from_url(None) is None
