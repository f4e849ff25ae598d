"""Object storage for avatars and project images.

Files live on local disk under a configurable root and are served by the API
under a public URL prefix. ``upload`` returns that public URL.
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

logger = logging.getLogger(__name__)

IMAGE_TYPE_TO_MIME = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}
IMAGE_TYPE_TO_EXTENSION = {
    "png": ".png",
    "jpeg": ".jpg",
    "gif": ".gif",
    "webp": ".webp",
}
CONTENT_TYPE_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}


class StorageError(Exception):
    """Upload rejected (``invalid``) or not written (``write_failed``)."""

    def __init__(self, message: str, *, code: str = "write_failed"):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass(frozen=True)
class ImageInfo:
    image_type: str
    mime_type: str
    extension: str


def detect_image_type(data: bytes) -> str | None:
    if len(data) >= 8 and data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if len(data) >= 3 and data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if len(data) >= 6 and data[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    return None


def validate_image(data: bytes, content_type: str | None, max_bytes: int) -> ImageInfo:
    """Check an uploaded image's size, magic number and declared type."""
    if not data:
        raise StorageError("File is empty.", code="invalid")
    if len(data) > max_bytes:
        raise StorageError(f"File exceeds {max_bytes // (1024 * 1024)} MiB.", code="invalid")

    image_type = detect_image_type(data)
    if image_type is None:
        raise StorageError("Unsupported image type.", code="invalid")

    expected_mime = IMAGE_TYPE_TO_MIME[image_type]
    if content_type:
        normalized = CONTENT_TYPE_ALIASES.get(content_type.strip().lower(), content_type.strip().lower())
        if normalized != expected_mime and normalized != "application/octet-stream":
            raise StorageError("Content type does not match image data.", code="invalid")

    return ImageInfo(image_type, expected_mime, IMAGE_TYPE_TO_EXTENSION[image_type])


def object_path(folder: str, user_id: UUID, extension: str) -> str:
    """Unique object path such as ``avatars/<user id>-<random>.png``."""
    return f"{folder}/{user_id}-{secrets.token_hex(8)}{extension}"


class ObjectStorage:
    """Disk-backed object store with public URLs."""

    def __init__(self, root: str | Path, public_prefix: str, max_bytes: int):
        self.root = Path(root).expanduser().resolve()
        self.public_prefix = public_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            raise StorageError("Invalid object path.", code="invalid")
        return target

    def public_url(self, path: str) -> str:
        return f"{self.public_prefix}/{path.lstrip('/')}"

    def path_from_url(self, url: str | None) -> str | None:
        """Object path for a URL this store issued, else None."""
        prefix = f"{self.public_prefix}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    async def upload(self, path: str, data: bytes) -> str:
        """Write ``data`` at ``path`` and return its public URL."""
        target = self._resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            logger.exception("Failed to store object %s", path)
            raise StorageError("Failed to store file.") from exc
        return self.public_url(path)

    async def upload_image(self, folder: str, user_id: UUID, data: bytes, content_type: str | None) -> str:
        info = validate_image(data, content_type, self.max_bytes)
        return await self.upload(object_path(folder, user_id, info.extension), data)

    async def remove(self, path: str) -> bool:
        target = self._resolve(path)

        def _unlink() -> bool:
            if not target.exists():
                return False
            target.unlink()
            return True

        try:
            return await asyncio.to_thread(_unlink)
        except OSError:
            logger.warning("Failed to remove object %s", path)
            return False
