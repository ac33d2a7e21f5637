"""Object storage for interaction attachments."""
from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from urllib.parse import quote, urlencode

from rolodex.core.config import get_settings
from rolodex.core.errors import StorageError

FILES_ROUTE = "/api/v1/files"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    """Result of a successful upload."""

    path: str
    size: int
    content_type: str


class ObjectStorage(Protocol):
    """Operations the application needs from an object store."""

    async def upload(self, data: bytes, path: str, content_type: str) -> StoredObject: ...

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str: ...

    async def remove(self, path: str) -> None: ...

    def public_url(self, path: str) -> str: ...


class LocalObjectStorage:
    """Store objects on the local filesystem and hand out HMAC-signed URLs."""

    def __init__(self, root: Path, secret: str) -> None:
        self.root = root
        self._secret = secret.encode("utf-8")

    async def upload(self, data: bytes, path: str, content_type: str) -> StoredObject:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(_write_file, target, data)
        except OSError as exc:
            logger.error("Failed to store object", extra={"path": path}, exc_info=exc)
            raise StorageError(f"Failed to upload {path}") from exc
        return StoredObject(path=path, size=len(data), content_type=content_type)

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        if not await asyncio.to_thread(self.resolve(path).is_file):
            raise StorageError(f"Object {path} does not exist")
        expires = int(time.time()) + ttl_seconds
        query = urlencode({"expires": expires, "signature": self.sign(path, expires)})
        return f"{self.public_url(path)}?{query}"

    async def remove(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Failed to remove {path}") from exc

    def public_url(self, path: str) -> str:
        return f"{FILES_ROUTE}/{quote(path)}"

    def sign(self, path: str, expires: int) -> str:
        message = f"{path}:{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def verify(self, path: str, expires: int, signature: str) -> bool:
        if expires < int(time.time()):
            return False
        return hmac.compare_digest(self.sign(path, expires), signature)

    def resolve(self, path: str) -> Path:
        """Map an object path onto the storage root, refusing escapes."""

        root = self.root.resolve()
        target = (root / path).resolve()
        if target == root or root not in target.parents:
            raise StorageError(f"Invalid object path {path}")
        return target


def _write_file(target: Path, data: bytes) -> None:
    """Blocking write, run through ``asyncio.to_thread``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


def get_storage() -> LocalObjectStorage:
    """Return the configured object storage."""
    settings = get_settings()
    return LocalObjectStorage(Path(settings.storage_dir), settings.storage_secret)
