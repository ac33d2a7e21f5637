"""Download route for signed attachment URLs."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from rolodex.core.errors import StorageError
from rolodex.core.storage import LocalObjectStorage, get_storage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{object_path:path}")
async def download_file(
    object_path: str,
    expires: int,
    signature: str,
    storage: LocalObjectStorage = Depends(get_storage),
) -> FileResponse:
    """Serve a stored object when the signature is valid and unexpired."""

    if not storage.verify(object_path, expires, signature):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired signature"
        )
    try:
        target = storage.resolve(object_path)
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from exc
    if not target.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(target, filename=target.name)
