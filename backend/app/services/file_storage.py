"""
Upload storage on the local filesystem.

Documents and profile pictures are written under ``settings.upload_dir`` with
a generated name; only that relative name is kept in the database. The same
directory is mounted at ``/uploads`` for static serving.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Set

import aiofiles
from fastapi import HTTPException, UploadFile

from app.config.settings import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class FileStorage:
    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.upload_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, stored_name: str) -> Path:
        """Absolute path of a stored file; refuses names that escape the root."""
        path = (self.root / stored_name).resolve()
        if self.root not in path.parents:
            raise HTTPException(status_code=404, detail="File not found")
        return path

    def _unique_name(self, original_name: str) -> str:
        suffix = Path(original_name).suffix.lower()
        return f"{uuid.uuid4().hex}{suffix}"

    async def save(
        self, upload: UploadFile, allowed_extensions: Optional[Set[str]] = None
    ) -> str:
        """
        Stream an upload to disk and return its stored name.

        Raises 400 for a missing file, a disallowed extension, or a body larger
        than ``settings.max_upload_bytes``.
        """
        if not upload or not upload.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")

        extension = Path(upload.filename).suffix.lower()
        if allowed_extensions is not None and extension not in allowed_extensions:
            raise HTTPException(
                status_code=400,
                detail=f"File type '{extension or 'none'}' is not allowed",
            )

        stored_name = self._unique_name(upload.filename)
        destination = self.root / stored_name
        written = 0
        try:
            async with aiofiles.open(destination, "wb") as out:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > settings.max_upload_bytes:
                        raise HTTPException(status_code=400, detail="File too large")
                    await out.write(chunk)
        except HTTPException:
            await self.remove(stored_name)
            raise
        except OSError as e:
            logger.error(f"Failed to store upload {upload.filename!r}: {e}", exc_info=True)
            await self.remove(stored_name)
            raise HTTPException(status_code=500, detail="Could not store file")

        logger.info(f"Stored upload {upload.filename!r} as {stored_name} ({written} bytes)")
        return stored_name

    async def remove(self, stored_name: str) -> None:
        path = self.root / stored_name
        if path.exists():
            os.remove(path)
            logger.debug(f"Removed stored file {stored_name}")

    def exists(self, stored_name: Optional[str]) -> bool:
        return bool(stored_name) and self.path_for(stored_name).is_file()


def get_file_storage() -> FileStorage:
    """Dependency; tests override it to point at a temporary directory."""
    return FileStorage()
