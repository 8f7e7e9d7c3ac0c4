"""Local file storage for uploaded images.

Provides a minimal wrapper that writes uploads under a directory that the
application serves back at `/uploads`.
"""

from pathlib import Path
import logging
import os
import time
import uuid

import aiofiles
from fastapi import UploadFile

log = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class LocalStorage:
    """Thin client around a directory for put operations."""

    def __init__(self, root: str) -> None:
        """Bind to `root`, creating it if needed."""
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original: str | None) -> str:
        """Return a fresh file name keeping the extension of `original`."""
        ext = os.path.splitext(original or "")[1].lower()
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"

    async def put(self, upload: UploadFile) -> str:
        """Stream an upload to the storage directory.

        The write completes before this returns and is not rolled back if a
        later step of the request fails.

        Args:
            upload: The multipart file; its name supplies the extension.

        Returns:
            The generated file name (relative to the storage root).
        """
        name = self.generate_name(upload.filename)
        size = 0
        async with aiofiles.open(self.root / name, "wb") as fh:
            while chunk := await upload.read(CHUNK_SIZE):
                await fh.write(chunk)
                size += len(chunk)
        log.info("Stored upload %s (%d bytes)", name, size)
        return name
