"""
Hometown Content Server — Upload Store
========================================

What:  Accepts image/audio uploads, enforces type and size limits, and writes
       them under the upload directory with generated names.
Who:   Called by the POST /api/upload route.
When:  Once per upload request; holds no per-request state.

Naming scheme:
    <millisecond-timestamp>-<random 0..10^9><original extension>
    e.g. 1717401234567-482913377.jpg

    Uniqueness is probabilistic: two uploads would have to land in the same
    millisecond AND draw the same random number to collide.

Validation order:
    1. Declared MIME type — rejected before a single byte is read
    2. Size — the stream is read in chunks and abandoned as soon as it
       exceeds the limit, so an oversized upload never reaches the disk
    3. Write — only fully validated content is written
"""

import logging
import os
import random
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
from fastapi import UploadFile

from hometown_server.exceptions import (
    FILE_TOO_LARGE,
    UNSUPPORTED_FILE_TYPE,
    FileStorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"

CHUNK_SIZE = 64 * 1024

_SAFE_EXTENSION = re.compile(r"\.[A-Za-z0-9]+")


def public_url(filename: str) -> str:
    return f"{PUBLIC_PREFIX}/{filename}"


@dataclass(frozen=True)
class StoredUpload:
    """Result of a successful upload."""

    filename: str
    path: Path
    size: int
    content_type: str

    @property
    def url(self) -> str:
        return public_url(self.filename)


class UploadStore:
    """
    Manages the upload directory.

    Directory Structure:
        uploads/
        ├── 1717401234567-482913377.jpg
        └── 1717401299012-5531.mp3

    Files are never updated or deleted by the service.
    """

    def __init__(
        self,
        upload_dir: Path,
        max_size: int,
        allowed_types: Iterable[str],
    ):
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size
        self.allowed_types = frozenset(allowed_types)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("UploadStore initialized with upload_dir=%s", self.upload_dir)

    def is_writable(self) -> bool:
        return self.upload_dir.is_dir() and os.access(self.upload_dir, os.W_OK)

    @staticmethod
    def generate_filename(original_name: Optional[str]) -> str:
        """
        Build `<ms>-<random><ext>` from the client's filename.

        Only the final suffix of the original name is kept, and only when it
        is purely alphanumeric; anything else yields a name without extension.
        """
        ext = Path(original_name or "").suffix
        if not _SAFE_EXTENSION.fullmatch(ext):
            ext = ""
        timestamp = int(time.time() * 1000)
        suffix = random.randint(0, 1_000_000_000)
        return f"{timestamp}-{suffix}{ext}"

    def validate_content_type(self, content_type: Optional[str]) -> str:
        """
        Check the declared MIME type against the allow-list.

        Raises:  ValidationError if the type is missing or not allowed.
        """
        if content_type not in self.allowed_types:
            raise ValidationError(
                message=UNSUPPORTED_FILE_TYPE,
                field="file",
                context={
                    "content_type": content_type,
                    "allowed": sorted(self.allowed_types),
                },
            )
        return content_type

    async def _read_bounded(self, upload: UploadFile) -> bytes:
        """
        Read the upload into memory, stopping once it exceeds max_size.

        Raises:  ValidationError as soon as the limit is crossed.
        """
        chunks = []
        total = 0
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if total > self.max_size:
                raise ValidationError(
                    message=FILE_TOO_LARGE,
                    field="file",
                    context={"max_size": self.max_size, "received_at_least": total},
                )
            chunks.append(chunk)
        return b"".join(chunks)

    async def _write(self, path: Path, content: bytes) -> None:
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            path.unlink(missing_ok=True)
            raise FileStorageError(
                context={"path": str(path), "os_error": str(e)},
            ) from e

    async def save(self, upload: UploadFile) -> StoredUpload:
        """
        Validate and persist one multipart file.

        Returns: StoredUpload with the generated filename and public URL.
        Raises:  ValidationError (type/size) or FileStorageError (disk).
        """
        content_type = self.validate_content_type(upload.content_type)
        content = await self._read_bounded(upload)

        filename = self.generate_filename(upload.filename)
        path = self.upload_dir / filename
        await self._write(path, content)

        logger.info(
            "Upload stored: %s (%d bytes, %s, original=%s)",
            filename,
            len(content),
            content_type,
            upload.filename or "unknown",
        )
        return StoredUpload(
            filename=filename,
            path=path,
            size=len(content),
            content_type=content_type,
        )
