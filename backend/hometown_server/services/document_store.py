"""
Hometown Content Server — Document Store
==========================================

What:  Reads and replaces the single JSON content document (data.json).
Who:   Called by GET /api/data and POST /api/data.

Document shape:
    {
        "hometowns":  [...],   ─┐
        "banner":     {...},    │ required, opaque to the server
        "audioStory": {...},    │
        "products":   [...],   ─┘
        ...                      any other keys are kept as-is
    }

Write path:
    validate → serialize (2-space indent) → write <name>.tmp → os.replace

    Writes are serialized by an asyncio.Lock so two in-flight saves cannot
    interleave their temp files. The replace is atomic on POSIX, so readers
    see either the old or the new document, never a truncated one. Concurrent
    saves still race logically: the last one to take the lock wins.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Tuple

import aiofiles

from hometown_server.exceptions import (
    DocumentReadError,
    DocumentWriteError,
    ValidationError,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: Tuple[str, ...] = ("hometowns", "banner", "audioStory", "products")


def _is_present(value: Any) -> bool:
    # Empty arrays and objects count as present; null, false, 0 and "" do not.
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON, even though the json module accepts them.
    raise ValueError(f"invalid JSON constant {name}")


class DocumentStore:
    """Last-writer-wins store for one JSON document at a fixed path."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    async def read(self) -> Any:
        """
        Load and parse the document.

        Returns: The parsed JSON value, unmodified.
        Raises:  DocumentReadError if the file is missing, unreadable or invalid
                 (NaN and Infinity literals included).
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            return json.loads(raw, parse_constant=_reject_constant)
        except (OSError, ValueError) as e:
            logger.error("Failed to read content document %s: %s", self.path, str(e))
            raise DocumentReadError(
                context={"path": str(self.path), "error": str(e)},
            ) from e

    @staticmethod
    def validate(payload: Any) -> None:
        """
        Check that the payload is an object carrying every required field.

        Raises:  ValidationError naming the missing fields (in context only).
        """
        if not isinstance(payload, dict):
            raise ValidationError(
                context={"received_type": type(payload).__name__},
            )
        missing = [key for key in REQUIRED_FIELDS if not _is_present(payload.get(key))]
        if missing:
            raise ValidationError(context={"missing": missing})

    async def write(self, payload: Any) -> None:
        """
        Validate and replace the document in full.

        Raises:  ValidationError (nothing written, also for NaN or Infinity
                 values) or DocumentWriteError.
        """
        self.validate(payload)

        try:
            text = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise ValidationError(context={"error": str(e)}) from e
        except TypeError as e:
            raise DocumentWriteError(context={"error": str(e)}) from e

        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        async with self._write_lock:
            try:
                async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                    await f.write(text)
                os.replace(tmp_path, self.path)
            except OSError as e:
                logger.error("Failed to save content document %s: %s", self.path, str(e))
                tmp_path.unlink(missing_ok=True)
                raise DocumentWriteError(
                    context={"path": str(self.path), "os_error": str(e)},
                ) from e

        logger.info(
            "Content document saved to %s (%d bytes)",
            self.path.name,
            len(text.encode("utf-8")),
        )

    def is_readable(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)
