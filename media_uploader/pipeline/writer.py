"""Streams an upload body to disk and classifies write failures."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

import aiofiles

from media_uploader.errors import (
    UploadError,
    WriteIOError,
    WritePermissionError,
    WriteUnexpectedError,
)

try:
    import fcntl
except ImportError:  # Windows: no advisory locks, rely on the OS share mode
    fcntl = None

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


def _exclusive_opener(path: str, flags: int) -> int:
    """Open for writing, take an exclusive lock, then truncate.

    A file locked by another writer is never truncated; the second writer
    gets ``BlockingIOError`` instead.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0), 0o644)
    if fcntl is not None:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            os.close(fd)
            raise
    os.ftruncate(fd, 0)
    return fd


def classify_write_error(exc: Exception) -> UploadError:
    """Map a raw exception from the write stage to its typed failure."""
    if isinstance(exc, PermissionError):
        return WritePermissionError(str(exc))
    if isinstance(exc, OSError):
        return WriteIOError(str(exc))
    return WriteUnexpectedError(str(exc))


def _discard_partial(target: Path) -> None:
    try:
        os.remove(target)
        logger.info("Removed partial upload %s", target)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove partial upload %s: %s", target, exc)


async def save_stream(
    stream: Any,
    target: Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    fsync: bool = True,
    cleanup: bool = True,
) -> int:
    """Copy *stream* into *target* and return the number of bytes written.

    Raises ``WriteIOError``, ``WritePermissionError`` or
    ``WriteUnexpectedError``. The file handle is closed on every exit path,
    including cancellation. When *cleanup* is set, a file this call opened is
    removed again if the copy does not complete. The file is removed
    while its lock is still held.
    """
    written = 0
    try:
        async with aiofiles.open(target, "wb", opener=_exclusive_opener) as out:
            try:
                while True:
                    chunk = await stream.read(chunk_size)
                    if not chunk:
                        break
                    await out.write(chunk)
                    written += len(chunk)
                if fsync:
                    await out.flush()
                    await asyncio.to_thread(os.fsync, out.fileno())
            except BaseException:
                if cleanup:
                    _discard_partial(target)
                raise
    except asyncio.CancelledError:
        logger.warning("Upload to %s cancelled after %d bytes", target, written)
        raise
    except Exception as exc:
        raise classify_write_error(exc) from exc
    return written
