"""Video Merge API - Upload file I/O.

Uploads are written with the atomic publish rule:
1. Write to temp path in same directory
2. Flush + best-effort fsync
3. Rename temp -> final

A stored path therefore either holds a complete upload or does not exist.
Partial writes, including ones aborted by the size ceiling, only ever
touch the temp file, which is removed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class FileTooLargeError(OSError):
    """Stream exceeded the allowed number of bytes."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"File exceeds {limit} bytes")


def _write_all(fd: int, data: bytes) -> None:
    """Write all bytes to a file descriptor, handling partial writes.

    Raises:
        OSError: If write fails or returns 0 bytes unexpectedly.
    """
    total_written = 0
    data_len = len(data)

    while total_written < data_len:
        try:
            written = os.write(fd, data[total_written:])
            if written == 0:
                raise OSError("os.write() returned 0 bytes unexpectedly")
            total_written += written
        except InterruptedError:
            continue


def stream_to_file(
    stream,
    final_path: str | Path,
    max_bytes: int | None = None,
    temp_suffix: str = TEMP_SUFFIX,
    chunk_size: int = 1024 * 1024,
) -> int:
    """Atomically write a stream to a file.

    Args:
        stream: File-like object with read() method.
        final_path: Target path for the output file.
        max_bytes: Abort once more than this many bytes have been read.
        temp_suffix: Suffix for the temporary file (default: ".tmp").
        chunk_size: Buffer size for reading (default: 1 MiB).

    Returns:
        Total bytes written.

    Raises:
        FileTooLargeError: If the stream is larger than max_bytes.
        OSError: If write or rename fails.
    """
    final_path = Path(final_path)
    temp_path = final_path.with_name(final_path.name + temp_suffix)

    total_bytes = 0
    fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            total_bytes += len(chunk)
            if max_bytes is not None and total_bytes > max_bytes:
                raise FileTooLargeError(max_bytes)
            _write_all(fd, chunk)

        os.fsync(fd)
    except OSError:
        os.close(fd)
        try:
            os.remove(temp_path)
        except OSError:
            pass
        raise
    else:
        os.close(fd)

    os.replace(temp_path, final_path)

    return total_bytes


def remove_quietly(path: str | Path | None) -> bool:
    """Delete a file, logging instead of raising on failure.

    Args:
        path: File to delete. None and missing files are no-ops.

    Returns:
        True if a file was removed.
    """
    if path is None:
        return False
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Failed to clean up %s: %s", path, e)
        return False
    logger.debug("Cleaned up %s", path)
    return True


def cleanup_orphan_temp_files(directory: str | Path, temp_suffix: str = TEMP_SUFFIX) -> int:
    """Clean up orphan temp files in a directory.

    Called during startup to remove uploads interrupted by a crash.

    Args:
        directory: Directory to scan for temp files.
        temp_suffix: Suffix pattern to match (default: ".tmp").

    Returns:
        Number of files removed.
    """
    directory = Path(directory)
    removed = 0

    if not directory.exists():
        return 0

    for temp_file in directory.glob(f"*{temp_suffix}"):
        try:
            temp_file.unlink()
            removed += 1
        except OSError:
            pass

    return removed
