"""Video Merge API - Working directory path utilities.

Assigns unique paths for uploads and merge output. Only ensure_dir
creates directories.
"""

from __future__ import annotations

import itertools
import logging
import time
from pathlib import Path, PurePosixPath, PureWindowsPath

from app.config import REMOTE_VIDEO_DIR
from app.errors import StorageError

logger = logging.getLogger(__name__)

# Process-wide sequence; keeps names distinct when two uploads share a timestamp
_upload_seq = itertools.count()

MERGED_OUTPUT_EXT = "mp4"


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Idempotent: an existing directory is not an error.

    Args:
        path: Directory to create.

    Returns:
        The directory as a Path.

    Raises:
        StorageError: If the directory cannot be created.
    """
    path = Path(path)
    if path.is_dir():
        return path
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot create directory {path}: {e}") from e
    logger.info("Created directory: %s", path)
    return path


def safe_filename(original_name: str) -> str:
    """Strip directory components from a client-supplied filename.

    Handles both POSIX and Windows separators. Falls back to "upload"
    when nothing usable remains.
    """
    name = PureWindowsPath(PurePosixPath(original_name).name).name
    name = name.strip()
    if name in ("", ".", ".."):
        return "upload"
    return name


def upload_path(upload_dir: str | Path, original_name: str) -> Path:
    """Get a fresh path for an incoming upload.

    Args:
        upload_dir: Working directory.
        original_name: Filename sent by the client.

    Returns:
        Path: {upload_dir}/{time_ns}-{seq}-{filename}
    """
    return Path(upload_dir) / f"{time.time_ns()}-{next(_upload_seq)}-{safe_filename(original_name)}"


def merge_output_path(upload_dir: str | Path, job_id: str) -> Path:
    """Get the merge output path for a job.

    Returns:
        Path: {upload_dir}/merged-{job_id}.mp4
    """
    return Path(upload_dir) / f"merged-{job_id}.{MERGED_OUTPUT_EXT}"


def remote_video_path(job_id: str, remote_dir: str = REMOTE_VIDEO_DIR) -> str:
    """Get the repository path a merged video is published at.

    Returns:
        str: videos/{job_id}.mp4
    """
    return f"{remote_dir}/{job_id}.{MERGED_OUTPUT_EXT}"
