"""Video Merge API - Utility modules."""

from app.utils.atomic_io import (
    FileTooLargeError,
    cleanup_orphan_temp_files,
    remove_quietly,
    stream_to_file,
)
from app.utils.paths import (
    ensure_dir,
    merge_output_path,
    remote_video_path,
    safe_filename,
    upload_path,
)

__all__ = [
    # atomic_io
    "FileTooLargeError",
    "stream_to_file",
    "remove_quietly",
    "cleanup_orphan_temp_files",
    # paths
    "ensure_dir",
    "safe_filename",
    "upload_path",
    "merge_output_path",
    "remote_video_path",
]
