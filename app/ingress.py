"""Video Merge API - Ingress validation.

Gates requests by the shared-secret header and validates uploads per role
before they are written to the working directory:
- exactly one file per role (video, audio)
- extension allow-list per role
- per-file size ceiling, enforced while streaming to disk
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol

from app.errors import AuthError, StorageError, ValidationError
from app.models import AssetRole, UploadedAsset
from app.utils.atomic_io import FileTooLargeError, stream_to_file
from app.utils.paths import upload_path

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Allowed extensions per role (lowercase, without leading dot)
ALLOWED_EXTENSIONS: dict[AssetRole, tuple[str, ...]] = {
    AssetRole.VIDEO: ("mp4", "mov", "avi", "m4s"),
    AssetRole.AUDIO: ("mp3", "wav", "m4a", "m4s"),
}


class UploadLike(Protocol):
    """The parts of an uploaded multipart file the validator reads."""

    filename: str | None
    file: BinaryIO


def check_api_key(provided: str | None, expected: str) -> None:
    """Compare the request's shared secret with the configured one.

    Raises:
        AuthError: If the key is missing, wrong, or no key is configured.
    """
    if not provided or not expected:
        raise AuthError()
    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError()


def extension_of(filename: str) -> str:
    """Lowercase extension without dot, or "" if there is none."""
    return Path(filename).suffix.lower().lstrip(".")


def validate_extension(role: AssetRole, filename: str) -> None:
    """Check a filename against the allow-list for its role.

    Raises:
        ValidationError: If the extension is not allowed for the role.
    """
    allowed = ALLOWED_EXTENSIONS[role]
    if extension_of(filename) not in allowed:
        raise ValidationError(f"Only {role.value} files ({', '.join(allowed)}) are allowed!")


def select_single_upload(role: AssetRole, uploads: Sequence[UploadLike] | None) -> UploadLike:
    """Pick the one file sent for a role.

    Raises:
        ValidationError: If no file or more than one file was sent.
    """
    if not uploads:
        raise ValidationError(f"Missing required file field: {role.value}")
    if len(uploads) > 1:
        raise ValidationError(f"Only one {role.value} file is allowed")
    return uploads[0]


def store_upload(
    role: AssetRole,
    upload: UploadLike,
    upload_dir: str | Path,
    max_bytes: int,
) -> UploadedAsset:
    """Validate an upload and write it to the working directory.

    Args:
        role: Field the file arrived in.
        upload: The uploaded file.
        upload_dir: Working directory (must exist).
        max_bytes: Per-file size ceiling.

    Returns:
        UploadedAsset describing the stored file.

    Raises:
        ValidationError: Bad extension or file larger than max_bytes.
        StorageError: If the file cannot be written.
    """
    original_name = upload.filename or ""
    validate_extension(role, original_name)

    dest_path = upload_path(upload_dir, original_name)
    try:
        size_bytes = stream_to_file(upload.file, dest_path, max_bytes=max_bytes)
    except FileTooLargeError as e:
        limit_mib = e.limit / (1024 * 1024)
        raise ValidationError(
            f"File too large: {role.value} exceeds the {limit_mib:g} MiB limit"
        ) from e
    except OSError as e:
        raise StorageError(f"Failed to store {role.value} upload: {e}") from e

    logger.info("Stored %s upload %s (%d bytes) at %s", role.value, original_name, size_bytes, dest_path)
    return UploadedAsset(
        role=role,
        stored_path=dest_path,
        original_name=original_name,
        size_bytes=size_bytes,
    )


__all__ = [
    "ALLOWED_EXTENSIONS",
    "UploadLike",
    "check_api_key",
    "extension_of",
    "validate_extension",
    "select_single_upload",
    "store_upload",
]
