"""Video Merge API - Error taxonomy.

Every failure inside a merge request is raised as a MergeApiError subclass.
The HTTP layer maps error codes to status codes.
"""

from __future__ import annotations

from enum import StrEnum


class MergeErrorCode(StrEnum):
    """Error codes for the merge request lifecycle."""

    AUTH_FAILED = "AUTH_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MERGE_FAILED = "MERGE_FAILED"
    PUBLISH_FAILED = "PUBLISH_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"


class MergeApiError(Exception):
    """Base exception for merge request errors."""

    def __init__(self, error_code: str, message: str):
        self.error_code = error_code
        self.message = message
        super().__init__(f"{error_code}: {message}")


class AuthError(MergeApiError):
    """Missing or incorrect shared secret."""

    def __init__(self, message: str = "Unauthorized - Invalid or missing API key"):
        super().__init__(MergeErrorCode.AUTH_FAILED, message)


class ValidationError(MergeApiError):
    """Rejected upload: missing field, wrong extension or oversized file."""

    def __init__(self, message: str):
        super().__init__(MergeErrorCode.VALIDATION_FAILED, message)


class MergeError(MergeApiError):
    """ffmpeg failed to produce the merged file.

    ``detail`` keeps the tool's own diagnostic text.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(MergeErrorCode.MERGE_FAILED, f"Video merge failed: {detail}")


class PublishError(MergeApiError):
    """The GitHub contents API call failed."""

    def __init__(self, detail: str, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(MergeErrorCode.PUBLISH_FAILED, f"Failed to publish to GitHub: {detail}")


class StorageError(MergeApiError):
    """Unrecoverable local filesystem failure."""

    def __init__(self, message: str):
        super().__init__(MergeErrorCode.STORAGE_FAILED, message)


__all__ = [
    "MergeErrorCode",
    "MergeApiError",
    "AuthError",
    "ValidationError",
    "MergeError",
    "PublishError",
    "StorageError",
]
