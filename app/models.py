"""Video Merge API - Request-scoped data model.

Plain dataclasses; nothing here is persisted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class AssetRole(StrEnum):
    """Multipart field an uploaded file arrived in."""

    VIDEO = "video"
    AUDIO = "audio"


class PipelineState(StrEnum):
    """Lifecycle of a single merge request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    MERGING = "merging"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadedAsset:
    """An upload stored in the working directory for the current request."""

    role: AssetRole
    stored_path: Path
    original_name: str
    size_bytes: int


@dataclass(frozen=True)
class MergeJob:
    """One merge of a video asset with an audio asset."""

    id: str
    video_path: Path
    audio_path: Path
    output_path: Path


@dataclass(frozen=True)
class PublishResult:
    """Location of a published video."""

    remote_path: str
    public_url: str


def generate_job_id() -> str:
    """Generate a unique job ID.

    Uses UUID4 in canonical hyphenated form; it becomes part of the
    published file name.
    """
    return str(uuid.uuid4())


__all__ = [
    "AssetRole",
    "PipelineState",
    "UploadedAsset",
    "MergeJob",
    "PublishResult",
    "generate_job_id",
]
