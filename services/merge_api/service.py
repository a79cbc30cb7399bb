"""Video Merge API - Merge request orchestration.

Sequences one request through the pipeline:
    received -> validated -> merging -> publishing -> done
with a terminal "failed" state reachable from every step.

Cleanup of every stored upload and the merge output runs on all paths,
success or failure. Each file is removed independently; cleanup failures
are logged and never reach the caller.

No retries, no timeouts: every failure is final for the request.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from app.errors import MergeApiError
from app.ingress import UploadLike, check_api_key, select_single_upload, store_upload
from app.merger import FFmpegMerger
from app.models import AssetRole, MergeJob, PipelineState, PublishResult, UploadedAsset, generate_job_id
from app.publisher import GitHubPublisher
from app.utils.atomic_io import remove_quietly
from app.utils.paths import ensure_dir, merge_output_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.config import MergeConfig

logger = logging.getLogger(__name__)


class Merger(Protocol):
    """Muxes a video and an audio file into output_path."""

    async def merge(self, video_path: Path, audio_path: Path, output_path: Path) -> None: ...


class Publisher(Protocol):
    """Publishes a merged file under a job ID."""

    async def publish(self, output_path: Path, job_id: str) -> PublishResult: ...


class MergeRequest:
    """Per-request state: assets and files to clean up."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        self.state = PipelineState.RECEIVED
        self.assets: list[UploadedAsset] = []
        self.output_path: Path | None = None

    def transition(self, state: PipelineState) -> None:
        logger.info("Job %s: %s -> %s", self.job_id, self.state, state)
        self.state = state

    def temp_paths(self) -> list[Path]:
        paths = [asset.stored_path for asset in self.assets]
        if self.output_path is not None:
            paths.append(self.output_path)
        return paths


class MergePipeline:
    """Upload -> merge -> publish, with guaranteed cleanup."""

    def __init__(self, config: MergeConfig, merger: Merger, publisher: Publisher):
        self.config = config
        self.merger = merger
        self.publisher = publisher

    @classmethod
    def from_config(cls, config: MergeConfig) -> MergePipeline:
        """Build a pipeline wired to ffmpeg and GitHub."""
        return cls(
            config=config,
            merger=FFmpegMerger(config.ffmpeg_binary),
            publisher=GitHubPublisher(
                owner=config.github_owner,
                repo=config.github_repo,
                token=config.github_token,
                branch=config.branch,
                api_url=config.github_api_url,
            ),
        )

    async def run(
        self,
        api_key: str | None,
        video_uploads: Sequence[UploadLike] | None,
        audio_uploads: Sequence[UploadLike] | None,
    ) -> PublishResult:
        """Handle one merge request.

        Args:
            api_key: Value of the x-api-key header.
            video_uploads: Files sent in the "video" field.
            audio_uploads: Files sent in the "audio" field.

        Returns:
            PublishResult for the published video.

        Raises:
            AuthError: Missing or wrong API key (nothing is written).
            ValidationError: Missing field, bad extension or oversized file.
            MergeError: ffmpeg failed; nothing is published.
            PublishError: GitHub rejected the upload or was unreachable.
            StorageError: Local filesystem failure.
        """
        request = MergeRequest(generate_job_id())
        try:
            check_api_key(api_key, self.config.api_secret_key)
            upload_dir = ensure_dir(self.config.upload_dir)

            for role, uploads in (
                (AssetRole.VIDEO, video_uploads),
                (AssetRole.AUDIO, audio_uploads),
            ):
                upload = select_single_upload(role, uploads)
                request.assets.append(
                    store_upload(role, upload, upload_dir, self.config.max_upload_bytes)
                )
            video, audio = request.assets
            request.transition(PipelineState.VALIDATED)

            job = MergeJob(
                id=request.job_id,
                video_path=video.stored_path,
                audio_path=audio.stored_path,
                output_path=merge_output_path(upload_dir, request.job_id),
            )
            request.output_path = job.output_path

            request.transition(PipelineState.MERGING)
            await self.merger.merge(job.video_path, job.audio_path, job.output_path)

            request.transition(PipelineState.PUBLISHING)
            result = await self.publisher.publish(job.output_path, job.id)

            request.transition(PipelineState.DONE)
            logger.info("Job %s published at %s", job.id, result.public_url)
            return result
        except MergeApiError as e:
            logger.warning("Job %s failed in %s: %s", request.job_id, request.state, e.message)
            request.transition(PipelineState.FAILED)
            raise
        except Exception:
            logger.error("Job %s failed unexpectedly in %s", request.job_id, request.state)
            request.transition(PipelineState.FAILED)
            raise
        finally:
            _cleanup(request)


def _cleanup(request: MergeRequest) -> None:
    """Remove every temporary file of a request, best-effort."""
    removed = 0
    for path in request.temp_paths():
        if remove_quietly(path):
            removed += 1
    if removed:
        logger.info("Job %s: temporary files cleaned up (%d)", request.job_id, removed)
