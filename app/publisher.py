"""Video Merge API - GitHub publisher.

Uploads a merged video to a GitHub repository with the contents API
(create-or-update file) and derives its GitHub Pages URL.

The public URL assumes the repository's default branch is served by
GitHub Pages at https://{owner}.github.io/{repo}/. Whether the file is
actually reachable there is not checked.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path

import httpx

from app.config import DEFAULT_BRANCH, GITHUB_API_URL
from app.errors import PublishError, StorageError
from app.models import PublishResult
from app.utils.paths import remote_video_path

logger = logging.getLogger(__name__)


def public_video_url(owner: str, repo: str, job_id: str) -> str:
    """GitHub Pages URL for a published video."""
    return f"https://{owner}.github.io/{repo}/{remote_video_path(job_id)}"


def _error_detail(response: httpx.Response) -> str:
    """Extract GitHub's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {response.status_code}: {body['message']}"
    return f"HTTP {response.status_code}"


class GitHubPublisher:
    """Publishes files to one repository and branch."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        branch: str = DEFAULT_BRANCH,
        api_url: str = GITHUB_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.branch = branch
        self.api_url = api_url
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def publish(self, output_path: str | Path, job_id: str) -> PublishResult:
        """Upload a merged video as videos/{job_id}.mp4.

        Args:
            output_path: Local merged file.
            job_id: Merge job ID; names the remote file.

        Returns:
            PublishResult with the repository path and public URL.

        Raises:
            StorageError: If the merged file cannot be read.
            PublishError: If the GitHub API call fails.
        """
        try:
            data = await asyncio.to_thread(Path(output_path).read_bytes)
        except OSError as e:
            raise StorageError(f"Failed to read merged file {output_path}: {e}") from e

        remote_path = remote_video_path(job_id)
        payload = {
            "message": f"Add merged video {job_id}",
            "content": base64.b64encode(data).decode("ascii"),
            "branch": self.branch,
        }
        url = f"/repos/{self.owner}/{self.repo}/contents/{remote_path}"

        logger.info("Uploading to GitHub: %s/%s:%s (%d bytes)", self.owner, self.repo, remote_path, len(data))
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                headers=self._headers(),
                transport=self._transport,
                timeout=None,
            ) as client:
                response = await client.put(url, json=payload)
        except httpx.HTTPError as e:
            logger.error("GitHub request failed: %s", e)
            raise PublishError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            detail = _error_detail(response)
            logger.error("GitHub upload rejected: %s", detail)
            raise PublishError(detail, status_code=response.status_code)

        return PublishResult(
            remote_path=remote_path,
            public_url=public_video_url(self.owner, self.repo, job_id),
        )


__all__ = [
    "public_video_url",
    "GitHubPublisher",
]
