"""Video Merge API - Configuration.

Module-level defaults plus an immutable MergeConfig read from the
environment once at startup. No external config libraries.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Repository root (parent of app/)
REPO_ROOT = Path(__file__).parent.parent.resolve()

# Working directory for uploads and merge output
DEFAULT_UPLOAD_DIR = REPO_ROOT / "uploads"

DEFAULT_PORT = 8080

# Per-file upload ceiling: 150 MiB
DEFAULT_MAX_UPLOAD_BYTES = 150 * 1024 * 1024

DEFAULT_BRANCH = "main"

DEFAULT_FFMPEG_BINARY = "ffmpeg"

GITHUB_API_URL = "https://api.github.com"

# Remote directory for published videos
REMOTE_VIDEO_DIR = "videos"


def _get_positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset or invalid.

    Returns:
        The parsed integer, or default.
    """
    env_val = os.environ.get(name)
    if env_val:
        try:
            value = int(env_val)
            if value > 0:
                return value
        except ValueError:
            pass
    return default


@dataclass(frozen=True)
class MergeConfig:
    """Runtime configuration passed explicitly into the merge pipeline."""

    github_owner: str = ""
    github_repo: str = ""
    github_token: str = ""
    api_secret_key: str = ""
    port: int = DEFAULT_PORT
    branch: str = DEFAULT_BRANCH
    upload_dir: Path = DEFAULT_UPLOAD_DIR
    ffmpeg_binary: str = DEFAULT_FFMPEG_BINARY
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    github_api_url: str = GITHUB_API_URL

    @classmethod
    def from_env(cls) -> MergeConfig:
        """Build configuration from environment variables."""
        return cls(
            github_owner=os.environ.get("GITHUB_USER", ""),
            github_repo=os.environ.get("GITHUB_REPO", ""),
            github_token=os.environ.get("GITHUB_TOKEN", ""),
            api_secret_key=os.environ.get("API_SECRET_KEY", ""),
            port=_get_positive_int("PORT", DEFAULT_PORT),
            branch=os.environ.get("GITHUB_BRANCH") or DEFAULT_BRANCH,
            upload_dir=Path(os.environ.get("UPLOAD_DIR") or DEFAULT_UPLOAD_DIR),
            ffmpeg_binary=os.environ.get("FFMPEG_BINARY") or DEFAULT_FFMPEG_BINARY,
            max_upload_bytes=_get_positive_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        )

    def presence_summary(self) -> dict[str, str]:
        """Report which credentials are configured without exposing values."""
        return {
            "GITHUB_USER": "Set" if self.github_owner else "Not Set",
            "GITHUB_REPO": "Set" if self.github_repo else "Not Set",
            "API_SECRET_KEY": "Set" if self.api_secret_key else "Not Set",
            "GITHUB_TOKEN": "Set" if self.github_token else "Not Set",
        }
