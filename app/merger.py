"""Video Merge API - ffmpeg merge executor.

Muxes a video file and an audio file into one MP4:
- video stream copied without re-encoding
- audio stream encoded to AAC
- experimental encoders permitted (-strict -2)
- only error-level diagnostics (-loglevel error)

The ffmpeg process exit is the single completion signal: exit code 0 is
success, anything else (or failing to launch) raises MergeError.

Dependencies:
- Requires ffmpeg installed and in PATH (or FFMPEG_BINARY)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from app.config import DEFAULT_FFMPEG_BINARY
from app.errors import MergeError

logger = logging.getLogger(__name__)

# Keep at most this much of ffmpeg's stderr in error messages
STDERR_TAIL_CHARS = 4000


def build_merge_command(
    video_path: str | Path,
    audio_path: str | Path,
    output_path: str | Path,
    ffmpeg_binary: str = DEFAULT_FFMPEG_BINARY,
) -> list[str]:
    """Build the ffmpeg argument list for a merge."""
    return [
        ffmpeg_binary,
        "-y",
        "-i",
        str(video_path),
        "-i",
        str(audio_path),
        "-c:v",
        "copy",
        "-c:a",
        "aac",
        "-strict",
        "-2",
        "-loglevel",
        "error",
        str(output_path),
    ]


def _stderr_tail(stderr: bytes | None) -> str:
    text = (stderr or b"").decode("utf-8", errors="replace").strip()
    return text[-STDERR_TAIL_CHARS:]


class FFmpegMerger:
    """Runs ffmpeg as a child process for each merge."""

    def __init__(self, ffmpeg_binary: str = DEFAULT_FFMPEG_BINARY):
        self.ffmpeg_binary = ffmpeg_binary

    async def merge(
        self,
        video_path: str | Path,
        audio_path: str | Path,
        output_path: str | Path,
    ) -> None:
        """Merge video and audio into output_path.

        Waits for ffmpeg to exit. No timeout and no retry: a failed merge
        is final for the request.

        Raises:
            MergeError: ffmpeg could not be started or exited non-zero.
        """
        cmd = build_merge_command(video_path, audio_path, output_path, self.ffmpeg_binary)
        logger.info("Starting video merge: %s + %s -> %s", video_path, audio_path, output_path)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            logger.error("ffmpeg not found: %s", self.ffmpeg_binary)
            raise MergeError(f"ffmpeg executable not found: {self.ffmpeg_binary}") from e
        except OSError as e:
            logger.error("Failed to launch ffmpeg: %s", e)
            raise MergeError(f"Failed to start ffmpeg: {e}") from e

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # ffmpeg must not outlive the request
            logger.warning("Merge cancelled, killing ffmpeg (pid %s)", proc.pid)
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            raise

        if proc.returncode != 0:
            detail = _stderr_tail(stderr) or f"ffmpeg exited with code {proc.returncode}"
            logger.error("Merge error (exit %s): %s", proc.returncode, detail)
            raise MergeError(detail)

        logger.info("Merge completed successfully: %s", output_path)


__all__ = [
    "STDERR_TAIL_CHARS",
    "build_merge_command",
    "FFmpegMerger",
]
