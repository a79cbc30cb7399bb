"""Shared pytest fixtures for Video Merge API tests.

ffmpeg and GitHub are replaced by in-process fakes; the pipeline and the
FastAPI app are otherwise real.
"""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import MergeConfig
from app.models import PublishResult
from app.publisher import public_video_url
from app.utils.paths import remote_video_path
from services.merge_api.main import app, get_pipeline
from services.merge_api.service import MergePipeline

API_KEY = "test-secret"


class FakeMerger:
    """Records merge calls and writes a fake output file, or fails."""

    def __init__(self):
        self.calls = []
        self.error = None

    async def merge(self, video_path, audio_path, output_path):
        self.calls.append((Path(video_path), Path(audio_path), Path(output_path)))
        if self.error is not None:
            raise self.error
        Path(output_path).write_bytes(b"merged:" + Path(video_path).read_bytes())


class FakePublisher:
    """Records publish calls and returns a Pages URL, or fails."""

    def __init__(self, owner="octo", repo="clips"):
        self.owner = owner
        self.repo = repo
        self.calls = []
        self.error = None

    async def publish(self, output_path, job_id):
        self.calls.append((Path(output_path), job_id, Path(output_path).read_bytes()))
        if self.error is not None:
            raise self.error
        return PublishResult(
            remote_path=remote_video_path(job_id),
            public_url=public_video_url(self.owner, self.repo, job_id),
        )


@pytest.fixture
def upload_dir():
    """Temporary working directory for uploads and merge output."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "uploads"


@pytest.fixture
def merge_config(upload_dir):
    return MergeConfig(
        github_owner="octo",
        github_repo="clips",
        github_token="ghp_test",
        api_secret_key=API_KEY,
        upload_dir=upload_dir,
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture
def fake_merger():
    return FakeMerger()


@pytest.fixture
def fake_publisher():
    return FakePublisher()


@pytest.fixture
def pipeline(merge_config, fake_merger, fake_publisher):
    return MergePipeline(merge_config, fake_merger, fake_publisher)


@pytest.fixture
def client(pipeline, upload_dir, monkeypatch):
    """FastAPI test client wired to the fake pipeline.

    The dependency override is cleared after the test completes.
    """
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    app.dependency_overrides[get_pipeline] = lambda: pipeline

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def media_files():
    """Multipart payload with a valid video and audio file."""
    return {
        "video": ("clip.mp4", b"fake mp4 content " * 64, "video/mp4"),
        "audio": ("voice.mp3", b"fake mp3 content " * 64, "audio/mpeg"),
    }
