"""Tests for app.utils.paths module."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from app.errors import StorageError
from app.utils.paths import (
    ensure_dir,
    merge_output_path,
    remote_video_path,
    safe_filename,
    upload_path,
)


class TestEnsureDir:
    """Tests for ensure_dir function."""

    def test_creates_nested_directory(self):
        """Should create the directory including parents."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "a" / "b" / "uploads"

            result = ensure_dir(target)

            assert result == target
            assert target.is_dir()

    def test_idempotent(self):
        """Existing directories are not an error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            ensure_dir(tmpdir)
            ensure_dir(tmpdir)
            assert Path(tmpdir).is_dir()

    def test_failure_raises_storage_error(self):
        """Unrecoverable mkdir failures should raise StorageError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "uploads"
            with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
                with pytest.raises(StorageError) as exc_info:
                    ensure_dir(target)
            assert "denied" in exc_info.value.message

    def test_file_in_the_way_raises_storage_error(self):
        """A regular file at the path cannot become a directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "uploads"
            target.write_bytes(b"not a dir")

            with pytest.raises(StorageError):
                ensure_dir(target)


class TestSafeFilename:
    """Tests for safe_filename function."""

    def test_plain_name_unchanged(self):
        assert safe_filename("clip.mp4") == "clip.mp4"

    def test_strips_posix_directories(self):
        assert safe_filename("../../etc/passwd.mp4") == "passwd.mp4"

    def test_strips_windows_directories(self):
        assert safe_filename("C:\\Users\\me\\voice.mp3") == "voice.mp3"

    def test_empty_falls_back(self):
        assert safe_filename("") == "upload"
        assert safe_filename("..") == "upload"


class TestUploadPath:
    """Tests for upload_path function."""

    def test_in_upload_dir_and_keeps_name(self):
        """Should live in the upload dir and end with the original name."""
        path = upload_path("/tmp/uploads", "clip.mp4")
        assert path.parent == Path("/tmp/uploads")
        assert path.name.endswith("-clip.mp4")
        assert path.suffix == ".mp4"

    def test_same_name_gives_distinct_paths(self):
        """Repeated calls with the same filename never collide."""
        paths = {upload_path("/tmp/uploads", "clip.mp4") for _ in range(1000)}
        assert len(paths) == 1000

    def test_distinct_with_frozen_clock(self):
        """Sequence component keeps names apart even with an identical timestamp."""
        with patch("app.utils.paths.time.time_ns", return_value=1234):
            first = upload_path("/tmp/uploads", "clip.mp4")
            second = upload_path("/tmp/uploads", "clip.mp4")
        assert first != second
        assert first.name.startswith("1234-")


class TestMergeOutputPath:
    """Tests for merge_output_path function."""

    def test_basic_path(self):
        path = merge_output_path("/tmp/uploads", "abc-123")
        assert path == Path("/tmp/uploads") / "merged-abc-123.mp4"

    def test_always_mp4(self):
        assert merge_output_path("/tmp", "any").suffix == ".mp4"


class TestRemoteVideoPath:
    """Tests for remote_video_path function."""

    def test_basic_path(self):
        assert remote_video_path("abc-123") == "videos/abc-123.mp4"
