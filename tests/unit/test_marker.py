"""Tests for the commit marker file."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from branch_updater.marker import CommitMarker

SHA = "0123456789abcdef0123456789abcdef01234567"


class TestLoad:
    """Tests for CommitMarker.load()."""

    def test_missing_file_is_absent(self, tmp_path: Path) -> None:
        assert CommitMarker(tmp_path / "last_commit").load() is None

    def test_valid_marker(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        path.write_bytes(SHA.encode("ascii"))

        assert CommitMarker(path).load() == SHA

    @pytest.mark.parametrize(
        "content",
        [b"", b"abc", SHA[:39].encode(), (SHA + "\n").encode(), (SHA * 2).encode()],
        ids=["empty", "short", "39", "trailing-newline", "80"],
    )
    def test_wrong_length_is_absent(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "last_commit"
        path.write_bytes(content)

        assert CommitMarker(path).load() is None

    def test_non_ascii_is_absent(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        path.write_bytes(b"\xff" * 40)

        assert CommitMarker(path).load() is None

    def test_read_error_is_absent(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        path.write_bytes(SHA.encode("ascii"))

        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            assert CommitMarker(path).load() is None

    def test_directory_is_absent(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        path.mkdir()

        assert CommitMarker(path).load() is None


class TestSave:
    """Tests for CommitMarker.save()."""

    def test_writes_raw_sha(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        marker = CommitMarker(path)

        assert marker.save(SHA) is True
        assert path.read_bytes() == SHA.encode("ascii")
        assert marker.load() == SHA

    def test_overwrites_previous(self, tmp_path: Path) -> None:
        path = tmp_path / "last_commit"
        path.write_text("x" * 40, encoding="ascii")

        CommitMarker(path).save(SHA)

        assert path.read_text(encoding="ascii") == SHA

    def test_write_failure_returns_false(self, tmp_path: Path) -> None:
        marker = CommitMarker(tmp_path / "missing-dir" / "last_commit")

        assert marker.save(SHA) is False
