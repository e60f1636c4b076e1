"""Tests for directory scanning and key normalization."""

import tempfile
from pathlib import Path, PurePosixPath, PureWindowsPath

import pytest

from hashsync.sync.scanner import DirectoryScanner, LocalFile, make_remote_key


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestMakeRemoteKey:
    """Tests for make_remote_key."""

    def test_prefix_and_nested_path(self):
        assert make_remote_key("sub/dir/file.txt", "pfx/") == "pfx/sub/dir/file.txt"

    def test_no_prefix(self):
        assert make_remote_key("file.txt") == "file.txt"
        assert make_remote_key("file.txt", None) == "file.txt"
        assert make_remote_key("file.txt", "") == "file.txt"

    def test_windows_path_normalized(self):
        """Test that Windows separators become forward slashes."""
        path = PureWindowsPath("sub", "dir", "file.txt")

        assert make_remote_key(path, "pfx/") == "pfx/sub/dir/file.txt"

    def test_posix_path(self):
        path = PurePosixPath("sub", "dir", "file.txt")

        assert make_remote_key(path, "pfx/") == "pfx/sub/dir/file.txt"

    def test_backslashes_in_string_replaced(self):
        """Test that no backslash survives in the key."""
        key = make_remote_key("sub\\dir\\file.txt", "pfx\\")

        assert key == "pfx/sub/dir/file.txt"
        assert "\\" not in key

    def test_prefix_used_verbatim(self):
        """Test that no separator is inserted after the prefix."""
        assert make_remote_key("file.txt", "backup-") == "backup-file.txt"


class TestLocalFile:
    """Tests for LocalFile."""

    def test_from_path(self, temp_dir):
        sub = temp_dir / "sub"
        sub.mkdir()
        path = sub / "file.txt"
        path.write_text("content")

        local_file = LocalFile.from_path(path, temp_dir, prefix="pfx/")

        assert local_file.path == path
        assert local_file.relative_path == "sub/file.txt"
        assert local_file.key == "pfx/sub/file.txt"
        assert local_file.size == len("content")


class TestDirectoryScanner:
    """Tests for DirectoryScanner."""

    def test_empty_directory(self, temp_dir):
        """Test that an empty root yields no files."""
        assert DirectoryScanner().scan_local(temp_dir) == []

    def test_directories_only(self, temp_dir):
        """Test that directories are not represented on their own."""
        (temp_dir / "a" / "b").mkdir(parents=True)

        assert DirectoryScanner().scan_local(temp_dir) == []

    def test_recursive_scan(self, temp_dir):
        """Test that nested files are found with normalized keys."""
        (temp_dir / "sub" / "dir").mkdir(parents=True)
        (temp_dir / "top.txt").write_text("top")
        (temp_dir / "sub" / "mid.txt").write_text("mid")
        (temp_dir / "sub" / "dir" / "file.txt").write_text("deep")

        files = DirectoryScanner().scan_local(temp_dir, prefix="pfx/")

        assert {f.key for f in files} == {
            "pfx/top.txt",
            "pfx/sub/mid.txt",
            "pfx/sub/dir/file.txt",
        }
        assert all("\\" not in f.key for f in files)
        assert all(f.path.is_absolute() for f in files)

    def test_deterministic_order(self, temp_dir):
        """Test that entries are returned in name order at every level."""
        (temp_dir / "b").mkdir()
        (temp_dir / "c.txt").write_text("c")
        (temp_dir / "a.txt").write_text("a")
        (temp_dir / "b" / "z.txt").write_text("z")
        (temp_dir / "b" / "y.txt").write_text("y")

        scanner = DirectoryScanner()
        first = [f.relative_path for f in scanner.scan_local(temp_dir)]
        second = [f.relative_path for f in scanner.scan_local(temp_dir)]

        assert first == ["a.txt", "b/y.txt", "b/z.txt", "c.txt"]
        assert first == second

    def test_hidden_files_included(self, temp_dir):
        """Test that dot files are synced like any other file."""
        (temp_dir / ".env").write_text("secret")

        files = DirectoryScanner().scan_local(temp_dir)

        assert [f.key for f in files] == [".env"]

    def test_symlink_loop_not_followed(self, temp_dir):
        """Test that a link back to an ancestor yields each file once."""
        (temp_dir / "a.txt").write_text("a")
        (temp_dir / "sub").mkdir()
        (temp_dir / "sub" / "b.txt").write_text("b")
        (temp_dir / "loop").symlink_to(temp_dir, target_is_directory=True)
        (temp_dir / "sub" / "up").symlink_to(temp_dir, target_is_directory=True)

        files = DirectoryScanner().scan_local(temp_dir)

        assert [f.key for f in files] == ["a.txt", "sub/b.txt"]

    def test_symlinked_file_included(self, temp_dir):
        """Test that a link to a regular file is synced under its own name."""
        (temp_dir / "target.txt").write_text("data")
        (temp_dir / "alias.txt").symlink_to(temp_dir / "target.txt")

        files = DirectoryScanner().scan_local(temp_dir)

        assert [f.key for f in files] == ["alias.txt", "target.txt"]
