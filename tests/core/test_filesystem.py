"""
Unit tests for filesystem utilities.

Tests:
- ZIP extraction with directory recreation and permission restore
- Unsafe member names
- Atomic writes and guarded deletion
"""

import os
import stat
import zipfile

import pytest

from slangkit.core.exceptions import SlangKitError
from slangkit.core.filesystem import (
    IS_UNIX,
    ArchiveExtractionError,
    FilesystemError,
    atomic_write,
    enclosed_name,
    extract_zip,
    safe_rmtree,
    unix_mode,
)


def _entry(name, mode):
    info = zipfile.ZipInfo(name)
    info.create_system = 3
    kind = stat.S_IFDIR if name.endswith("/") else stat.S_IFREG
    info.external_attr = (kind | mode) << 16
    return info


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def executable_zip(tmp_path):
    """One directory entry and one executable file entry."""
    archive_path = tmp_path / "toolchain.zip"
    with zipfile.ZipFile(archive_path, "w") as zf:
        zf.writestr(_entry("bin/", 0o755), b"")
        zf.writestr(_entry("bin/slangc", 0o755), b"#!/bin/sh\nexit 0\n")
    return archive_path


@pytest.fixture
def nested_zip(tmp_path):
    """File entries whose parent directories have no entries of their own."""
    archive_path = tmp_path / "nested.zip"
    with zipfile.ZipFile(archive_path, "w") as zf:
        zf.writestr("lib/slang/libslang.so", b"lib")
        zf.writestr("share/doc/README", b"readme")
    return archive_path


@pytest.fixture
def malicious_zip(tmp_path):
    archive_path = tmp_path / "malicious.zip"
    with zipfile.ZipFile(archive_path, "w") as zf:
        zf.writestr("../escape.txt", b"bad")
        zf.writestr("/abs.txt", b"bad")
        zf.writestr("ok/../fine.txt", b"fine")
        zf.writestr("good.txt", b"good")
    return archive_path


# ============================================================================
# Archive Extraction Tests
# ============================================================================


class TestExtractZip:
    """Test extract_zip()."""

    def test_reproduces_directory_and_content(self, tmp_path, executable_zip):
        dest = tmp_path / "out"

        count = extract_zip(executable_zip, dest)

        assert count == 2
        assert (dest / "bin").is_dir()
        assert (dest / "bin" / "slangc").read_bytes() == b"#!/bin/sh\nexit 0\n"

    @pytest.mark.skipif(not IS_UNIX, reason="permission bits are POSIX only")
    def test_restores_executable_bit(self, tmp_path, executable_zip):
        dest = tmp_path / "out"

        extract_zip(executable_zip, dest)

        mode = (dest / "bin" / "slangc").stat().st_mode
        assert mode & stat.S_IXUSR
        assert stat.S_IMODE(mode) == 0o755
        assert os.access(dest / "bin" / "slangc", os.X_OK)

    @pytest.mark.skipif(not IS_UNIX, reason="permission bits are POSIX only")
    def test_restores_read_only_mode(self, tmp_path):
        archive_path = tmp_path / "ro.zip"
        with zipfile.ZipFile(archive_path, "w") as zf:
            zf.writestr(_entry("include/slang.h", 0o444), b"// header")
        dest = tmp_path / "out"

        extract_zip(archive_path, dest)

        assert stat.S_IMODE((dest / "include" / "slang.h").stat().st_mode) == 0o444

    @pytest.mark.skipif(not IS_UNIX, reason="permission bits are POSIX only")
    def test_read_only_directory_applied_after_contents(self, tmp_path):
        archive_path = tmp_path / "rodir.zip"
        with zipfile.ZipFile(archive_path, "w") as zf:
            zf.writestr(_entry("share/", 0o555), b"")
            zf.writestr(_entry("share/data.bin", 0o644), b"data")
        dest = tmp_path / "out"

        extract_zip(archive_path, dest)

        assert (dest / "share" / "data.bin").read_bytes() == b"data"
        assert stat.S_IMODE((dest / "share").stat().st_mode) == 0o555
        (dest / "share").chmod(0o755)

    def test_creates_missing_parents(self, tmp_path, nested_zip):
        dest = tmp_path / "out"

        extract_zip(nested_zip, dest)

        assert (dest / "lib" / "slang" / "libslang.so").read_bytes() == b"lib"
        assert (dest / "share" / "doc" / "README").read_bytes() == b"readme"

    def test_skips_entries_outside_destination(self, tmp_path, malicious_zip):
        dest = tmp_path / "out"

        count = extract_zip(malicious_zip, dest)

        assert count == 2
        assert (dest / "good.txt").read_bytes() == b"good"
        assert (dest / "fine.txt").read_bytes() == b"fine"
        assert not (tmp_path / "escape.txt").exists()

    def test_progress_callback(self, tmp_path, nested_zip):
        calls = []

        extract_zip(nested_zip, tmp_path / "out", lambda c, t: calls.append((c, t)))

        assert calls == [(1, 2), (2, 2)]

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            extract_zip(tmp_path / "nope.zip", tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive_path = tmp_path / "corrupt.zip"
        archive_path.write_bytes(b"this is not a zip file")

        with pytest.raises(ArchiveExtractionError):
            extract_zip(archive_path, tmp_path / "out")

    def test_errors_are_slangkit_errors(self):
        assert issubclass(ArchiveExtractionError, SlangKitError)


class TestEnclosedName:
    """Test enclosed_name()."""

    @pytest.mark.parametrize(
        "name", ["bin/slangc", "a/./b", "a/../b", "lib/", "slang-2025/bin/slangc.exe"]
    )
    def test_accepts(self, name):
        assert enclosed_name(name) is not None

    @pytest.mark.parametrize(
        "name", ["../x", "/etc/passwd", "a/../../x", "C:/Windows/x", "C:\\x", "a\0b"]
    )
    def test_rejects(self, name):
        assert enclosed_name(name) is None


class TestUnixMode:
    """Test unix_mode()."""

    def test_mode_from_external_attr(self):
        assert unix_mode(_entry("bin/slangc", 0o755)) == 0o755

    def test_no_mode_stored(self):
        info = zipfile.ZipInfo("file.txt")
        info.external_attr = 0
        assert unix_mode(info) is None


# ============================================================================
# Safe File Operations Tests
# ============================================================================


class TestAtomicWrite:
    def test_write_text(self, tmp_path):
        target = tmp_path / "sub" / "record.json"
        atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        target = tmp_path / "record.json"
        atomic_write(target, "one")
        atomic_write(target, b"two")
        assert target.read_bytes() == b"two"
        assert [p.name for p in tmp_path.iterdir()] == ["record.json"]


class TestSafeRmtree:
    def test_removes_tree(self, tmp_path):
        target = tmp_path / "slang"
        (target / "bin").mkdir(parents=True)
        (target / "bin" / "slangc").write_text("x")

        safe_rmtree(target, require_prefix=tmp_path)

        assert not target.exists()

    @pytest.mark.skipif(not IS_UNIX, reason="permission bits are POSIX only")
    def test_removes_read_only_contents(self, tmp_path):
        target = tmp_path / "slang"
        (target / "share").mkdir(parents=True)
        (target / "share" / "f").write_text("x")
        (target / "share").chmod(0o555)

        safe_rmtree(target)

        assert not target.exists()

    def test_refuses_outside_prefix(self, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(other, require_prefix=tmp_path / "cache")

    def test_missing_path_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_not_a_directory(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("x")
        with pytest.raises(FilesystemError):
            safe_rmtree(f)
