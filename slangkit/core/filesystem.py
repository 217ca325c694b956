"""
File system utilities for slangkit.

This module provides:
- ZIP extraction that restores stored Unix permission bits
- Safe file operations (atomic writes, guarded deletion)
- Path containment checks

The Slang release archives carry the executable bit for ``bin/slangc`` in
each entry's external attributes; ``zipfile.ZipFile.extract`` drops it, so
extraction is done entry by entry here.
"""

import logging
import os
import shutil
import stat
import sys
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Union

from slangkit.core.exceptions import SlangKitError

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = os.name == "nt"
IS_UNIX = not IS_WINDOWS


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(SlangKitError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent
    """
    try:
        path.resolve().relative_to(parent.resolve())
        return True
    except ValueError:
        return False


def enclosed_name(member_name: str) -> Optional[PurePosixPath]:
    """
    Get a member name as a relative path, or None if it could escape.

    Names that are absolute, carry a drive letter, contain NUL, or walk out
    of the extraction root with '..' are rejected.

    Example:
        >>> enclosed_name("slang/bin/slangc")
        PurePosixPath('slang/bin/slangc')
        >>> enclosed_name("../etc/passwd") is None
        True
    """
    if "\0" in member_name:
        return None

    name = member_name.replace("\\", "/")
    path = PurePosixPath(name)
    if path.is_absolute() or (path.parts and ":" in path.parts[0]):
        return None

    parts = []
    for part in path.parts:
        if part == "..":
            if not parts:
                return None
            parts.pop()
        elif part not in (".", ""):
            parts.append(part)

    return PurePosixPath(*parts)


# ============================================================================
# Archive Extraction
# ============================================================================


def unix_mode(info: zipfile.ZipInfo) -> Optional[int]:
    """
    Get the permission bits stored for a ZIP entry.

    Returns:
        Permission bits (e.g. 0o755), or None when the archive stored none
    """
    mode = info.external_attr >> 16
    if not mode:
        return None
    return stat.S_IMODE(mode)


def extract_zip(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> int:
    """
    Extract every entry of a ZIP archive, restoring permission bits.

    Directory entries are created recursively. File entries get their parent
    directories created on demand. Entries whose names would land outside
    ``destination`` are skipped. On POSIX systems each entry's stored mode
    is applied after writing; directory modes are applied last so a
    read-only directory does not block its own contents.

    Args:
        archive_path: Path to the .zip file
        destination: Directory to extract to (created if missing)
        progress_callback: Optional callback(current, total) for progress

    Returns:
        Number of entries extracted

    Raises:
        ArchiveExtractionError: If the archive is missing or corrupt

    Example:
        >>> extract_zip('slang.zip', 'out/slang')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            return _extract_members(zf, destination, progress_callback)
    except zipfile.BadZipFile as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e
    except OSError as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_members(
    zf: zipfile.ZipFile,
    destination: Path,
    progress_callback: Optional[Callable[[int, int], None]],
) -> int:
    members = zf.infolist()
    total = len(members)
    extracted = 0
    deferred_dir_modes = []

    for i, info in enumerate(members):
        relative = enclosed_name(info.filename)
        if relative is None:
            logger.warning(f"Skipping archive entry outside destination: {info.filename}")
            continue

        out_path = destination.joinpath(*relative.parts)

        if info.is_dir():
            out_path.mkdir(parents=True, exist_ok=True)
        else:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(out_path, "wb") as dst:
                shutil.copyfileobj(src, dst)

        mode = unix_mode(info)
        if IS_UNIX and mode is not None:
            if info.is_dir():
                deferred_dir_modes.append((out_path, mode))
            else:
                os.chmod(out_path, mode)

        extracted += 1
        if progress_callback:
            progress_callback(i + 1, total)

    for dir_path, mode in reversed(deferred_dir_modes):
        os.chmod(dir_path, mode)

    logger.debug(f"Extracted {extracted}/{total} entries to {destination}")
    return extracted


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, refusing to touch anything outside a prefix.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc):
        """Make read-only entries writable and retry."""
        os.chmod(os.path.dirname(failed_path), stat.S_IRWXU)
        os.chmod(failed_path, stat.S_IRWXU)
        func(failed_path)

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path, onerror=handle_remove_readonly)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


__all__ = [
    "IS_WINDOWS",
    "IS_UNIX",
    "FilesystemError",
    "ArchiveExtractionError",
    "is_relative_to",
    "enclosed_name",
    "unix_mode",
    "extract_zip",
    "atomic_write",
    "safe_rmtree",
]
