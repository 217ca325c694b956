"""
File-based locking for slangkit installs.

Two builds provisioning into the same output directory would otherwise
download and extract over each other. The lock lives next to the directory
it protects, so unrelated output directories never contend.

Example:
    from slangkit.core.locking import install_lock

    with install_lock(output_dir):
        ...  # download and extract
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

LOCK_FILE_NAME = ".slangkit.lock"


@contextmanager
def install_lock(directory: Path, timeout: float = 300):
    """
    Acquire an exclusive lock for installing into a directory.

    Args:
        directory: Output directory being provisioned (created if missing)
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Yields:
        Path to the lock file

    Raises:
        LockTimeout: If lock can't be acquired within timeout
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    lock_path = directory / LOCK_FILE_NAME
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired install lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released install lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire install lock for {directory} after {timeout}s. "
            "Another process may be provisioning this directory."
        )
        raise LockTimeout(str(lock_path)) from e


__all__ = ["install_lock", "LockTimeout", "LOCK_FILE_NAME"]
