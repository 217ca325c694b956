"""
Archive installation for the Slang toolchain.

This module downloads a resolved release asset and unpacks it into an
output directory:

    <output_dir>/
        slang.zip                   (removed after extraction)
        slang/                      toolchain root: bin/slangc, lib/, ...
        slangkit-toolchain.json     installation record
        .slangkit.lock

Every run replaces any previous extraction; the filesystem is the only
cache.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import requests

from slangkit.core.download import download_file
from slangkit.core.filesystem import extract_zip, safe_rmtree
from slangkit.core.locking import install_lock
from slangkit.core.platform import SlangPlatform
from slangkit.toolchain.installation import INSTALLATION_FILE, ToolchainInstallation
from slangkit.toolchain.release import ReleaseAsset

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "slang.zip"
EXTRACT_DIR_NAME = "slang"


class ArchiveInstaller:
    """
    Downloads and extracts Slang release archives.

    Example:
        >>> installer = ArchiveInstaller(user_agent="my-build")
        >>> installation = installer.install(asset, platform_info, Path("build"))
        >>> installation.compiler_path
        PosixPath('/abs/build/slang/bin/slangc')
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        verify_digest: bool = True,
        session: Optional[requests.Session] = None,
        lock_timeout: float = 300,
    ):
        """
        Initialize installer.

        Args:
            user_agent: User-Agent header for the archive request
            timeout: Download timeout in seconds (None waits indefinitely)
            verify_digest: Check the asset's published sha256 digest, if any
            session: Optional requests session
            lock_timeout: Seconds to wait for another process's install
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.verify_digest = verify_digest
        self.session = session
        self.lock_timeout = lock_timeout

    def install(
        self,
        asset: ReleaseAsset,
        platform_info: SlangPlatform,
        output_dir: Path,
        release_tag: Optional[str] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> ToolchainInstallation:
        """
        Download an asset and extract it under ``output_dir``.

        Args:
            asset: Release asset selected for the platform
            platform_info: Platform the asset was built for
            output_dir: Directory to install into (created if missing)
            release_tag: Release tag recorded in the installation
            progress_callback: Optional callback(bytes_downloaded, total_bytes)

        Returns:
            ToolchainInstallation describing the extracted toolchain

        Raises:
            DownloadError: If the download fails or is empty
            ChecksumError: If the published digest does not match
            ArchiveExtractionError: If the archive is corrupt
            LockTimeout: If another process holds the directory too long
        """
        output_dir = Path(output_dir).absolute()
        archive_path = output_dir / ARCHIVE_NAME
        target_dir = output_dir / EXTRACT_DIR_NAME

        with install_lock(output_dir, timeout=self.lock_timeout):
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            expected = asset.digest if self.verify_digest else None
            if expected and not expected.lower().startswith("sha256:"):
                logger.debug(f"Ignoring non-sha256 digest: {expected}")
                expected = None

            download_start = time.time()
            download_file(
                asset.browser_download_url,
                archive_path,
                headers=headers,
                expected_sha256=expected,
                progress_callback=progress_callback,
                timeout=self.timeout,
                session=self.session,
            )
            logger.info(f"Download complete in {time.time() - download_start:.2f}s")

            if target_dir.exists():
                logger.debug(f"Removing previous extraction: {target_dir}")
                safe_rmtree(target_dir, require_prefix=output_dir)

            logger.info(f"Extracting to: {target_dir}")
            try:
                count = extract_zip(archive_path, target_dir)
            finally:
                archive_path.unlink(missing_ok=True)
            logger.info(f"Extracted {count} entries from {asset.name}")

            installation = ToolchainInstallation.from_root(
                target_dir,
                platform_info=platform_info,
                release_tag=release_tag,
                source="remote-fetch",
            )
            if not installation.exists():
                logger.warning(
                    f"Archive {asset.name} did not contain {installation.compiler_path}"
                )
            installation.save(output_dir / INSTALLATION_FILE)

        return installation


__all__ = ["ArchiveInstaller", "ARCHIVE_NAME", "EXTRACT_DIR_NAME"]
