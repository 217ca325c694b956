"""
HTTP download helpers for slangkit.

Release archives are streamed to disk with requests. Downloads happen once
per provisioning run, so there is no resume and no retry: any transport
failure, error status, or empty body is reported immediately.
"""

import hashlib
import logging
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from slangkit.core.exceptions import ProvisioningError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class DownloadError(ProvisioningError):
    """Exception raised when download fails."""

    pass


class ChecksumError(ProvisioningError):
    """Exception raised when checksum verification fails."""

    pass


class StreamingHasher:
    """Compute a SHA256 digest incrementally while streaming a download."""

    def __init__(self):
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        self.hasher.update(data)

    def finalize(self) -> str:
        return self.hasher.hexdigest()

    def verify(self, expected_hash: str) -> bool:
        """
        Check if computed hash matches expected value.

        Args:
            expected_hash: Expected hex digest, optionally prefixed 'sha256:'

        Returns:
            True if hashes match, False otherwise
        """
        expected = expected_hash.lower()
        if expected.startswith("sha256:"):
            expected = expected[len("sha256:") :]
        return self.finalize() == expected


def download_file(
    url: str,
    destination: Path,
    headers: Optional[dict] = None,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Stream a URL into a local file.

    Args:
        url: URL to download from (redirects are followed)
        destination: Local path to save file
        headers: Extra request headers (e.g. User-Agent)
        expected_sha256: Expected SHA256 hex digest, checked after download
        progress_callback: Optional callback(bytes_downloaded, total_bytes);
            total_bytes is 0 when the server sends no content-length
        timeout: Request timeout in seconds (None waits indefinitely)
        session: Optional requests session to issue the request with

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: On transport failure, error status or empty body
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL or destination is empty

    Example:
        >>> download_file(asset.browser_download_url, Path("out/slang.zip"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    http = session or requests
    logger.info(f"Downloading from {url}")

    try:
        response = http.get(
            url,
            headers=headers or {},
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        )
    except RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e

    with response:
        if not response.ok:
            raise DownloadError(
                f"Download of {url} failed with HTTP {response.status_code}"
            )

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        hasher = StreamingHasher() if expected_sha256 else None
        downloaded = 0

        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    if hasher:
                        hasher.update(chunk)
                    if progress_callback:
                        progress_callback(downloaded, total_size)
        except RequestException as e:
            destination.unlink(missing_ok=True)
            raise DownloadError(f"Download of {url} was interrupted: {e}") from e

    if downloaded == 0:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} returned an empty body")

    if expected_sha256 and hasher:
        if not hasher.verify(expected_sha256):
            actual_hash = hasher.finalize()
            destination.unlink()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual_hash}"
            )
        logger.info("Checksum verified successfully")

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def format_progress(bytes_downloaded: int, total_bytes: int) -> str:
    """
    Format download progress for display.

    Example:
        >>> format_progress(52428800, 104857600)
        '50.0/100.0 MB (50.0%)'
    """
    mb_downloaded = bytes_downloaded / 1024 / 1024
    if total_bytes > 0:
        mb_total = total_bytes / 1024 / 1024
        percentage = bytes_downloaded / total_bytes * 100
        return f"{mb_downloaded:.1f}/{mb_total:.1f} MB ({percentage:.1f}%)"
    return f"{mb_downloaded:.1f} MB"


__all__ = [
    "DownloadError",
    "ChecksumError",
    "StreamingHasher",
    "download_file",
    "format_progress",
]
