"""
Core functionality for slangkit.

This package contains the foundational modules that the toolchain and
compiler packages depend on.
"""

from .exceptions import (
    SlangKitError,
    ConfigurationError,
    UnsupportedPlatformError,
    ProvisioningError,
    ReleaseFetchError,
    ReleaseMetadataError,
    AssetNotFoundError,
    InstallationError,
    CompilerError,
    CompilationError,
    NotInitializedError,
)

from .platform import (
    SlangOs,
    SlangArch,
    SlangPlatform,
    parse_target_triple,
    detect_host_triple,
    detect_host_platform,
    get_supported_platforms,
    clear_platform_cache,
)

from .download import DownloadError, ChecksumError, download_file
from .filesystem import ArchiveExtractionError, FilesystemError, extract_zip
from .locking import install_lock, LockTimeout

__all__ = [
    "SlangKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "ProvisioningError",
    "ReleaseFetchError",
    "ReleaseMetadataError",
    "AssetNotFoundError",
    "InstallationError",
    "CompilerError",
    "CompilationError",
    "NotInitializedError",
    "SlangOs",
    "SlangArch",
    "SlangPlatform",
    "parse_target_triple",
    "detect_host_triple",
    "detect_host_platform",
    "get_supported_platforms",
    "clear_platform_cache",
    "DownloadError",
    "ChecksumError",
    "download_file",
    "ArchiveExtractionError",
    "FilesystemError",
    "extract_zip",
    "install_lock",
    "LockTimeout",
]
