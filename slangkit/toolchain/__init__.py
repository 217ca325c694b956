"""
Toolchain provisioning for slangkit.

This module provides functionality for:
- Resolving Slang release archives for a target triple
- Downloading and extracting them with permissions intact
- Locating a pre-installed SDK instead
- Recording the resulting installation
"""

from slangkit.toolchain.release import (
    Release,
    ReleaseAsset,
    ReleaseResolver,
    parse_release,
    release_endpoint,
    select_asset,
)
from slangkit.toolchain.installation import (
    ToolchainInstallation,
    INSTALLATION_FILE,
    COMPILER_ENV,
    LIBRARY_ENV,
)
from slangkit.toolchain.installer import ArchiveInstaller
from slangkit.toolchain.providers import (
    RemoteFetchProvisioner,
    PreinstalledProvisioner,
    get_provisioner,
    resolve_platform_toolchain,
)

__all__ = [
    # Release resolution
    "Release",
    "ReleaseAsset",
    "ReleaseResolver",
    "parse_release",
    "release_endpoint",
    "select_asset",
    # Installation
    "ToolchainInstallation",
    "INSTALLATION_FILE",
    "COMPILER_ENV",
    "LIBRARY_ENV",
    "ArchiveInstaller",
    # Provisioning strategies
    "RemoteFetchProvisioner",
    "PreinstalledProvisioner",
    "get_provisioner",
    "resolve_platform_toolchain",
]
