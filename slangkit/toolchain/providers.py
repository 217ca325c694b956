"""
Toolchain provisioning strategies.

Two sources are supported:

- ``remote-fetch``: resolve the release archive for the target triple on
  GitHub, download it and extract it into the output directory.
- ``pre-installed``: use an SDK that is already on disk, located through an
  environment variable (``VULKAN_SDK`` by default, whose bin/ ships slangc).

:func:`resolve_platform_toolchain` is the single entry point; it raises on
failure and leaves the decision to abort to the caller.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Optional, Type

import requests

from slangkit.config.parser import ProvisionConfig
from slangkit.core.exceptions import ConfigurationError
from slangkit.core.interfaces import ToolchainProvisioner
from slangkit.core.platform import (
    SlangPlatform,
    detect_host_platform,
    detect_host_triple,
    parse_target_triple,
)
from slangkit.toolchain.installation import INSTALLATION_FILE, ToolchainInstallation
from slangkit.toolchain.installer import ArchiveInstaller
from slangkit.toolchain.release import ReleaseResolver, select_asset

logger = logging.getLogger(__name__)


class RemoteFetchProvisioner(ToolchainProvisioner):
    """
    Provisions the toolchain from a GitHub release archive.

    The target triple is parsed before any network request, so an
    unsupported platform fails without touching the API.
    """

    name = "remote-fetch"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ):
        """
        Initialize remote provisioner.

        Args:
            session: Optional requests session shared by metadata and download
            progress_callback: Optional download progress callback
        """
        self._session = session
        self._progress_callback = progress_callback

    def provision(self, config: ProvisionConfig) -> ToolchainInstallation:
        triple = config.target or detect_host_triple()
        platform_info = parse_target_triple(triple)
        logger.info(f"Provisioning Slang for {triple} ({platform_info})")

        resolver = ReleaseResolver(config.release, session=self._session)
        release = resolver.fetch_release()
        asset = select_asset(release, platform_info)
        logger.info(f"Using release asset: {asset.name}")

        installer = ArchiveInstaller(
            user_agent=config.release.user_agent,
            timeout=config.release.timeout,
            verify_digest=config.verify_digest,
            session=self._session,
        )
        return installer.install(
            asset,
            platform_info,
            config.output_dir,
            release_tag=release.tag_name,
            progress_callback=self._progress_callback,
        )


class PreinstalledProvisioner(ToolchainProvisioner):
    """
    Provisions the toolchain from an SDK already present on the machine.

    The SDK root is read from an environment variable once, at provisioning
    time; it must contain ``bin/slangc``. The installation record is saved
    into the output directory so later compiles find the same SDK.
    """

    name = "pre-installed"

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """
        Initialize pre-installed provisioner.

        Args:
            environ: Environment mapping to read (default: os.environ)
        """
        self._environ = environ if environ is not None else os.environ

    def provision(self, config: ProvisionConfig) -> ToolchainInstallation:
        sdk_root = self._environ.get(config.sdk_env)
        if not sdk_root:
            raise ConfigurationError(
                f"Environment variable {config.sdk_env} is not set. "
                "It must point at an SDK containing bin/slangc."
            )

        platform_info = self._platform(config)
        installation = ToolchainInstallation.from_root(
            Path(sdk_root),
            platform_info=platform_info,
            source="pre-installed",
        )
        if not installation.exists():
            raise ConfigurationError(
                f"{config.sdk_env}={sdk_root} does not contain "
                f"{installation.compiler_path.relative_to(installation.root)}"
            )

        installation.save(Path(config.output_dir) / INSTALLATION_FILE)
        logger.info(f"Using pre-installed Slang at {installation.root}")
        return installation

    @staticmethod
    def _platform(config: ProvisionConfig) -> SlangPlatform:
        if config.target:
            return parse_target_triple(config.target)
        return detect_host_platform()


_PROVISIONERS: Dict[str, Type[ToolchainProvisioner]] = {
    RemoteFetchProvisioner.name: RemoteFetchProvisioner,
    PreinstalledProvisioner.name: PreinstalledProvisioner,
}


def get_provisioner(name: str, **kwargs) -> ToolchainProvisioner:
    """
    Create the provisioner registered under a strategy name.

    Args:
        name: 'remote-fetch' or 'pre-installed'
        **kwargs: Passed to the provisioner's constructor

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    try:
        provisioner_cls = _PROVISIONERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown provisioning strategy: {name}. "
            f"Supported: {', '.join(_PROVISIONERS)}"
        ) from None
    return provisioner_cls(**kwargs)


def resolve_platform_toolchain(
    config: Optional[ProvisionConfig] = None,
    provisioner: Optional[ToolchainProvisioner] = None,
) -> ToolchainInstallation:
    """
    Resolve the Slang toolchain for a build.

    Args:
        config: Provisioning configuration (defaults apply when None)
        provisioner: Explicit provisioner; by default the one named by
            ``config.strategy``

    Returns:
        ToolchainInstallation ready for the compiler wrapper

    Raises:
        ConfigurationError: Unsupported platform, missing SDK variable, ...
        ProvisioningError: Release lookup, download or install failure

    Example:
        >>> installation = resolve_platform_toolchain(load_config())
        >>> slangkit.initialize(installation)
    """
    config = config or ProvisionConfig()
    if provisioner is None:
        provisioner = get_provisioner(config.strategy)
    return provisioner.provision(config)


__all__ = [
    "RemoteFetchProvisioner",
    "PreinstalledProvisioner",
    "get_provisioner",
    "resolve_platform_toolchain",
]
