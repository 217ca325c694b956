"""
Core interfaces for slangkit.

The compiler wrapper only needs a :class:`ToolchainInstallation`; how that
installation comes to exist is a provisioning strategy chosen when the build
is configured.
"""

from abc import ABC, abstractmethod
from typing import Any


class ToolchainProvisioner(ABC):
    """
    Abstract interface for components that make a Slang toolchain available.

    Implementations either fetch a release archive or locate an SDK that is
    already installed.
    """

    name: str = ""

    @abstractmethod
    def provision(self, config: Any) -> Any:
        """
        Make the toolchain available.

        Args:
            config: ProvisionConfig with target, output directory and source

        Returns:
            ToolchainInstallation for the provisioned toolchain

        Raises:
            ConfigurationError: If the configuration cannot be satisfied
            ProvisioningError: If fetching or installing fails
        """
        pass


__all__ = ["ToolchainProvisioner"]
