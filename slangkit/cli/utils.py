"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path

from slangkit.compiler.slangc import SlangCompiler
from slangkit.config.parser import ProvisionConfig, load_config
from slangkit.core.exceptions import InstallationError
from slangkit.toolchain.installation import ToolchainInstallation

logger = logging.getLogger(__name__)


def load_cli_config(args) -> ProvisionConfig:
    """Load slangkit.yaml from --config or the project root."""
    project_root = Path(getattr(args, "project_root", None) or Path.cwd()).resolve()
    return load_config(getattr(args, "config", None), project_root=project_root)


def resolve_compiler(args) -> SlangCompiler:
    """
    Pick the slangc to run for a command.

    Order: --compiler, --toolchain, then the installation record in the
    configured output directory.

    Raises:
        InstallationError: If no installation record can be found
    """
    if getattr(args, "compiler", None):
        return SlangCompiler(args.compiler)

    if getattr(args, "toolchain", None):
        installation = ToolchainInstallation.load(args.toolchain)
    else:
        config = load_cli_config(args)
        try:
            installation = ToolchainInstallation.load(config.output_dir)
        except InstallationError as e:
            raise InstallationError(
                f"{e}. Run 'slangkit provision' first or pass --compiler/--toolchain."
            ) from e

    logger.debug(f"Using toolchain at {installation.root}")
    return SlangCompiler.from_installation(installation)


__all__ = ["load_cli_config", "resolve_compiler"]
