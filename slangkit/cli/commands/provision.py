"""
Provision command implementation.

Resolves the Slang toolchain (remote fetch or pre-installed SDK) and prints
the bindings a build needs.
"""

import json
import logging

from slangkit.cli.utils import load_cli_config
from slangkit.core.download import format_progress
from slangkit.toolchain.installation import ToolchainInstallation
from slangkit.toolchain.providers import get_provisioner, resolve_platform_toolchain

logger = logging.getLogger(__name__)


class ProgressLogger:
    """Logs download progress at most once per 10%."""

    def __init__(self):
        self._last_decile = -1

    def __call__(self, downloaded: int, total: int):
        if total <= 0:
            return
        decile = downloaded * 10 // total
        if decile != self._last_decile:
            self._last_decile = decile
            logger.info(f"  {format_progress(downloaded, total)}")


def run(args) -> int:
    """
    Run the provision command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args).with_overrides(
        strategy=args.strategy,
        target=args.target,
        output_dir=args.output_dir,
        tag=args.release,
    )
    logger.debug(f"Provision configuration: {config}")

    kwargs = {}
    if config.strategy == "remote-fetch":
        kwargs["progress_callback"] = ProgressLogger()
    provisioner = get_provisioner(config.strategy, **kwargs)

    installation = resolve_platform_toolchain(config, provisioner=provisioner)
    print(format_installation(installation, args.format))
    return 0


def format_installation(installation: ToolchainInstallation, fmt: str = "env") -> str:
    """
    Render an installation for stdout.

    'env' gives KEY=VALUE lines; 'json' gives the persisted record.
    """
    if fmt == "json":
        return json.dumps(installation.to_dict(), indent=2)
    return "\n".join(
        f"{key}={value}" for key, value in installation.to_environment().items()
    )
