"""
slangkit CLI argument parser.

This module implements the command-line interface for slangkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from slangkit.compiler.stage import Stage
from slangkit.config.parser import STRATEGIES
from slangkit.core.exceptions import SlangKitError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("slangkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """slangkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="slangkit",
            description="slangkit - fetch the Slang shader compiler and run slangc",
            epilog='Use "slangkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"slangkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./slangkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_provision_command(subparsers)
        self._add_compile_command(subparsers)
        self._add_slangc_help_command(subparsers)

        return parser

    def _add_provision_command(self, subparsers):
        """Add 'provision' subcommand."""
        parser = subparsers.add_parser(
            "provision",
            help="Download or locate the Slang toolchain",
            description=(
                "Resolve the Slang toolchain for a target and print the "
                "SLANGC_BIN_PATH / SLANG_LIBRARY_DIR bindings"
            ),
        )
        parser.add_argument(
            "--strategy",
            choices=STRATEGIES,
            metavar="NAME",
            help=f"Provisioning strategy ({'|'.join(STRATEGIES)})",
        )
        parser.add_argument(
            "--target",
            metavar="TRIPLE",
            help="Target triple (default: host, e.g. x86_64-unknown-linux-gnu)",
        )
        parser.add_argument(
            "--output-dir",
            type=Path,
            metavar="DIR",
            help="Directory to install into (default: build/slang)",
        )
        parser.add_argument(
            "--release",
            metavar="TAG",
            help="Release tag to fetch (default: latest)",
        )
        parser.add_argument(
            "--format",
            choices=["env", "json"],
            default="env",
            help="Output format for the installation bindings (default: env)",
        )

    def _add_compile_command(self, subparsers):
        """Add 'compile' subcommand."""
        parser = subparsers.add_parser(
            "compile",
            help="Compile a shader with slangc",
            description="Compile a shader with slangc and write its output",
        )
        parser.add_argument("file", metavar="FILE", help="Shader source to compile")
        parser.add_argument(
            "--stage",
            type=Stage.from_name,
            metavar="STAGE",
            help=f"Entry-point stage ({', '.join(s.value for s in Stage)})",
        )
        parser.add_argument("--profile", metavar="PROFILE", help="Target profile")
        parser.add_argument(
            "--entry", dest="entry_point", metavar="NAME", help="Entry-point function"
        )
        parser.add_argument("--target", metavar="TARGET", help="Target language")
        parser.add_argument(
            "-o",
            "--output",
            type=Path,
            metavar="PATH",
            help="Write compiled output here (default: stdout)",
        )
        self._add_toolchain_selection(parser)

    def _add_slangc_help_command(self, subparsers):
        """Add 'slangc-help' subcommand."""
        parser = subparsers.add_parser(
            "slangc-help",
            help="Show slangc's own help text",
            description="Run slangc -help with the configured toolchain",
        )
        self._add_toolchain_selection(parser)

    @staticmethod
    def _add_toolchain_selection(parser):
        group = parser.add_mutually_exclusive_group()
        group.add_argument(
            "--toolchain",
            type=Path,
            metavar="PATH",
            help="Installation record or output directory from 'provision'",
        )
        group.add_argument(
            "--compiler",
            type=Path,
            metavar="PATH",
            help="Path to a slangc executable",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except (SlangKitError, OSError) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "provision": "slangkit.cli.commands.provision",
            "compile": "slangkit.cli.commands.compile",
            "slangc-help": "slangkit.cli.commands.slangc_help",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
