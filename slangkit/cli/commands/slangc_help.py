"""
slangc-help command implementation.
"""

from slangkit.cli.utils import resolve_compiler


def run(args) -> int:
    """Print slangc's help text. Returns exit code 0."""
    compiler = resolve_compiler(args)
    compiler.print_help_info()
    return 0
