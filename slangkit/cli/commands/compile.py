"""
Compile command implementation.

Runs slangc on one file and writes its output to a file or stdout.
"""

import logging
import sys

from slangkit.cli.utils import resolve_compiler
from slangkit.compiler.options import CompileShaderOptions
from slangkit.core.exceptions import CompilationError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the compile command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, slangc's status on compile failure)
    """
    compiler = resolve_compiler(args)
    options = CompileShaderOptions(
        file=args.file,
        stage=args.stage,
        profile=args.profile,
        entry_point=args.entry_point,
        target=args.target,
    )

    try:
        output = compiler.compile_shader(options)
    except CompilationError as e:
        sys.stderr.write(e.stderr)
        return e.returncode or 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(output)
        logger.info(f"Wrote {len(output)} bytes to {args.output}")
    else:
        sys.stdout.buffer.write(output)
        sys.stdout.buffer.flush()

    return 0
