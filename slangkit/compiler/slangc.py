"""
Subprocess wrapper around the slangc executable.

Usage:
    from slangkit.compiler import CompileShaderOptions, SlangCompiler, Stage

    compiler = SlangCompiler.from_installation(installation)
    spirv = compiler.compile_shader(
        CompileShaderOptions(
            file="shaders/triangle.slang",
            stage=Stage.VERTEX,
            profile="spirv_1_6",
            entry_point="vertexMain",
            target="spirv",
        )
    )

A process can also call :func:`initialize` once at startup and then use the
module-level :func:`compile_shader` and :func:`print_help_info`.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Union

from slangkit.compiler.options import CompileShaderOptions
from slangkit.core.exceptions import CompilationError, NotInitializedError

logger = logging.getLogger(__name__)


class SlangCompiler:
    """Invokes one slangc executable. Each call is a single blocking run."""

    def __init__(self, compiler_path: Union[str, Path]):
        """
        Initialize compiler wrapper.

        Args:
            compiler_path: Path to the slangc executable
        """
        self.compiler_path = Path(compiler_path)

    @classmethod
    def from_installation(cls, installation) -> "SlangCompiler":
        """Create a wrapper for a ToolchainInstallation's compiler."""
        return cls(installation.compiler_path)

    def command(self, options: CompileShaderOptions) -> List[str]:
        """Full command line for a compile request."""
        return [str(self.compiler_path), *options.to_arguments()]

    def compile_shader(self, options: CompileShaderOptions) -> bytes:
        """
        Compile a shader and return slangc's stdout.

        The output format (SPIR-V, DXIL, source text, ...) depends on the
        target and is returned as-is.

        Args:
            options: Compile request

        Returns:
            Raw stdout bytes

        Raises:
            CompilationError: If slangc exits nonzero; the message is its stderr
            UnicodeDecodeError: If that stderr is not valid UTF-8
            OSError: If slangc cannot be started
        """
        cmd = self.command(options)
        logger.debug(f"Running: {' '.join(cmd)}")

        result = subprocess.run(cmd, capture_output=True)

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8")
            logger.debug(f"slangc exited with {result.returncode}")
            raise CompilationError(stderr, returncode=result.returncode)

        logger.debug(f"slangc produced {len(result.stdout)} bytes")
        return result.stdout

    def help_text(self) -> str:
        """
        Run ``slangc -help`` and return what it printed to stderr.

        Raises:
            OSError: If slangc cannot be started
        """
        result = subprocess.run(
            [str(self.compiler_path), "-help"], capture_output=True
        )
        return result.stderr.decode("utf-8", errors="replace")

    def print_help_info(self, stream: Optional[TextIO] = None) -> None:
        """
        Write slangc's help text to a stream (default: stdout).

        Raises:
            OSError: If slangc cannot be started or the stream fails
        """
        stream = stream if stream is not None else sys.stdout
        stream.write(f"slangc help: {self.help_text()}\n")

    def __repr__(self) -> str:
        return f"SlangCompiler({str(self.compiler_path)!r})"


# ============================================================================
# Process-wide compiler
# ============================================================================

_compiler: Optional[SlangCompiler] = None


def initialize(toolchain) -> SlangCompiler:
    """
    Configure the compiler used by the module-level functions.

    Args:
        toolchain: A ToolchainInstallation, a SlangCompiler, or a path to slangc

    Returns:
        The configured SlangCompiler
    """
    global _compiler

    if isinstance(toolchain, SlangCompiler):
        compiler = toolchain
    elif hasattr(toolchain, "compiler_path"):
        compiler = SlangCompiler.from_installation(toolchain)
    else:
        compiler = SlangCompiler(toolchain)

    _compiler = compiler
    logger.debug(f"Initialized slangc: {compiler.compiler_path}")
    return compiler


def reset() -> None:
    """Forget the process-wide compiler."""
    global _compiler
    _compiler = None


def get_compiler() -> SlangCompiler:
    """
    Get the process-wide compiler.

    Raises:
        NotInitializedError: If initialize() has not been called
    """
    if _compiler is None:
        raise NotInitializedError(
            "slangc is not configured; call slangkit.initialize() with a "
            "toolchain installation first"
        )
    return _compiler


def compile_shader(options: CompileShaderOptions) -> bytes:
    """Compile with the process-wide compiler. See SlangCompiler.compile_shader."""
    return get_compiler().compile_shader(options)


def print_help_info(stream: Optional[TextIO] = None) -> None:
    """Print help with the process-wide compiler. See SlangCompiler.print_help_info."""
    get_compiler().print_help_info(stream)


__all__ = [
    "SlangCompiler",
    "initialize",
    "reset",
    "get_compiler",
    "compile_shader",
    "print_help_info",
]
