"""
slangc invocation for slangkit.
"""

from slangkit.compiler.stage import Stage
from slangkit.compiler.options import CompileShaderOptions
from slangkit.compiler.slangc import (
    SlangCompiler,
    initialize,
    reset,
    get_compiler,
    compile_shader,
    print_help_info,
)

__all__ = [
    "Stage",
    "CompileShaderOptions",
    "SlangCompiler",
    "initialize",
    "reset",
    "get_compiler",
    "compile_shader",
    "print_help_info",
]
