"""
slangkit - fetch the Slang shader compiler and drive slangc from Python.

Typical build flow:

    import slangkit

    installation = slangkit.resolve_platform_toolchain(slangkit.load_config())
    slangkit.initialize(installation)

    spirv = slangkit.compile_shader(
        slangkit.CompileShaderOptions(
            file="triangle.slang",
            stage=slangkit.Stage.VERTEX,
            entry_point="vertexMain",
            target="spirv",
        )
    )
"""

from slangkit.compiler import (
    CompileShaderOptions,
    SlangCompiler,
    Stage,
    compile_shader,
    get_compiler,
    initialize,
    print_help_info,
)
from slangkit.config import ProvisionConfig, load_config
from slangkit.core.exceptions import (
    AssetNotFoundError,
    CompilationError,
    CompilerError,
    ConfigurationError,
    NotInitializedError,
    ProvisioningError,
    ReleaseFetchError,
    ReleaseMetadataError,
    SlangKitError,
    UnsupportedPlatformError,
)
from slangkit.core.platform import SlangPlatform, parse_target_triple
from slangkit.toolchain import (
    ToolchainInstallation,
    resolve_platform_toolchain,
)

__version__ = "0.1.0"

__all__ = [
    "CompileShaderOptions",
    "SlangCompiler",
    "Stage",
    "compile_shader",
    "get_compiler",
    "initialize",
    "print_help_info",
    "ProvisionConfig",
    "load_config",
    "SlangPlatform",
    "parse_target_triple",
    "ToolchainInstallation",
    "resolve_platform_toolchain",
    "SlangKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "ProvisioningError",
    "ReleaseFetchError",
    "ReleaseMetadataError",
    "AssetNotFoundError",
    "CompilerError",
    "CompilationError",
    "NotInitializedError",
]
