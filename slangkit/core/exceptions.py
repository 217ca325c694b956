"""
Centralized exception hierarchy for slangkit.

Provisioning failures (bad platform, missing asset, broken download) are
meant to stop a build; compilation failures carry the compiler's diagnostic
text back to the caller.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SlangKitError(Exception):
    """Base exception for all slangkit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(SlangKitError):
    """Raised when the build configuration cannot be used as given."""

    pass


class UnsupportedPlatformError(ConfigurationError):
    """Raised when a target triple names an OS or architecture with no release."""

    def __init__(self, message: str, token: str = ""):
        self.token = token
        super().__init__(message)


# ============================================================================
# Provisioning Exceptions
# ============================================================================


class ProvisioningError(SlangKitError):
    """Base exception for toolchain provisioning errors."""

    pass


class ReleaseFetchError(ProvisioningError):
    """Raised when the release listing cannot be retrieved."""

    pass


class ReleaseMetadataError(ProvisioningError):
    """Raised when the release listing does not have the expected shape."""

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


class AssetNotFoundError(ProvisioningError):
    """Raised when no release asset matches the requested platform."""

    def __init__(self, suffix: str, available: list[str]):
        self.suffix = suffix
        self.available = available
        names = ", ".join(available) if available else "<none>"
        super().__init__(
            f"Failed to find release asset ending with '{suffix}'. "
            f"Available assets: {names}"
        )


class InstallationError(ProvisioningError):
    """Raised when an installation record is missing or unusable."""

    pass


# ============================================================================
# Compiler Exceptions
# ============================================================================


class CompilerError(SlangKitError):
    """Base exception for compiler invocation errors."""

    pass


class CompilationError(CompilerError):
    """
    Raised when slangc exits with a nonzero status.

    The string form of the exception is exactly the compiler's stderr.
    """

    def __init__(self, stderr: str, returncode: int = 1):
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(stderr)


class NotInitializedError(CompilerError):
    """Raised when the process-wide compiler is used before initialize()."""

    pass


__all__ = [
    "SlangKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "ProvisioningError",
    "ReleaseFetchError",
    "ReleaseMetadataError",
    "AssetNotFoundError",
    "InstallationError",
    "CompilerError",
    "CompilationError",
    "NotInitializedError",
]
