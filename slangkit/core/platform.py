"""
Platform identification for slangkit.

Slang publishes one release archive per (operating system, architecture)
pair. This module turns a target triple such as ``x86_64-unknown-linux-gnu``
or ``aarch64-apple-darwin`` into that pair, and names the archive suffix the
release resolver looks for.

Usage:
    from slangkit.core.platform import parse_target_triple

    platform_info = parse_target_triple("x86_64-pc-windows-msvc")
    print(platform_info.asset_suffix())  # windows-x86_64.zip
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum

from slangkit.core.exceptions import UnsupportedPlatformError

TRIPLE_DELIMITER = "-"


class SlangOs(str, Enum):
    """Operating systems with a published Slang release."""

    LINUX = "linux"
    WINDOWS = "windows"
    MACOS = "macos"


class SlangArch(str, Enum):
    """CPU architectures with a published Slang release."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


# Triple tokens -> release naming. Apple triples say "darwin" and "arm64".
_OS_TOKENS = {
    "linux": SlangOs.LINUX,
    "windows": SlangOs.WINDOWS,
    "darwin": SlangOs.MACOS,
}

_ARCH_TOKENS = {
    "x86_64": SlangArch.X86_64,
    "aarch64": SlangArch.AARCH64,
    "arm64": SlangArch.AARCH64,
}


@dataclass(frozen=True)
class SlangPlatform:
    """
    Operating system and architecture of a Slang toolchain build.

    Attributes:
        os: Target operating system
        arch: Target CPU architecture
    """

    os: SlangOs
    arch: SlangArch

    def platform_string(self) -> str:
        """
        Get canonical platform string.

        Example:
            >>> SlangPlatform(SlangOs.LINUX, SlangArch.X86_64).platform_string()
            'linux-x86_64'
        """
        return f"{self.os.value}-{self.arch.value}"

    def asset_suffix(self) -> str:
        """
        Get the suffix a release asset name must end with for this platform.

        Example:
            >>> SlangPlatform(SlangOs.MACOS, SlangArch.AARCH64).asset_suffix()
            'macos-aarch64.zip'
        """
        return f"{self.platform_string()}.zip"

    def executable_name(self, name: str) -> str:
        """Append the platform's executable extension to a program name."""
        if self.os is SlangOs.WINDOWS:
            return f"{name}.exe"
        return name

    def __str__(self) -> str:
        return self.platform_string()


def parse_os_token(token: str) -> SlangOs:
    """
    Map the OS component of a target triple to a release OS.

    Raises:
        UnsupportedPlatformError: If the token is not recognized
    """
    try:
        return _OS_TOKENS[token]
    except KeyError:
        raise UnsupportedPlatformError(f"Unknown OS: {token}", token=token) from None


def parse_arch_token(token: str) -> SlangArch:
    """
    Map the architecture component of a target triple to a release arch.

    Raises:
        UnsupportedPlatformError: If the token is not recognized
    """
    try:
        return _ARCH_TOKENS[token]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Unknown arch: {token}", token=token
        ) from None


def parse_target_triple(triple: str) -> SlangPlatform:
    """
    Parse a target triple into a Slang platform.

    The triple is split on ``-``; the first component is the architecture
    and the third is the operating system.

    Args:
        triple: Target triple (e.g. 'x86_64-unknown-linux-gnu')

    Returns:
        SlangPlatform for the triple

    Raises:
        UnsupportedPlatformError: If the triple is malformed or names an
            unknown OS or architecture

    Example:
        >>> parse_target_triple("aarch64-apple-darwin").asset_suffix()
        'macos-aarch64.zip'
    """
    parts = triple.strip().split(TRIPLE_DELIMITER)
    if len(parts) < 3:
        raise UnsupportedPlatformError(
            f"Malformed target triple: '{triple}' (expected <arch>-<vendor>-<os>[-<env>])",
            token=triple,
        )

    arch = parse_arch_token(parts[0])
    os_name = parse_os_token(parts[2])
    return SlangPlatform(os=os_name, arch=arch)


@functools.lru_cache(maxsize=1)
def detect_host_triple() -> str:
    """
    Build a target triple describing the running interpreter's host.

    This function is cached - it only runs detection once per process.

    Returns:
        Target triple such as 'x86_64-unknown-linux-gnu'

    Raises:
        UnsupportedPlatformError: If the host OS is not one Slang ships for
    """
    machine = platform.machine().lower()
    if machine in ("amd64", "x64"):
        machine = "x86_64"

    system = platform.system().lower()
    if system == "linux":
        return f"{machine}-unknown-linux-gnu"
    elif system == "windows":
        return f"{machine}-pc-windows-msvc"
    elif system == "darwin":
        return f"{machine}-apple-darwin"
    else:
        raise UnsupportedPlatformError(f"Unknown OS: {system}", token=system)


def detect_host_platform() -> SlangPlatform:
    """Get the Slang platform of the running host."""
    return parse_target_triple(detect_host_triple())


def get_supported_platforms() -> list[str]:
    """
    Get list of all supported platform strings.

    Example:
        >>> get_supported_platforms()[0]
        'linux-x86_64'
    """
    return [
        SlangPlatform(os_name, arch).platform_string()
        for os_name in SlangOs
        for arch in SlangArch
    ]


def clear_platform_cache():
    """Clear the host detection cache."""
    detect_host_triple.cache_clear()


__all__ = [
    "SlangOs",
    "SlangArch",
    "SlangPlatform",
    "parse_os_token",
    "parse_arch_token",
    "parse_target_triple",
    "detect_host_triple",
    "detect_host_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
