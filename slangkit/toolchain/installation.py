"""
Installed toolchain records.

A provisioning run ends with a :class:`ToolchainInstallation`: the extracted
root, the ``slangc`` executable inside it and the native library directory.
The record is persisted as JSON next to the extraction so that a later
process can initialize the compiler wrapper from it, and it can be emitted
as environment bindings for build systems.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from slangkit.core.exceptions import InstallationError
from slangkit.core.filesystem import atomic_write
from slangkit.core.platform import SlangArch, SlangOs, SlangPlatform

logger = logging.getLogger(__name__)

INSTALLATION_FILE = "slangkit-toolchain.json"
COMPILER_ENV = "SLANGC_BIN_PATH"
LIBRARY_ENV = "SLANG_LIBRARY_DIR"
FORMAT_VERSION = 1


@dataclass
class ToolchainInstallation:
    """
    A Slang toolchain available on disk.

    Attributes:
        root: Toolchain root (contains bin/ and lib/)
        compiler_path: Absolute path to the slangc executable
        library_dir: Native library search directory
        platform: Platform the toolchain was built for, when known
        release_tag: Release the archive came from (remote-fetch only)
        source: Provisioning strategy that produced it
    """

    root: Path
    compiler_path: Path
    library_dir: Path
    platform: Optional[SlangPlatform] = None
    release_tag: Optional[str] = None
    source: str = "remote-fetch"

    @classmethod
    def from_root(
        cls,
        root: Path,
        platform_info: Optional[SlangPlatform] = None,
        release_tag: Optional[str] = None,
        source: str = "remote-fetch",
    ) -> "ToolchainInstallation":
        """
        Describe the standard bin/slangc + lib layout under a root.

        Example:
            >>> inst = ToolchainInstallation.from_root(Path("/opt/slang"))
            >>> inst.compiler_path
            PosixPath('/opt/slang/bin/slangc')
        """
        root = Path(root).absolute()
        exe = "slangc"
        if platform_info is not None:
            exe = platform_info.executable_name(exe)
        return cls(
            root=root,
            compiler_path=root / "bin" / exe,
            library_dir=root / "lib",
            platform=platform_info,
            release_tag=release_tag,
            source=source,
        )

    def to_environment(self) -> Dict[str, str]:
        """Get the environment bindings build systems consume."""
        return {
            COMPILER_ENV: str(self.compiler_path),
            LIBRARY_ENV: str(self.library_dir),
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": FORMAT_VERSION,
            "root": str(self.root),
            "compiler_path": str(self.compiler_path),
            "library_dir": str(self.library_dir),
            "platform": self.platform.platform_string() if self.platform else None,
            "release_tag": self.release_tag,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ToolchainInstallation":
        """
        Create from dictionary.

        Raises:
            InstallationError: If required keys are missing
        """
        try:
            platform_info = None
            if data.get("platform"):
                os_name, arch = data["platform"].split("-", 1)
                platform_info = SlangPlatform(SlangOs(os_name), SlangArch(arch))
            return cls(
                root=Path(data["root"]),
                compiler_path=Path(data["compiler_path"]),
                library_dir=Path(data["library_dir"]),
                platform=platform_info,
                release_tag=data.get("release_tag"),
                source=data.get("source", "remote-fetch"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InstallationError(f"Invalid installation record: {e}") from e

    def save(self, path: Optional[Path] = None) -> Path:
        """
        Persist the record as JSON (atomically).

        Args:
            path: Target file (default: <root parent>/slangkit-toolchain.json)

        Returns:
            Path written
        """
        if path is None:
            path = self.root.parent / INSTALLATION_FILE
        atomic_write(path, json.dumps(self.to_dict(), indent=2) + "\n")
        logger.debug(f"Saved installation record: {path}")
        return Path(path)

    @classmethod
    def load(cls, path: Path) -> "ToolchainInstallation":
        """
        Load a persisted record.

        Args:
            path: Record file, or a directory containing slangkit-toolchain.json

        Raises:
            InstallationError: If the file is missing or malformed
        """
        path = Path(path)
        if path.is_dir():
            path = path / INSTALLATION_FILE
        if not path.exists():
            raise InstallationError(f"Installation record not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise InstallationError(f"Corrupted installation record {path}: {e}") from e

        if not isinstance(data, dict):
            raise InstallationError(f"Corrupted installation record {path}")
        return cls.from_dict(data)

    def exists(self) -> bool:
        """Whether the compiler executable is present."""
        return self.compiler_path.is_file()


__all__ = [
    "ToolchainInstallation",
    "INSTALLATION_FILE",
    "COMPILER_ENV",
    "LIBRARY_ENV",
]
