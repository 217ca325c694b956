"""YAML configuration parser for slangkit.

This module reads ``slangkit.yaml`` into a :class:`ProvisionConfig`.

Example ``slangkit.yaml``::

    version: 1
    strategy: remote-fetch        # or pre-installed
    target: x86_64-unknown-linux-gnu
    output_dir: build/slang
    release:
      tag: latest
      repository: shader-slang/slang
    preinstalled:
      sdk_env: VULKAN_SDK
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from slangkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "slangkit.yaml"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REPOSITORY = "shader-slang/slang"
DEFAULT_USER_AGENT = "Python Build Script (slangkit)"
DEFAULT_SDK_ENV = "VULKAN_SDK"

STRATEGIES = ("remote-fetch", "pre-installed")


class ConfigError(ConfigurationError):
    """Configuration parsing or validation error."""

    pass


@dataclass
class ReleaseConfig:
    """Where to look for the Slang release archives."""

    tag: str = "latest"
    repository: str = DEFAULT_REPOSITORY
    api_url: str = DEFAULT_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    token: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class ProvisionConfig:
    """Complete slangkit provisioning configuration."""

    strategy: str = "remote-fetch"
    target: Optional[str] = None  # None means the host triple
    output_dir: Path = field(default_factory=lambda: Path("build") / "slang")
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    sdk_env: str = DEFAULT_SDK_ENV
    verify_digest: bool = True
    # Directory that relative output_dir values are resolved against
    base_dir: Optional[Path] = field(default=None, compare=False, repr=False)

    def with_overrides(self, **overrides: Any) -> "ProvisionConfig":
        """
        Return a copy with non-None overrides applied.

        Keys ``tag``, ``token`` and ``timeout`` go to the release section.
        A relative ``output_dir`` is resolved against ``base_dir``, the same
        way it is when read from slangkit.yaml.

        Example:
            >>> config.with_overrides(target="aarch64-apple-darwin", tag=None)
        """
        release_keys = {"tag", "token", "timeout"}
        release_updates = {
            k: v for k, v in overrides.items() if k in release_keys and v is not None
        }
        top_updates = {
            k: v
            for k, v in overrides.items()
            if k not in release_keys and v is not None
        }
        if "output_dir" in top_updates:
            top_updates["output_dir"] = resolve_output_dir(
                top_updates["output_dir"], self.base_dir
            )
        if "strategy" in top_updates:
            _validate_strategy(top_updates["strategy"])

        updated = replace(self, **top_updates)
        if release_updates:
            updated = replace(updated, release=replace(self.release, **release_updates))
        return updated


def resolve_output_dir(
    output_dir: Union[str, Path], base_dir: Optional[Path] = None
) -> Path:
    """
    Resolve an output directory setting.

    Relative paths are taken against ``base_dir`` (the directory holding
    slangkit.yaml, or the project root when there is none).
    """
    output_dir = Path(output_dir)
    if base_dir is not None and not output_dir.is_absolute():
        output_dir = Path(base_dir) / output_dir
    return output_dir


def parse_config(config_path: Path) -> ProvisionConfig:
    """
    Parse slangkit.yaml configuration file.

    Args:
        config_path: Path to slangkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If the file is missing or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        data = {}

    config = parse_config_dict(data, base_dir=config_path.parent)
    logger.debug(f"Loaded configuration from {config_path}")
    return config


def load_config(
    config_path: Optional[Path] = None, project_root: Optional[Path] = None
) -> ProvisionConfig:
    """
    Load configuration, falling back to defaults when no file exists.

    Args:
        config_path: Explicit config file (must exist if given)
        project_root: Directory searched for slangkit.yaml when no path given

    Returns:
        ProvisionConfig
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path(project_root or Path.cwd()) / DEFAULT_CONFIG_FILE
    if default_path.exists():
        return parse_config(default_path)

    logger.debug(f"Config file not found (optional): {default_path}")
    return parse_config_dict({}, base_dir=default_path.parent)


def parse_config_dict(data: Dict[str, Any], base_dir: Optional[Path] = None) -> ProvisionConfig:
    """
    Validate a configuration mapping and build a ProvisionConfig.

    Relative ``output_dir`` values are resolved against ``base_dir``.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    strategy = data.get("strategy", "remote-fetch")
    _validate_strategy(strategy)

    target = data.get("target")
    if target is not None and not isinstance(target, str):
        raise ConfigError("'target' must be a target triple string")

    output_dir = data.get("output_dir")
    if output_dir is None:
        output_dir = Path("build") / "slang"
    elif not isinstance(output_dir, str) or not output_dir:
        raise ConfigError(f"'output_dir' must be a non-empty path string, got {output_dir!r}")
    output_dir = resolve_output_dir(output_dir, base_dir)

    release = _parse_release(data.get("release") or {})

    preinstalled = data.get("preinstalled") or {}
    if not isinstance(preinstalled, dict):
        raise ConfigError("'preinstalled' must be a mapping")
    sdk_env = _string_value(preinstalled, "sdk_env", DEFAULT_SDK_ENV, "preinstalled")
    if not sdk_env:
        raise ConfigError("'preinstalled.sdk_env' cannot be empty")

    verify_digest = data.get("verify_digest", True)
    if not isinstance(verify_digest, bool):
        raise ConfigError("'verify_digest' must be true or false")

    config = ProvisionConfig(
        strategy=strategy,
        target=target,
        output_dir=output_dir,
        release=release,
        sdk_env=sdk_env,
        verify_digest=verify_digest,
        base_dir=base_dir,
    )
    return _apply_environment(config)


def _parse_release(data: Dict[str, Any]) -> ReleaseConfig:
    if not isinstance(data, dict):
        raise ConfigError("'release' must be a mapping")

    timeout = data.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        raise ConfigError(f"'release.timeout' must be a positive number, got {timeout!r}")

    user_agent = _string_value(data, "user_agent", DEFAULT_USER_AGENT, "release")
    if not user_agent:
        raise ConfigError("'release.user_agent' cannot be empty (the GitHub API requires one)")

    tag = data.get("tag")
    if tag is None:
        tag = "latest"
    elif isinstance(tag, int) and not isinstance(tag, bool):
        tag = str(tag)
    elif not isinstance(tag, str) or not tag:
        raise ConfigError(f"'release.tag' must be a release tag string, got {tag!r}")

    repository = _string_value(data, "repository", DEFAULT_REPOSITORY, "release")
    api_url = _string_value(data, "api_url", DEFAULT_API_URL, "release").rstrip("/")
    if not repository or not api_url:
        raise ConfigError("'release.repository' and 'release.api_url' cannot be empty")

    return ReleaseConfig(
        tag=tag,
        repository=repository,
        api_url=api_url,
        user_agent=user_agent,
        token=_string_value(data, "token", None, "release"),
        timeout=timeout,
    )


def _string_value(
    data: Dict[str, Any], key: str, default: Optional[str], section: str
) -> Optional[str]:
    """Get an optional string setting; an empty YAML value means the default."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(f"'{section}.{key}' must be a string, got {value!r}")
    return value


def _validate_strategy(strategy: str) -> None:
    if strategy not in STRATEGIES:
        raise ConfigError(
            f"Unknown strategy: {strategy}. Supported: {', '.join(STRATEGIES)}"
        )


def _apply_environment(config: ProvisionConfig) -> ProvisionConfig:
    """Pick up GITHUB_TOKEN when the file did not set a token."""
    if config.release.token is None:
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            config = replace(config, release=replace(config.release, token=token))
    return config


__all__ = [
    "ConfigError",
    "ReleaseConfig",
    "ProvisionConfig",
    "STRATEGIES",
    "DEFAULT_CONFIG_FILE",
    "parse_config",
    "parse_config_dict",
    "load_config",
    "resolve_output_dir",
]
