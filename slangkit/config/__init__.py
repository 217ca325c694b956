"""
Configuration management for slangkit.
"""

from slangkit.config.parser import (
    ConfigError,
    ReleaseConfig,
    ProvisionConfig,
    STRATEGIES,
    DEFAULT_CONFIG_FILE,
    parse_config,
    parse_config_dict,
    load_config,
)

__all__ = [
    "ConfigError",
    "ReleaseConfig",
    "ProvisionConfig",
    "STRATEGIES",
    "DEFAULT_CONFIG_FILE",
    "parse_config",
    "parse_config_dict",
    "load_config",
]
