"""
Module 06 - CLI Configuration

Configuration management for the allowlist CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from core.config.runtime import ENV_PREFIX, MerkleConfig, RuntimeConfig
from core.crypto.hashing import DEFAULT_HASH_FUNCTION


CONFIG_FILE_NAME = "merkle-allowlist.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree construction
    hash_function: str = DEFAULT_HASH_FUNCTION
    invalid_identifier_policy: str = "skip"

    # Default inputs
    allowlist_path: str | None = None
    tree_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_runtime_config(self) -> RuntimeConfig:
        """
        Build the engine configuration.

        Raises:
            ValueError: If the invalid-identifier policy is unknown
        """
        return RuntimeConfig(
            merkle=MerkleConfig(
                hash_function=self.hash_function,
                invalid_identifier_policy=self.invalid_identifier_policy,
            ),
            allowlist_path=self.allowlist_path,
            log_level=self.log_level,
        )


# Env var suffix -> CLIConfig attribute
_ENV_FIELDS = {
    "HASH_FUNCTION": "hash_function",
    "INVALID_POLICY": "invalid_identifier_policy",
    "PATH": "allowlist_path",
    "TREE_PATH": "tree_path",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "OUTPUT_FORMAT": "default_output_format",
}


def load_config_from_env(config: CLIConfig | None = None) -> CLIConfig:
    """Apply environment variables on top of a configuration (or defaults)."""
    config = config or CLIConfig()

    for suffix, attr in _ENV_FIELDS.items():
        value = os.getenv(f"{ENV_PREFIX}{suffix}")
        if value:
            setattr(config, attr, value)

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    merkle = data.get("merkle") or {}
    config.hash_function = merkle.get("hash_function") or config.hash_function
    config.invalid_identifier_policy = (
        merkle.get("invalid_identifier_policy") or config.invalid_identifier_policy
    )

    config.allowlist_path = data.get("allowlist_path", config.allowlist_path)
    config.tree_path = data.get("tree_path", config.tree_path)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / CONFIG_FILE_NAME,
            Path.cwd() / f".{CONFIG_FILE_NAME}",
            Path.home() / ".config" / "merkle-allowlist" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return load_config_from_env(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "merkle": {
    "hash_function": "keccak256",
    "invalid_identifier_policy": "skip"
  },
  "allowlist_path": "allowlist.csv",
  "tree_path": null,
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
