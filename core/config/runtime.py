"""
Runtime Configuration

Central configuration for hash selection, ingestion policy and logging.
The hash capability is chosen here once; nothing probes for backends
at runtime.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.addresses.checksum import INVALID_IDENTIFIER_POLICIES
from core.crypto.hashing import DEFAULT_HASH_FUNCTION, HashFunction, get_hash_function

load_dotenv()


ENV_PREFIX = "ALLOWLIST_"


@dataclass
class MerkleConfig:
    """Configuration for tree construction."""
    hash_function: str = DEFAULT_HASH_FUNCTION
    invalid_identifier_policy: str = "skip"

    def __post_init__(self):
        if self.hash_function is None:
            self.hash_function = DEFAULT_HASH_FUNCTION
        if self.invalid_identifier_policy is None:
            self.invalid_identifier_policy = "skip"
        for name in ("hash_function", "invalid_identifier_policy"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {type(value).__name__}")

        self.hash_function = self.hash_function.strip().lower()
        self.invalid_identifier_policy = self.invalid_identifier_policy.strip().lower()
        if self.invalid_identifier_policy not in INVALID_IDENTIFIER_POLICIES:
            raise ValueError(
                f"invalid_identifier_policy must be one of "
                f"{', '.join(INVALID_IDENTIFIER_POLICIES)}, "
                f"got {self.invalid_identifier_policy!r}"
            )

    def resolve_hash_function(self) -> HashFunction:
        """
        Resolve the configured hash capability.

        Raises:
            HashFunctionUnavailableException: If the name is not registered
        """
        return get_hash_function(self.hash_function)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    allowlist_path: Optional[str] = None
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - ALLOWLIST_HASH_FUNCTION: Hash function name (keccak256, sha256)
        - ALLOWLIST_INVALID_POLICY: Invalid identifier policy (skip, reject)
        - ALLOWLIST_PATH: Default allowlist file
        - ALLOWLIST_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_FUNCTION"):
            overrides.setdefault("merkle", {})["hash_function"] = os.getenv(
                f"{ENV_PREFIX}HASH_FUNCTION"
            )
        if os.getenv(f"{ENV_PREFIX}INVALID_POLICY"):
            overrides.setdefault("merkle", {})["invalid_identifier_policy"] = os.getenv(
                f"{ENV_PREFIX}INVALID_POLICY"
            )

        if os.getenv(f"{ENV_PREFIX}PATH"):
            overrides["allowlist_path"] = os.getenv(f"{ENV_PREFIX}PATH")
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Create configuration from a dictionary."""
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")
        merkle_data = data.get("merkle", {})
        merkle = MerkleConfig(**merkle_data) if merkle_data else MerkleConfig()

        return cls(
            merkle=merkle,
            allowlist_path=data.get("allowlist_path"),
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "merkle" in overrides:
            merged = {
                "hash_function": new_config.merkle.hash_function,
                "invalid_identifier_policy": new_config.merkle.invalid_identifier_policy,
            }
            merged.update(overrides["merkle"])
            new_config.merkle = MerkleConfig(**merged)

        if "allowlist_path" in overrides:
            new_config.allowlist_path = overrides["allowlist_path"]
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": {
                "hash_function": self.merkle.hash_function,
                "invalid_identifier_policy": self.merkle.invalid_identifier_policy,
            },
            "allowlist_path": self.allowlist_path,
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
