"""
Runtime Configuration Module

Provides configuration loading and management for the allowlist engine.
"""

from .runtime import (
    ENV_PREFIX,
    MerkleConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ENV_PREFIX",
    "MerkleConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
