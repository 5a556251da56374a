"""
Module 07 - API Dependencies

Dependency injection for the API.
Provides the runtime configuration and per-request snapshots.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from api.models.requests import AllowlistRequest
from core.config.runtime import MerkleConfig, RuntimeConfig
from orchestrator.allowlist import AllowlistTree, build_allowlist

logger = logging.getLogger(__name__)


CONFIG_SEARCH_PATHS = (
    Path("merkle-allowlist.json"),
    Path(".merkle-allowlist.json"),
    Path("~/.config/merkle-allowlist/config.json"),
)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./merkle-allowlist.json
      2. ./.merkle-allowlist.json
      3. ~/.config/merkle-allowlist/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    config: RuntimeConfig | None = None

    for candidate in CONFIG_SEARCH_PATHS:
        path = candidate.expanduser()
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                config = RuntimeConfig.from_dict(data)
                logger.info(f"Loaded config from {path}")
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        # No config file found, use defaults
        config = RuntimeConfig()

    # Always apply environment variable overrides
    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    """FastAPI dependency: the server's runtime configuration."""
    return _load_runtime_config()


def config_for_request(config: RuntimeConfig, request: AllowlistRequest) -> RuntimeConfig:
    """Apply a request's hash and policy overrides to the server config."""
    if request.hash_function is None and request.invalid_identifier_policy is None:
        return config
    return RuntimeConfig(
        merkle=MerkleConfig(
            hash_function=request.hash_function or config.merkle.hash_function,
            invalid_identifier_policy=(
                request.invalid_identifier_policy
                or config.merkle.invalid_identifier_policy
            ),
        ),
        allowlist_path=config.allowlist_path,
        log_level=config.log_level,
        extra=config.extra,
    )


def build_snapshot(request: AllowlistRequest, config: RuntimeConfig) -> AllowlistTree:
    """
    Build the snapshot a request describes.

    Raises:
        AllowlistException: Propagated to the app's error handlers
    """
    return build_allowlist(
        request.addresses,
        allocations=request.allocations,
        config=config_for_request(config, request),
    )
