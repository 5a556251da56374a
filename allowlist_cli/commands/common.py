"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from allowlist_cli.config import CLIConfig
from orchestrator.allowlist import AllowlistTree
from orchestrator.artifacts.io import build_from_file, load_tree_artifact

logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def get_cli_config(args: Namespace) -> CLIConfig:
    """Config attached by main(), or defaults when a command is called directly."""
    return getattr(args, "cli_config", None) or CLIConfig()


def wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    return get_cli_config(args).default_output_format == "json"


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR


def resolve_snapshot(args: Namespace) -> AllowlistTree:
    """
    Load the snapshot a command operates on.

    A saved tree (--tree) takes precedence over an allowlist file
    (--allowlist); config defaults are used when neither is given.
    A saved tree keeps the hash function it was built with; an explicit
    --hash-function that disagrees is an error.

    Raises:
        ValueError: If no source is available, or --hash-function
            disagrees with a saved tree
        ArtifactIOError: If the file can't be read
        TreeIntegrityException: If a saved tree fails its integrity check
    """
    config = get_cli_config(args)
    tree_path = getattr(args, "tree", None)
    allowlist_path = getattr(args, "allowlist", None)

    if tree_path is None and allowlist_path is None:
        tree_path = config.tree_path
        allowlist_path = config.allowlist_path

    if tree_path:
        snapshot = load_tree_artifact(tree_path)
        requested = getattr(args, "hash_function", None)
        if requested and requested != snapshot.hash_function:
            raise ValueError(
                f"--hash-function {requested} does not match the saved tree's "
                f"{snapshot.hash_function}: {tree_path}"
            )
        if config.hash_function.strip().lower() != snapshot.hash_function:
            logger.warning(
                f"Configured hash function {config.hash_function} ignored; "
                f"{tree_path} was built with {snapshot.hash_function}"
            )
        return snapshot
    if allowlist_path:
        return build_from_file(allowlist_path, config=config.to_runtime_config())

    raise ValueError("No allowlist given: pass --allowlist or --tree")
