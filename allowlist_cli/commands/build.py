"""
Module 06 - CLI Build Command

Build a Merkle tree from an allowlist file and optionally save it.

Usage:
    allowlist build allowlist.csv [--out tree.json] [--include-proofs] [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import replace

from allowlist_cli.commands.common import (
    EXIT_SUCCESS,
    error,
    get_cli_config,
    print_json,
    wants_json,
)
from core.schemas.allowlist import TreeSummary
from core.schemas.errors import AllowlistException
from orchestrator.artifacts.io import ArtifactIOError, build_from_file, save_tree_artifact


logger = logging.getLogger(__name__)


def print_summary_human(summary: TreeSummary, out_path: str | None = None) -> None:
    """Print summary in human-readable format."""
    print(f"root: {summary.root}")
    print(f"hash_function: {summary.hash_function}")
    print(f"members: {summary.member_count}")
    print(f"depth: {summary.depth}")
    if summary.duplicate_count:
        print(f"duplicates: {summary.duplicate_count}")

    if summary.rejected:
        print(f"\nrejected ({summary.rejected_count}):")
        for rejected in summary.rejected[:20]:
            print(f"  ✗ #{rejected.index} {rejected.value!r} ({rejected.reason})")
        if summary.rejected_count > 20:
            print(f"  ... and {summary.rejected_count - 20} more")

    if out_path:
        print(f"\nsaved: {out_path}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = get_cli_config(args)
    allowlist_path = args.allowlist or config.allowlist_path
    if not allowlist_path:
        return error("No allowlist given")

    if args.strict:
        config = replace(config, invalid_identifier_policy="reject")

    try:
        snapshot = build_from_file(allowlist_path, config=config.to_runtime_config())
    except ArtifactIOError as e:
        return error(str(e))
    except AllowlistException as e:
        return error(f"[{e.code}] {e}")

    out_path = None
    if args.out:
        out_path = str(save_tree_artifact(snapshot, args.out, include_proofs=args.include_proofs))

    summary = snapshot.summary()
    if wants_json(args):
        data = summary.model_dump(mode="json")
        if out_path:
            data["out"] = out_path
        print_json(data)
    else:
        print_summary_human(summary, out_path)

    if summary.rejected:
        logger.warning(f"{summary.rejected_count} identifier(s) skipped")

    return EXIT_SUCCESS
