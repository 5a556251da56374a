"""
Module 06 - CLI Check Command

Eligibility check: is this address on the allowlist, and for how much?

Usage:
    allowlist check 0x... (--allowlist FILE | --tree tree.json) [--json]
"""

from __future__ import annotations

from argparse import Namespace

from allowlist_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    error,
    print_json,
    resolve_snapshot,
    wants_json,
)
from core.schemas.allowlist import EligibilityResult
from core.schemas.errors import AllowlistException, ErrorCodes
from orchestrator.artifacts.io import ArtifactIOError


def print_result_human(result: EligibilityResult) -> None:
    if result.eligible:
        print(f"✓ {result.identifier} is eligible")
        print(f"  amount: {result.amount}")
        print(f"  proof: {len(result.proof)} sibling(s)")
    elif result.error is not None:
        print(f"✗ {result.identifier}: {result.error.message}")
    else:
        print(f"✗ {result.identifier} is not eligible")
    print(f"  root: {result.root}")


def check_cmd(args: Namespace) -> int:
    """
    Execute the check command.

    Returns:
        Exit code (2 if not eligible, 1 if the address is invalid)
    """
    try:
        snapshot = resolve_snapshot(args)
    except (ArtifactIOError, ValueError) as e:
        return error(str(e))
    except AllowlistException as e:
        return error(f"[{e.code}] {e}")

    result = snapshot.check_eligibility(args.address)

    if wants_json(args):
        print_json(result.to_dict())
    else:
        print_result_human(result)

    if result.eligible:
        return EXIT_SUCCESS
    if result.error is not None and result.error.code == ErrorCodes.INVALID_IDENTIFIER:
        return EXIT_RUNTIME_ERROR
    return EXIT_VERIFICATION_FAILED
