"""
Module 06 - CLI Prove Command

Print the inclusion proof for one address.

Usage:
    allowlist prove 0x... (--allowlist FILE | --tree tree.json) [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from allowlist_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    error,
    print_json,
    resolve_snapshot,
    wants_json,
)
from core.schemas.allowlist import ProofResult
from core.schemas.errors import AllowlistException
from orchestrator.artifacts.io import ArtifactIOError


logger = logging.getLogger(__name__)


def print_proof_human(result: ProofResult) -> None:
    print(f"address: {result.identifier}")
    print(f"leaf: {result.leaf}")
    print(f"root: {result.root}")
    if not result.found:
        print("found: false")
        return
    print("found: true")
    print(f"proof ({len(result.proof)}):")
    for sibling in result.proof:
        print(f"  {sibling}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Returns:
        Exit code (2 if the address is not a member)
    """
    try:
        snapshot = resolve_snapshot(args)
        result = snapshot.proof_for(args.address)
    except (ArtifactIOError, ValueError) as e:
        return error(str(e))
    except AllowlistException as e:
        return error(f"[{e.code}] {e}")

    if wants_json(args):
        print_json(result.model_dump(mode="json"))
    else:
        print_proof_human(result)

    if not result.found:
        logger.info(f"{result.identifier} is not on the allowlist")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
