"""
Module 06 - CLI Verify Command

Verify an inclusion proof offline. Only the address, root and proof are
needed; the allowlist itself is not.

Usage:
    allowlist verify 0x... --root 0x... --proof 0x...,0x... [--json]
    allowlist verify 0x... --root 0x... --proof-file proof.json [--json]

A proof file holds either a JSON list of hex siblings or an object with a
"proof" list (as printed by `allowlist prove --json`).
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from allowlist_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    error,
    get_cli_config,
    print_json,
    wants_json,
)
from core.addresses import leaf_for_address, normalize_address
from core.crypto.hashing import get_hash_function, to_bytes32, to_hex
from core.merkle import verify_merkle_proof
from core.schemas.errors import AllowlistException


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    address: str = ""
    leaf: str = ""
    root: str = ""
    proof_length: int = 0
    hash_function: str = ""
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_proof_arg(value: str) -> list[str]:
    """Split a comma separated sibling list; an empty string is an empty proof."""
    return [part.strip() for part in value.split(",") if part.strip()]


def load_proof_file(path: str | Path) -> list[str]:
    """
    Raises:
        ValueError: If the file holds neither a list nor an object with "proof"
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("proof")
    if not isinstance(data, list):
        raise ValueError(f"Proof file {path} must contain a list of hex siblings")
    return [str(s) for s in data]


def print_summary_human(summary: VerifySummary) -> None:
    print(f"address: {summary.address}")
    print(f"leaf: {summary.leaf}")
    print(f"root: {summary.root}")
    print(f"proof_length: {summary.proof_length}")
    print(f"hash_function: {summary.hash_function}")
    print(f"valid: {str(summary.valid).lower()}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 if the proof does not verify)
    """
    config = get_cli_config(args)

    try:
        if args.proof_file:
            proof = load_proof_file(args.proof_file)
        else:
            proof = parse_proof_arg(args.proof or "")
    except (OSError, ValueError) as e:
        return error(f"Could not read proof: {e}")

    try:
        hash_fn = get_hash_function(config.hash_function)
        address = normalize_address(args.address)
        leaf = leaf_for_address(address, hash_fn)
        root = to_bytes32(args.root, "root")
        valid = verify_merkle_proof(proof, leaf, root, hash_fn)
    except AllowlistException as e:
        return error(f"[{e.code}] {e}")

    summary = VerifySummary(
        address=address,
        leaf=to_hex(leaf),
        root=to_hex(root),
        proof_length=len(proof),
        hash_function=config.hash_function,
        valid=valid,
    )

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    if valid:
        logger.info("Proof verified")
        return EXIT_SUCCESS
    logger.warning("Proof did not verify")
    return EXIT_VERIFICATION_FAILED
