"""
Module 02 - Merkle Proofs
Inclusion proof generation and verification for sorted-pair trees.

Owner: Protocol/Crypto Engineer
Module ID: M02

Proofs carry sibling hashes only. Because parents are hashed with the
sorted-pair rule, the verifier does not need left/right positions, which
is what lets an on-chain verifier consume the same proof.

This module provides:
- MerkleProof: immutable (leaf, siblings, root) triple
- build_merkle_proof: proof for a leaf of a built tree
- verify_merkle_proof: recompute the root from leaf + siblings
- MerkleProver / MerkleVerifier: class-based wrappers bound to a tree
  or hash function
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from core.crypto.hashing import (
    HashFunction,
    ensure_hash_function,
    keccak256,
    to_bytes32,
    to_hex,
)
from core.merkle.merkle_tree import MerkleTree, merkle_parent
from core.schemas.errors import MemberNotFoundException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        siblings: Sibling hashes from bottom to top, skipping layers
                  where the node was promoted without a sibling
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: tuple[bytes, ...]
    root: bytes

    @property
    def hex_siblings(self) -> list[str]:
        return [to_hex(s) for s in self.siblings]

    def __len__(self) -> int:
        return len(self.siblings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf": to_hex(self.leaf),
            "proof": self.hex_siblings,
            "root": to_hex(self.root),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """
        Parse a proof from its dict form.

        Raises:
            MalformedHashException: If any value is not a 32-byte hash
        """
        return cls(
            leaf=to_bytes32(data["leaf"], "leaf"),
            siblings=tuple(
                to_bytes32(s, f"proof[{i}]") for i, s in enumerate(data.get("proof", []))
            ),
            root=to_bytes32(data["root"], "root"),
        )


def build_merkle_proof(tree: MerkleTree, leaf: bytes) -> MerkleProof:
    """
    Generate an inclusion proof for a leaf of a built tree.

    Algorithm:
    1. Locate the leaf in layer 0 by exact byte equality
    2. For each layer below the root:
       - sibling index is idx - 1 if idx is odd, else idx + 1
       - append the sibling if that index exists in the layer
       - idx = idx // 2
    3. A promoted odd node contributes nothing for that layer

    Args:
        tree: The built tree
        leaf: 32-byte leaf hash

    Returns:
        MerkleProof (possibly with zero siblings for a single-leaf tree)

    Raises:
        MalformedHashException: If leaf is not 32 bytes
        MemberNotFoundException: If the leaf is not in the tree
    """
    target = to_bytes32(leaf, "leaf")
    index = tree.index_of(target)
    if index is None:
        raise MemberNotFoundException(
            f"Leaf {to_hex(target)} is not a member of tree {tree.hex_root}",
            leaf=to_hex(target),
        )

    siblings: list[bytes] = []
    for layer in tree.layers[:-1]:
        sibling_index = index - 1 if index % 2 == 1 else index + 1
        if sibling_index < len(layer):
            siblings.append(layer[sibling_index])
        index //= 2

    logger.debug(f"Proof for {to_hex(target)}: {len(siblings)} sibling(s)")

    return MerkleProof(leaf=target, siblings=tuple(siblings), root=tree.root)


def compute_root_from_proof(
    siblings: Sequence[bytes | str],
    leaf: bytes | str,
    hash_fn: HashFunction = keccak256,
) -> bytes:
    """
    Fold a leaf with its siblings using the sorted-pair rule.

    Raises:
        MalformedHashException: If any value is not a 32-byte hash
    """
    current = to_bytes32(leaf, "leaf")
    for i, sibling in enumerate(siblings):
        current = merkle_parent(current, to_bytes32(sibling, f"proof[{i}]"), hash_fn)
    return current


def verify_merkle_proof(
    siblings: Sequence[bytes | str],
    leaf: bytes | str,
    root: bytes | str,
    hash_fn: HashFunction = keccak256,
) -> bool:
    """
    Verify an inclusion proof against an expected root.

    Must use the same hash function as the tree builder; a different
    function produces silent false negatives.

    Args:
        siblings: Sibling hashes, bottom-up (bytes or 0x hex)
        leaf: Leaf hash (bytes or 0x hex)
        root: Expected root (bytes or 0x hex)
        hash_fn: Hash function used to build the tree

    Returns:
        True if the recomputed root equals the expected root

    Raises:
        MalformedHashException: If any value is not a 32-byte hash
    """
    expected = to_bytes32(root, "root")
    return compute_root_from_proof(siblings, leaf, hash_fn) == expected


class MerkleProver:
    """
    Proof generator bound to a built tree.

    Example:
        >>> prover = MerkleProver(tree)
        >>> proof = prover.prove(leaf)
        >>> proof.root == tree.root
        True
    """

    def __init__(self, tree: MerkleTree) -> None:
        self.tree = tree

    def prove(self, leaf: bytes) -> MerkleProof:
        """
        Raises:
            MemberNotFoundException: If the leaf is not in the tree
        """
        return build_merkle_proof(self.tree, leaf)

    def prove_hex(self, leaf: bytes) -> list[str]:
        """Proof siblings as 0x hex strings, for display or contract calls."""
        return self.prove(leaf).hex_siblings

    def try_prove(self, leaf: bytes) -> MerkleProof | None:
        """Return the proof, or None when the leaf is not a member."""
        try:
            return self.prove(leaf)
        except MemberNotFoundException:
            return None


class MerkleVerifier:
    """
    Proof verifier bound to one hash function.

    The hash function is validated on construction so a misconfigured
    verifier fails fast rather than returning false for every proof.
    """

    def __init__(self, hash_fn: HashFunction | None = keccak256) -> None:
        self.hash_fn = ensure_hash_function(hash_fn)

    def verify(self, proof: MerkleProof) -> bool:
        """Verify a MerkleProof against its own root."""
        return verify_merkle_proof(proof.siblings, proof.leaf, proof.root, self.hash_fn)

    def verify_leaf_in_root(
        self,
        leaf: bytes | str,
        siblings: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        """Verify raw components against an externally published root."""
        return verify_merkle_proof(siblings, leaf, root, self.hash_fn)


__all__ = [
    "MerkleProof",
    "build_merkle_proof",
    "compute_root_from_proof",
    "verify_merkle_proof",
    "MerkleProver",
    "MerkleVerifier",
]
