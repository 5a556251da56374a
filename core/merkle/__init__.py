"""
Module 02 - Merkle Tree and Commitments
Sorted-pair Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleTree: Immutable tree holding every layer
- MerkleProof: Dataclass representing an inclusion proof
- build_merkle_root: Compute root from leaf hashes
- build_merkle_proof: Generate proof for a leaf of a tree
- verify_merkle_proof: Verify a proof against an expected root

Canonical Commitment Rules:
1. Leaf hashing: keccak256(20-byte address)  (see core.addresses)
2. Parent hashing: keccak256(min(a, b) + max(a, b))
3. Odd node: promoted unchanged to the next layer
4. Empty tree: 32 zero bytes
5. Single leaf: root = leaf

Usage:
    from core.addresses import leaf_for_address
    from core.merkle import MerkleTree, build_merkle_proof, verify_merkle_proof

    leaves = [leaf_for_address(a) for a in addresses]
    tree = MerkleTree(leaves)

    proof = build_merkle_proof(tree, leaves[2])
    assert verify_merkle_proof(proof.siblings, leaves[2], tree.root)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleTree,
    merkle_parent,
    build_layers,
    build_merkle_root,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProof,
    build_merkle_proof,
    compute_root_from_proof,
    verify_merkle_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
