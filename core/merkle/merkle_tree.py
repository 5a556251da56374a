"""
Module 02 - Merkle Tree Implementation
Deterministic sorted-pair Merkle tree construction.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Sorted-pair parent hashing
- Layer-by-layer tree construction with odd-node promotion
- An immutable MerkleTree holding every layer for proof generation

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing happens upstream (core.addresses.leaf_for_address)
2. Parent hashing: parent = H(min(a, b) || max(a, b)), bytes compared
   as big-endian unsigned integers
3. Odd node: the last unpaired node is promoted unchanged (no duplication,
   no padding node)
4. Empty leaves: root is 32 zero bytes
5. Single leaf: root = leaf

Determinism Notes:
- Leaf order is defined by the caller and never re-sorted here
- Changing leaf order can change pairings and therefore the root
- Must stay bit-exact with on-chain verifiers using the same scheme
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.crypto.hashing import (
    HASH_LENGTH,
    HashFunction,
    ensure_hash_function,
    keccak256,
    to_hex,
)
from core.schemas.errors import MalformedHashException


logger = logging.getLogger(__name__)

# Empty tree sentinel: 32 zero bytes
EMPTY_TREE_ROOT: bytes = bytes(HASH_LENGTH)


def merkle_parent(left: bytes, right: bytes, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Children are sorted before hashing, so
    merkle_parent(a, b) == merkle_parent(b, a).

    Args:
        left: First child hash
        right: Second child hash
        hash_fn: Hash function shared with leaves and verification

    Returns:
        Parent hash (32 bytes)
    """
    if right < left:
        left, right = right, left
    return hash_fn(left + right)


def _validate_leaves(leaves: Sequence[bytes]) -> list[bytes]:
    validated: list[bytes] = []
    for i, leaf in enumerate(leaves):
        if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != HASH_LENGTH:
            size = len(leaf) if hasattr(leaf, "__len__") else "?"
            raise MalformedHashException(
                f"Leaf {i} must be {HASH_LENGTH} bytes, "
                f"got {type(leaf).__name__} of length {size}",
                field_name=f"leaves[{i}]",
            )
        validated.append(bytes(leaf))
    return validated


def build_layers(
    leaves: Sequence[bytes],
    hash_fn: HashFunction = keccak256,
) -> list[list[bytes]]:
    """
    Build every layer of the tree, leaves first.

    Algorithm:
    1. Layer 0 is the leaves in the given order
    2. Pair consecutive nodes and hash each pair with merkle_parent
    3. If the layer has odd length, promote the last node unchanged
    4. Repeat until a layer holds a single node

    Example: [a, b, c] -> [[a, b, c], [P(a,b), c], [P(P(a,b), c)]]

    Args:
        leaves: 32-byte leaf hashes
        hash_fn: Hash function for interior nodes

    Returns:
        List of layers; an empty input yields [[]]
    """
    current: list[bytes] = list(leaves)
    layers: list[list[bytes]] = [current]

    while len(current) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current), 2):
            if i + 1 < len(current):
                next_level.append(merkle_parent(current[i], current[i + 1], hash_fn))
            else:
                next_level.append(current[i])
        layers.append(next_level)
        current = next_level

    return layers


def build_merkle_root(
    leaves: Sequence[bytes],
    hash_fn: HashFunction = keccak256,
) -> bytes:
    """
    Compute the Merkle root of a sequence of leaf hashes.

    Returns:
        32-byte root (EMPTY_TREE_ROOT for no leaves)
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT
    return build_layers(leaves, hash_fn)[-1][0]


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of layers (leaves and root inclusive).

    A single leaf has depth 1, two or three leaves have depth 2, etc.
    Returns 0 for an empty tree.
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


class MerkleTree:
    """
    Immutable sorted-pair Merkle tree.

    Built once from a snapshot of leaves; every layer is kept so proofs
    can be read off without recomputation. Safe to share between readers.

    Example:
        >>> tree = MerkleTree([keccak256(b"a"), keccak256(b"b")])
        >>> tree.depth
        2
    """

    __slots__ = ("_hash_fn", "_layers", "_index")

    def __init__(
        self,
        leaves: Sequence[bytes],
        hash_fn: HashFunction | None = keccak256,
    ) -> None:
        """
        Args:
            leaves: 32-byte leaf hashes in the order they should be paired
            hash_fn: Hash function for interior nodes (validated up front)

        Raises:
            HashFunctionUnavailableException: If hash_fn is unusable
            MalformedHashException: If any leaf is not 32 bytes
        """
        self._hash_fn = ensure_hash_function(hash_fn)
        validated = _validate_leaves(leaves)
        self._layers: tuple[tuple[bytes, ...], ...] = tuple(
            tuple(layer) for layer in build_layers(validated, self._hash_fn)
        )

        # First occurrence wins for duplicate leaves
        self._index: dict[bytes, int] = {}
        for i, leaf in enumerate(self._layers[0]):
            self._index.setdefault(leaf, i)

        logger.debug(
            f"Built Merkle tree: {len(validated)} leaves, "
            f"{len(self._layers)} layers, root {self.hex_root}"
        )

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._layers[0]

    @property
    def layers(self) -> tuple[tuple[bytes, ...], ...]:
        return self._layers

    @property
    def root(self) -> bytes:
        top = self._layers[-1]
        return top[0] if top else EMPTY_TREE_ROOT

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def depth(self) -> int:
        return len(self._layers) if self.leaves else 0

    def index_of(self, leaf: bytes) -> int | None:
        """Return the leaf-layer index of a leaf (exact byte match), or None."""
        return self._index.get(bytes(leaf))

    def hex_layers(self) -> list[list[str]]:
        """All layers as 0x hex strings, leaves first."""
        return [[to_hex(node) for node in layer] for layer in self._layers]

    def __len__(self) -> int:
        return len(self.leaves)

    def __contains__(self, leaf: object) -> bool:
        return isinstance(leaf, (bytes, bytearray)) and bytes(leaf) in self._index

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={len(self)}, root={self.hex_root})"


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleTree",
    "merkle_parent",
    "build_layers",
    "build_merkle_root",
    "compute_tree_depth",
]
