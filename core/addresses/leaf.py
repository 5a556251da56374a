"""
Module 03 - Leaf Derivation
Maps an address to its Merkle leaf.

Rule: leaf = hash_fn(canonical_encoding(address))
With the default keccak256 this matches
keccak256(abi.encodePacked(address)) on-chain.
"""
from __future__ import annotations

from typing import Any, Iterable

from core.addresses.checksum import canonical_encoding
from core.crypto.hashing import HashFunction, keccak256


def leaf_for_address(identifier: Any, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Derive the 32-byte leaf for an address.

    Any accepted surface form of the same address yields the same leaf.

    Raises:
        InvalidIdentifierException: If the address is invalid
    """
    return hash_fn(canonical_encoding(identifier))


def leaves_for_addresses(
    identifiers: Iterable[Any],
    hash_fn: HashFunction = keccak256,
) -> list[bytes]:
    """Derive leaves for already-validated addresses, preserving order."""
    return [leaf_for_address(identifier, hash_fn) for identifier in identifiers]


__all__ = [
    "leaf_for_address",
    "leaves_for_addresses",
]
