"""
Core cryptographic utilities.

Module 02 provides the hash capabilities shared by leaf derivation,
tree construction and proof verification.
"""
from .hashing import (
    HASH_LENGTH,
    HashFunction,
    DEFAULT_HASH_FUNCTION,
    HASH_FUNCTIONS,
    keccak256,
    sha256,
    get_hash_function,
    hash_function_name,
    ensure_hash_function,
    to_hex,
    from_hex,
    to_bytes32,
)

__all__ = [
    "HASH_LENGTH",
    "HashFunction",
    "DEFAULT_HASH_FUNCTION",
    "HASH_FUNCTIONS",
    "keccak256",
    "sha256",
    "get_hash_function",
    "hash_function_name",
    "ensure_hash_function",
    "to_hex",
    "from_hex",
    "to_bytes32",
]
