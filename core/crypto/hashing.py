"""
Module 02 - Hashing Utilities
Hash capabilities and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- keccak256 (the reference hash used by on-chain verifiers)
- sha256 (alternative backend for off-chain deployments)
- A named registry of hash capabilities, resolved once at configuration time
- Hex encoding/decoding with 0x prefix and 32-byte validation

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- The same hash function must be used for leaves, interior nodes and
  verification; mixing backends silently breaks proofs
"""
from __future__ import annotations

import hashlib
from typing import Callable

from eth_utils import keccak

from core.schemas.errors import HashFunctionUnavailableException, MalformedHashException


HASH_LENGTH = 32

HashFunction = Callable[[bytes], bytes]


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes (Ethereum flavour, not SHA3-256).

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


DEFAULT_HASH_FUNCTION = "keccak256"

HASH_FUNCTIONS: dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hash_function(name: str | None = None) -> HashFunction:
    """
    Resolve a hash capability by name.

    Args:
        name: Registered hash name (defaults to keccak256)

    Returns:
        The hash function

    Raises:
        HashFunctionUnavailableException: If the name is not registered
    """
    key = (name or DEFAULT_HASH_FUNCTION).strip().lower()
    try:
        return HASH_FUNCTIONS[key]
    except KeyError:
        raise HashFunctionUnavailableException(
            f"Unknown hash function: {name!r} "
            f"(available: {', '.join(sorted(HASH_FUNCTIONS))})",
            name=name,
        ) from None


def hash_function_name(hash_fn: HashFunction) -> str | None:
    """Return the registry name of a hash function, or None for custom callables."""
    for name, fn in HASH_FUNCTIONS.items():
        if fn is hash_fn:
            return name
    return None


def ensure_hash_function(hash_fn: HashFunction | None) -> HashFunction:
    """
    Validate an injected hash function before any tree work starts.

    The function is probed once with empty input and must return
    exactly 32 bytes.

    Raises:
        HashFunctionUnavailableException: If missing, not callable,
            failing, or producing digests of the wrong size
    """
    if hash_fn is None:
        raise HashFunctionUnavailableException("No hash function configured")
    if not callable(hash_fn):
        raise HashFunctionUnavailableException(
            f"Hash function is not callable: {type(hash_fn).__name__}"
        )

    try:
        probe = hash_fn(b"")
    except Exception as e:
        raise HashFunctionUnavailableException(
            f"Hash function failed on probe input: {e}"
        ) from e

    if not isinstance(probe, (bytes, bytearray)) or len(probe) != HASH_LENGTH:
        raise HashFunctionUnavailableException(
            f"Hash function must return {HASH_LENGTH} bytes, "
            f"got {type(probe).__name__} of length {len(probe) if hasattr(probe, '__len__') else '?'}"
        )

    return hash_fn


def to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def to_bytes32(value: bytes | bytearray | str, field_name: str = "value") -> bytes:
    """
    Coerce a 32-byte hash given as bytes or 0x-hex into bytes.

    Raises:
        MalformedHashException: If the value is not exactly 32 bytes
    """
    if isinstance(value, str):
        try:
            raw = from_hex(value.strip())
        except ValueError as e:
            raise MalformedHashException(
                f"{field_name} is not valid hex: {e}", field_name=field_name
            ) from e
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise MalformedHashException(
            f"{field_name} must be bytes or hex string, got {type(value).__name__}",
            field_name=field_name,
        )

    if len(raw) != HASH_LENGTH:
        raise MalformedHashException(
            f"{field_name} must be {HASH_LENGTH} bytes, got {len(raw)}",
            field_name=field_name,
        )
    return raw


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
