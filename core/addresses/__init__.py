"""
Module 03 - Address Canonicalization and Leaf Derivation

This module provides:
- normalize_address: EIP-55 checksummed form of an address
- canonical_encoding: the 20 raw address bytes
- leaf_for_address: hash of the canonical encoding
- normalize_addresses: batch normalization with deduplication and a
  rejected-entries report

Usage:
    from core.addresses import normalize_addresses, leaves_for_addresses

    report = normalize_addresses(raw_addresses)
    leaves = leaves_for_addresses(report.canonical)
"""
from .checksum import (
    ADDRESS_LENGTH,
    INVALID_IDENTIFIER_POLICIES,
    InvalidIdentifierPolicy,
    NormalizationReport,
    normalize_address,
    canonical_encoding,
    is_valid_address,
    normalize_addresses,
)
from .leaf import (
    leaf_for_address,
    leaves_for_addresses,
)


__all__ = [
    "ADDRESS_LENGTH",
    "INVALID_IDENTIFIER_POLICIES",
    "InvalidIdentifierPolicy",
    "NormalizationReport",
    "normalize_address",
    "canonical_encoding",
    "is_valid_address",
    "normalize_addresses",
    "leaf_for_address",
    "leaves_for_addresses",
]
