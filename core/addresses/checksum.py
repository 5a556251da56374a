"""
Module 03 - Address Canonicalization
Normalizes account addresses to their EIP-55 checksum form and
canonical 20-byte encoding.

Owner: Protocol/Crypto Engineer
Module ID: M03

Canonicalization Rules (Hard Contracts):
1. Surrounding whitespace is stripped; the 0x prefix is optional on input,
   but an uppercase 0X prefix is rejected
2. The body must be exactly 40 hex digits
3. All-lowercase and all-uppercase bodies are accepted as-is
4. Mixed-case bodies must carry a valid EIP-55 checksum
5. Anything else is rejected, never guessed at
"""
from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from eth_utils import (
    is_checksum_address,
    is_hex_address,
    remove_0x_prefix,
    to_canonical_address,
    to_checksum_address,
)

from core.schemas.allowlist import RejectedIdentifier
from core.schemas.errors import InvalidIdentifierException


logger = logging.getLogger(__name__)

ADDRESS_LENGTH = 20

InvalidIdentifierPolicy = Literal["skip", "reject"]
INVALID_IDENTIFIER_POLICIES: tuple[str, ...] = ("skip", "reject")

_HEX_DIGITS = frozenset(string.hexdigits)


def normalize_address(identifier: Any) -> str:
    """
    Canonicalize an address to its EIP-55 checksummed string.

    Args:
        identifier: Raw address (0x-prefixed or bare, any accepted casing)

    Returns:
        Checksummed address, e.g. "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    Raises:
        InvalidIdentifierException: If the input is not a well-formed address
            or carries a bad checksum
    """
    if not isinstance(identifier, str):
        raise InvalidIdentifierException(
            f"Address must be a string, got {type(identifier).__name__}",
            identifier=identifier,
            reason="not_a_string",
        )

    candidate = identifier.strip()
    if not candidate:
        raise InvalidIdentifierException(
            "Address is empty",
            identifier=identifier,
            reason="empty",
        )

    if candidate.startswith("0X"):
        raise InvalidIdentifierException(
            f"Address prefix must be lowercase 0x: {candidate!r}",
            identifier=identifier,
            reason="malformed_hex",
        )

    if not is_hex_address(candidate):
        body = candidate[2:] if candidate.startswith("0x") else candidate
        if body and all(c in _HEX_DIGITS for c in body):
            raise InvalidIdentifierException(
                f"Address must be 20 bytes (40 hex digits), got {len(body)} digits",
                identifier=identifier,
                reason="wrong_length",
            )
        raise InvalidIdentifierException(
            f"Address is not valid hex: {candidate!r}",
            identifier=identifier,
            reason="malformed_hex",
        )

    body = remove_0x_prefix(candidate)
    prefixed = "0x" + body

    mixed_case = body != body.lower() and body != body.upper()
    if mixed_case and not is_checksum_address(prefixed):
        raise InvalidIdentifierException(
            f"Address has an invalid EIP-55 checksum: {candidate}",
            identifier=identifier,
            reason="bad_checksum",
        )

    return to_checksum_address("0x" + body.lower())


def canonical_encoding(identifier: Any) -> bytes:
    """
    Return the canonical 20-byte encoding of an address.

    This is exactly what Solidity's abi.encodePacked(address) produces.

    Raises:
        InvalidIdentifierException: If the input is not a valid address
    """
    return to_canonical_address(normalize_address(identifier))


def is_valid_address(identifier: Any) -> bool:
    """Check whether an identifier canonicalizes without raising."""
    try:
        normalize_address(identifier)
    except InvalidIdentifierException:
        return False
    return True


@dataclass
class NormalizationReport:
    """
    Outcome of normalizing a batch of identifiers.

    Attributes:
        canonical: Distinct checksummed addresses in first-seen input order
        rejected: Entries that failed canonicalization
        duplicate_count: Entries dropped as duplicates after normalization
    """
    canonical: list[str] = field(default_factory=list)
    rejected: list[RejectedIdentifier] = field(default_factory=list)
    duplicate_count: int = 0

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


def normalize_addresses(
    identifiers: Iterable[Any],
    *,
    policy: InvalidIdentifierPolicy = "skip",
) -> NormalizationReport:
    """
    Normalize and deduplicate a batch of identifiers.

    Order is preserved by first occurrence; two surface forms of the
    same address count as one member.

    Args:
        identifiers: Raw identifiers in input order
        policy: "skip" drops invalid entries and reports them,
                "reject" raises on the first invalid entry

    Returns:
        NormalizationReport with canonical members and rejected entries

    Raises:
        InvalidIdentifierException: Under the "reject" policy
        ValueError: If the policy is unknown
    """
    if policy not in INVALID_IDENTIFIER_POLICIES:
        raise ValueError(
            f"Unknown invalid-identifier policy: {policy!r} "
            f"(expected one of {', '.join(INVALID_IDENTIFIER_POLICIES)})"
        )

    report = NormalizationReport()
    seen: set[str] = set()

    for index, raw in enumerate(identifiers):
        try:
            checksummed = normalize_address(raw)
        except InvalidIdentifierException as e:
            if policy == "reject":
                raise
            report.rejected.append(
                RejectedIdentifier(
                    index=index,
                    value=str(raw),
                    reason=e.reason or "invalid",
                    message=e.message,
                )
            )
            continue

        if checksummed in seen:
            report.duplicate_count += 1
            continue

        seen.add(checksummed)
        report.canonical.append(checksummed)

    if report.rejected:
        logger.warning(
            f"Skipped {report.rejected_count} invalid identifier(s): "
            + ", ".join(f"#{r.index} ({r.reason})" for r in report.rejected[:10])
        )
    if report.duplicate_count:
        logger.info(f"Dropped {report.duplicate_count} duplicate identifier(s)")

    return report


__all__ = [
    "ADDRESS_LENGTH",
    "INVALID_IDENTIFIER_POLICIES",
    "InvalidIdentifierPolicy",
    "NormalizationReport",
    "normalize_address",
    "canonical_encoding",
    "is_valid_address",
    "normalize_addresses",
]
