"""
Module 01 - Schemas & Errors
File: allowlist.py

Purpose: Structured results returned by the allowlist engine.
Callers (CLI, API, any presentation layer) own display state; the
engine only returns these models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import AllowlistError


HEX32_PATTERN = r"^0x[0-9a-f]{64}$"

# Allocation amounts are opaque metadata carried next to members
AllocationAmount = int | float | str


class RejectedIdentifier(BaseModel):
    """An input entry that failed canonicalization during ingestion."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(
        ...,
        ge=0,
        description="Position of the entry in the input sequence",
    )
    value: str = Field(
        ...,
        description="The raw input value (stringified)",
    )
    reason: str = Field(
        ...,
        description="Machine-readable rejection reason",
        examples=["bad_checksum", "wrong_length", "malformed_hex"],
    )
    message: str = Field(
        default="",
        description="Human-readable explanation",
    )


class TreeSummary(BaseModel):
    """
    Result of building an allowlist tree.

    The root is what gets published (e.g. to a contract); the canonical
    identifiers are in leaf order so callers can display them.
    """

    model_config = ConfigDict(extra="forbid")

    root: str = Field(
        ...,
        pattern=HEX32_PATTERN,
        description="Merkle root as 0x-prefixed lowercase hex",
    )
    hash_function: str = Field(
        ...,
        description="Name of the hash function used for leaves and nodes",
    )
    member_count: int = Field(
        ...,
        ge=0,
        description="Number of distinct members (leaves)",
    )
    depth: int = Field(
        ...,
        ge=0,
        description="Number of layers including leaves and root",
    )
    canonical_identifiers: list[str] = Field(
        default_factory=list,
        description="Checksummed identifiers in leaf order",
    )
    rejected: list[RejectedIdentifier] = Field(
        default_factory=list,
        description="Input entries skipped because they failed canonicalization",
    )
    duplicate_count: int = Field(
        default=0,
        ge=0,
        description="Entries dropped because they normalized to an existing member",
    )

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


class ProofResult(BaseModel):
    """
    Proof lookup outcome for one identifier.

    found=False means "no proof available". It is never a valid empty proof,
    which only exists for the sole member of a single-leaf tree.
    """

    model_config = ConfigDict(extra="forbid")

    identifier: str = Field(..., description="Checksummed identifier")
    leaf: str = Field(..., pattern=HEX32_PATTERN, description="Leaf hash")
    found: bool = Field(..., description="Whether the leaf is a member of the tree")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes from leaf to root as 0x hex",
    )
    root: str = Field(..., pattern=HEX32_PATTERN, description="Root the proof targets")

    @classmethod
    def not_found(cls, identifier: str, leaf: str, root: str) -> "ProofResult":
        """Create a result for a non-member."""
        return cls(identifier=identifier, leaf=leaf, found=False, proof=[], root=root)


class EligibilityResult(BaseModel):
    """
    Outcome of an eligibility check: membership proof plus allocation.

    Invalid input produces eligible=False with an error attached instead
    of raising, so a caller can render one result shape.
    """

    model_config = ConfigDict(extra="forbid")

    identifier: str = Field(
        ...,
        description="Checksummed identifier, or the raw input when it was invalid",
    )
    eligible: bool = Field(..., description="Whether the proof verified against the root")
    amount: AllocationAmount = Field(
        default=0,
        description="Allocation looked up for the identifier (0 if none)",
    )
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes from leaf to root as 0x hex",
    )
    root: str = Field(..., pattern=HEX32_PATTERN, description="Root checked against")
    error: AllowlistError | None = Field(
        default=None,
        description="Error details when the identifier could not be checked",
    )

    def to_dict(self) -> dict[str, Any]:
        d = self.model_dump(mode="json")
        if d["error"] is None:
            del d["error"]
        return d
