"""
Module 07 - API Request Models

Pydantic models for API request validation.

The API is stateless: requests that need a tree carry the allowlist
and the tree is rebuilt per request.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from core.schemas.allowlist import AllocationAmount


class HashSelection(BaseModel):
    """Optional per-request hash function override."""

    hash_function: str | None = Field(
        default=None,
        description="Hash function name (default: server configuration)",
        examples=["keccak256"],
    )


class AllowlistRequest(HashSelection):
    """Fields shared by requests that build a tree."""

    addresses: list[Any] = Field(
        ...,
        max_length=100_000,
        description="Allowlist entries in leaf order",
    )
    allocations: dict[str, AllocationAmount] | None = Field(
        default=None,
        description="Optional address -> allocation amount",
    )
    invalid_identifier_policy: Literal["skip", "reject"] | None = Field(
        default=None,
        description="Skip invalid entries (reported) or reject the request",
    )


class TreeRequest(AllowlistRequest):
    """Request body for POST /tree endpoint."""

    include_layers: bool = Field(
        default=False,
        description="Include every tree layer (hex) in the response",
    )


class ProofRequest(AllowlistRequest):
    """Request body for POST /proof endpoint."""

    address: str = Field(..., min_length=1, description="Address to prove")


class EligibilityRequest(AllowlistRequest):
    """Request body for POST /eligibility endpoint."""

    address: str = Field(..., min_length=1, description="Address to check")


class VerifyRequest(HashSelection):
    """Request body for POST /verify endpoint."""

    address: str = Field(..., min_length=1, description="Address the proof is for")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes from leaf to root (0x hex)",
    )
    root: str = Field(..., description="Expected Merkle root (0x hex)")
