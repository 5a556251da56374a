"""
Module 07 - API Response Models

Pydantic models for API response serialization. Engine results are
returned as-is inside the response envelopes.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.allowlist import EligibilityResult, ProofResult, TreeSummary


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-allowlist-api"
    version: str = "v1"
    hash_function: str = Field(default="", description="Configured hash function")


class TreeResponse(BaseModel):
    """Response for POST /tree endpoint."""

    ok: bool = True
    summary: TreeSummary = Field(..., description="Root, members and rejected entries")
    layers: list[list[str]] | None = Field(
        default=None,
        description="Tree layers from leaves to root (if requested)",
    )


class ProofResponse(BaseModel):
    """Response for POST /proof endpoint."""

    ok: bool = True
    result: ProofResult


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof reproduces the root")
    address: str = Field(..., description="Checksummed address")
    leaf: str = Field(..., description="Leaf hash of the address")
    root: str = Field(..., description="Root checked against")
    hash_function: str = Field(..., description="Hash function used")


class EligibilityResponse(BaseModel):
    """Response for POST /eligibility endpoint."""

    ok: bool = True
    result: EligibilityResult


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
