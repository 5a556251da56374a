"""API request and response models."""

from api.models.requests import (
    AllowlistRequest,
    EligibilityRequest,
    ProofRequest,
    TreeRequest,
    VerifyRequest,
)
from api.models.responses import (
    EligibilityResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ProofResponse,
    TreeResponse,
    VerifyResponse,
)

__all__ = [
    "AllowlistRequest",
    "TreeRequest",
    "ProofRequest",
    "EligibilityRequest",
    "VerifyRequest",
    "HealthResponse",
    "TreeResponse",
    "ProofResponse",
    "VerifyResponse",
    "EligibilityResponse",
    "ErrorDetail",
    "ErrorResponse",
]
