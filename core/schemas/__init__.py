"""
Module 01 - Schemas & Errors
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import result
models and the error taxonomy.
"""

# Error models and exceptions
from .errors import (
    AllowlistError,
    AllowlistException,
    ErrorCodes,
    HashFunctionUnavailableException,
    InvalidIdentifierException,
    MalformedHashException,
    MemberNotFoundException,
    TreeIntegrityException,
)

# Result models
from .allowlist import (
    AllocationAmount,
    EligibilityResult,
    ProofResult,
    RejectedIdentifier,
    TreeSummary,
)

__all__ = [
    # Errors
    "AllowlistError",
    "AllowlistException",
    "ErrorCodes",
    "HashFunctionUnavailableException",
    "InvalidIdentifierException",
    "MalformedHashException",
    "MemberNotFoundException",
    "TreeIntegrityException",
    # Results
    "AllocationAmount",
    "EligibilityResult",
    "ProofResult",
    "RejectedIdentifier",
    "TreeSummary",
]
