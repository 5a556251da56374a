"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for the allowlist engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Input Errors
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    MALFORMED_HASH = "MALFORMED_HASH"

    # Membership Errors
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"

    # Configuration Errors
    HASH_FUNCTION_UNAVAILABLE = "HASH_FUNCTION_UNAVAILABLE"

    # Merkle & Commitment Errors
    TREE_ROOT_MISMATCH = "TREE_ROOT_MISMATCH"
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"

    # Artifact Errors
    ALLOWLIST_LOAD_ERROR = "ALLOWLIST_LOAD_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AllowlistError(BaseModel):
    """
    Base error model for structured error communication.

    Used to hand errors to callers (CLI, API) without raising,
    so results can carry an error kind alongside partial output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_IDENTIFIER],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "AllowlistException":
        """Convert this error model to a raisable exception."""
        return AllowlistException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AllowlistException(Exception):
    """
    Base exception for all allowlist engine errors.

    Carries structured error information and can be converted
    to/from AllowlistError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ALLOWLIST_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> AllowlistError:
        """Convert this exception to an AllowlistError model."""
        return AllowlistError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidIdentifierException(AllowlistException):
    """Raised when an identifier cannot be canonicalized to a 20-byte address."""

    def __init__(
        self,
        message: str,
        identifier: Any = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if identifier is not None:
            full_details["identifier"] = str(identifier)
        if reason:
            full_details["reason"] = reason
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_IDENTIFIER,
            details=full_details,
        )
        self.identifier = identifier
        self.reason = reason


class MemberNotFoundException(AllowlistException):
    """Raised when a proof is requested for a leaf that is not in the tree."""

    def __init__(
        self,
        message: str,
        leaf: str | None = None,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf:
            full_details["leaf"] = leaf
        if identifier:
            full_details["identifier"] = identifier
        super().__init__(
            message=message,
            code=ErrorCodes.MEMBER_NOT_FOUND,
            details=full_details,
        )


class HashFunctionUnavailableException(AllowlistException):
    """Raised when no usable hash function is configured."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if name:
            full_details["hash_function"] = name
        super().__init__(
            message=message,
            code=ErrorCodes.HASH_FUNCTION_UNAVAILABLE,
            details=full_details,
        )


class MalformedHashException(AllowlistException):
    """Raised when a leaf, root or sibling is not a 32-byte value."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_name:
            full_details["field"] = field_name
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_HASH,
            details=full_details,
        )


class TreeIntegrityException(AllowlistException):
    """Raised when a stored tree does not recompute to its recorded root."""

    def __init__(
        self,
        message: str,
        expected_root: str | None = None,
        actual_root: str | None = None,
        code: str = ErrorCodes.TREE_ROOT_MISMATCH,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected_root:
            full_details["expected_root"] = expected_root
        if actual_root:
            full_details["actual_root"] = actual_root
        super().__init__(
            message=message,
            code=code,
            details=full_details,
        )
