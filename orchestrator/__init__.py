"""
Module 04 - Allowlist Orchestration

In-process wiring of address canonicalization and the Merkle engine
into the operations a presentation layer calls.

Public API:
- AllowlistService: Current-snapshot facade (build_tree, get_proof,
  verify, get_allocation, check_eligibility)
- AllowlistTree: Immutable built snapshot
- build_allowlist: Build a snapshot from raw identifiers
- normalize_allocations: Re-key allocation metadata by checksum address
"""

from orchestrator.allowlist import (
    AllowlistService,
    AllowlistTree,
    build_allowlist,
    normalize_allocations,
)


__all__ = [
    "AllowlistService",
    "AllowlistTree",
    "build_allowlist",
    "normalize_allocations",
]
