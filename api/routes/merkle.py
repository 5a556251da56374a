"""
Module 07 - Merkle Routes

Tree building, proofs, verification and eligibility.

Every route that needs a tree rebuilds it from the request body, so the
server holds no allowlist state between requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import build_snapshot, get_runtime_config
from api.errors import MemberNotFoundError, from_allowlist_exception
from api.models.requests import EligibilityRequest, ProofRequest, TreeRequest, VerifyRequest
from api.models.responses import (
    EligibilityResponse,
    ProofResponse,
    TreeResponse,
    VerifyResponse,
)
from core.addresses import leaf_for_address, normalize_address
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import get_hash_function, to_bytes32, to_hex
from core.merkle import verify_merkle_proof
from core.schemas.errors import AllowlistException


logger = logging.getLogger(__name__)

router = APIRouter(tags=["merkle"])


@router.post("/tree", response_model=TreeResponse)
async def build_tree(
    request: TreeRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> TreeResponse:
    """
    Build a Merkle tree over the submitted addresses.

    Invalid entries are skipped and reported under summary.rejected
    unless invalid_identifier_policy is "reject".
    """
    try:
        snapshot = build_snapshot(request, config)
    except AllowlistException as e:
        raise from_allowlist_exception(e) from e

    summary = snapshot.summary()
    if summary.rejected:
        logger.info(f"/tree skipped {summary.rejected_count} invalid entr{'y' if summary.rejected_count == 1 else 'ies'}")

    return TreeResponse(
        ok=True,
        summary=summary,
        layers=snapshot.tree.hex_layers() if request.include_layers else None,
    )


@router.post("/proof", response_model=ProofResponse)
async def get_proof(
    request: ProofRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> ProofResponse:
    """
    Inclusion proof for one address.

    Returns 404 MEMBER_NOT_FOUND when the address is valid but not listed.
    """
    try:
        snapshot = build_snapshot(request, config)
        result = snapshot.proof_for(request.address)
    except AllowlistException as e:
        raise from_allowlist_exception(e) from e

    if not result.found:
        raise MemberNotFoundError(
            f"{result.identifier} is not on the allowlist",
            details={"identifier": result.identifier, "leaf": result.leaf, "root": result.root},
        )

    return ProofResponse(ok=True, result=result)


@router.post("/verify", response_model=VerifyResponse)
async def verify_proof(
    request: VerifyRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> VerifyResponse:
    """
    Verify a proof against a root without the allowlist.

    A proof that does not reproduce the root is a normal outcome
    (valid=false), not an error.
    """
    hash_name = request.hash_function or config.merkle.hash_function
    try:
        hash_fn = get_hash_function(hash_name)
        address = normalize_address(request.address)
        leaf = leaf_for_address(address, hash_fn)
        root = to_bytes32(request.root, "root")
        valid = verify_merkle_proof(request.proof, leaf, root, hash_fn)
    except AllowlistException as e:
        raise from_allowlist_exception(e) from e

    return VerifyResponse(
        ok=True,
        valid=valid,
        address=address,
        leaf=to_hex(leaf),
        root=to_hex(root),
        hash_function=hash_name.strip().lower(),
    )


@router.post("/eligibility", response_model=EligibilityResponse)
async def check_eligibility(
    request: EligibilityRequest,
    config: RuntimeConfig = Depends(get_runtime_config),
) -> EligibilityResponse:
    """
    Eligibility check for one address.

    Ineligible and invalid addresses are reported in the result
    (eligible=false with an error attached), not as HTTP errors.
    """
    try:
        snapshot = build_snapshot(request, config)
    except AllowlistException as e:
        raise from_allowlist_exception(e) from e

    return EligibilityResponse(ok=True, result=snapshot.check_eligibility(request.address))
