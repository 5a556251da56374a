"""
Module 04 - Allowlist Orchestration

Composes address canonicalization (Module 03) and the Merkle engine
(Module 02) into the surface a presentation layer talks to:

- build_tree(identifiers) -> TreeSummary (root + canonical identifiers)
- get_proof(identifier)   -> ProofResult (found / not found)
- verify(identifier, proof, root) -> bool
- get_allocation(identifier) -> opaque metadata lookup
- check_eligibility(identifier) -> EligibilityResult

Snapshots are immutable. Rebuilding creates a new AllowlistTree and swaps
the service's reference in one assignment, so proofs handed out from the
previous snapshot remain valid against the previous root.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

from core.addresses import (
    InvalidIdentifierPolicy,
    leaf_for_address,
    leaves_for_addresses,
    normalize_address,
    normalize_addresses,
)
from core.config.runtime import RuntimeConfig, get_default_config
from core.crypto.hashing import (
    HashFunction,
    ensure_hash_function,
    get_hash_function,
    hash_function_name,
    to_hex,
)
from core.merkle import MerkleProver, MerkleTree, verify_merkle_proof
from core.schemas.allowlist import (
    AllocationAmount,
    EligibilityResult,
    ProofResult,
    RejectedIdentifier,
    TreeSummary,
)
from core.schemas.errors import (
    AllowlistError,
    ErrorCodes,
    InvalidIdentifierException,
)


logger = logging.getLogger(__name__)

CUSTOM_HASH_FUNCTION = "custom"


def normalize_allocations(
    allocations: Mapping[str, AllocationAmount] | None,
) -> dict[str, AllocationAmount]:
    """
    Re-key an allocation mapping by checksummed address.

    Keys may use any accepted casing. Invalid keys are skipped with a
    warning; when two keys normalize to the same address the later wins.
    """
    normalized: dict[str, AllocationAmount] = {}
    if not allocations:
        return normalized

    skipped = 0
    for raw_key, amount in allocations.items():
        try:
            key = normalize_address(raw_key)
        except InvalidIdentifierException:
            skipped += 1
            continue
        if key in normalized:
            logger.debug(f"Allocation for {key} given more than once, keeping last")
        normalized[key] = amount

    if skipped:
        logger.warning(f"Skipped {skipped} allocation entr{'y' if skipped == 1 else 'ies'} with invalid addresses")

    return normalized


@dataclass(frozen=True)
class AllowlistTree:
    """
    Immutable snapshot of a built allowlist.

    Attributes:
        tree: The Merkle tree over member leaves
        members: Checksummed members in leaf order
        hash_function: Registry name of the hash function ("custom" if injected)
        rejected: Input entries skipped during ingestion
        duplicate_count: Input entries dropped as duplicates
        allocations: Checksummed address -> opaque allocation amount
    """
    tree: MerkleTree
    members: tuple[str, ...]
    hash_function: str
    rejected: tuple[RejectedIdentifier, ...] = ()
    duplicate_count: int = 0
    allocations: Mapping[str, AllocationAmount] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def hex_root(self) -> str:
        return self.tree.hex_root

    @property
    def hash_fn(self) -> HashFunction:
        return self.tree.hash_fn

    @property
    def member_count(self) -> int:
        return len(self.members)

    def summary(self) -> TreeSummary:
        return TreeSummary(
            root=self.hex_root,
            hash_function=self.hash_function,
            member_count=self.member_count,
            depth=self.tree.depth,
            canonical_identifiers=list(self.members),
            rejected=list(self.rejected),
            duplicate_count=self.duplicate_count,
        )

    def leaf_for(self, identifier: Any) -> bytes:
        """
        Raises:
            InvalidIdentifierException: If the identifier is invalid
        """
        return leaf_for_address(identifier, self.hash_fn)

    def is_member(self, identifier: Any) -> bool:
        """
        Raises:
            InvalidIdentifierException: If the identifier is invalid
        """
        return self.leaf_for(identifier) in self.tree

    def proof_for(self, identifier: Any) -> ProofResult:
        """
        Look up the inclusion proof for an identifier.

        Raises:
            InvalidIdentifierException: If the identifier is invalid
        """
        checksummed = normalize_address(identifier)
        leaf = self.leaf_for(checksummed)
        proof = MerkleProver(self.tree).try_prove(leaf)

        if proof is None:
            logger.debug(f"No proof available for {checksummed}: not a member")
            return ProofResult.not_found(checksummed, to_hex(leaf), self.hex_root)

        return ProofResult(
            identifier=checksummed,
            leaf=to_hex(leaf),
            found=True,
            proof=proof.hex_siblings,
            root=self.hex_root,
        )

    def verify(
        self,
        identifier: Any,
        proof: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        """
        Verify a proof for an identifier against a root using this
        snapshot's hash function. The root need not be this snapshot's.

        Raises:
            InvalidIdentifierException: If the identifier is invalid
            MalformedHashException: If the proof or root is malformed
        """
        return verify_merkle_proof(proof, self.leaf_for(identifier), root, self.hash_fn)

    def allocation_for(self, identifier: Any, default: AllocationAmount = 0) -> AllocationAmount:
        """
        Raises:
            InvalidIdentifierException: If the identifier is invalid
        """
        return self.allocations.get(normalize_address(identifier), default)

    def check_eligibility(self, identifier: Any) -> EligibilityResult:
        """
        Run the full eligibility flow for one identifier.

        Never raises for bad input; the error is attached to the result.
        """
        try:
            checksummed = normalize_address(identifier)
        except InvalidIdentifierException as e:
            raw = identifier.strip() if isinstance(identifier, str) else str(identifier)
            return EligibilityResult(
                identifier=raw,
                eligible=False,
                root=self.hex_root,
                error=e.to_error_model(),
            )

        result = self.proof_for(checksummed)
        if not result.found:
            return EligibilityResult(
                identifier=checksummed,
                eligible=False,
                root=self.hex_root,
                error=AllowlistError(
                    code=ErrorCodes.MEMBER_NOT_FOUND,
                    message=f"{checksummed} is not on the allowlist",
                    details={"leaf": result.leaf},
                ),
            )

        eligible = verify_merkle_proof(result.proof, result.leaf, self.root, self.hash_fn)
        return EligibilityResult(
            identifier=checksummed,
            eligible=eligible,
            amount=self.allocations.get(checksummed, 0) if eligible else 0,
            proof=result.proof,
            root=self.hex_root,
        )


def _resolve_hash(
    hash_fn: HashFunction | None,
    hash_function: str | None,
    config: RuntimeConfig | None,
) -> tuple[HashFunction, str]:
    if hash_fn is not None:
        fn = ensure_hash_function(hash_fn)
        return fn, hash_function_name(fn) or CUSTOM_HASH_FUNCTION

    name = hash_function or (config or get_default_config()).merkle.hash_function
    fn = ensure_hash_function(get_hash_function(name))
    return fn, hash_function_name(fn) or name


def build_allowlist(
    identifiers: Iterable[Any],
    *,
    allocations: Mapping[str, AllocationAmount] | None = None,
    hash_fn: HashFunction | None = None,
    hash_function: str | None = None,
    policy: InvalidIdentifierPolicy | None = None,
    config: RuntimeConfig | None = None,
) -> AllowlistTree:
    """
    Build an immutable allowlist snapshot from raw identifiers.

    Args:
        identifiers: Raw addresses in the order leaves should be laid out
        allocations: Optional address -> amount metadata
        hash_fn: Injected hash function (takes precedence over names)
        hash_function: Registered hash function name
        policy: "skip" or "reject" for invalid identifiers
        config: Runtime config supplying defaults for hash and policy

    Returns:
        AllowlistTree snapshot

    Raises:
        HashFunctionUnavailableException: If the hash function is unusable
        InvalidIdentifierException: Under the "reject" policy
    """
    fn, name = _resolve_hash(hash_fn, hash_function, config)
    if policy is None:
        policy = (config or get_default_config()).merkle.invalid_identifier_policy

    report = normalize_addresses(identifiers, policy=policy)
    tree = MerkleTree(leaves_for_addresses(report.canonical, fn), fn)

    logger.info(
        f"Built allowlist tree: {len(report.canonical)} member(s), "
        f"{report.rejected_count} rejected, root {tree.hex_root} ({name})"
    )

    return AllowlistTree(
        tree=tree,
        members=tuple(report.canonical),
        hash_function=name,
        rejected=tuple(report.rejected),
        duplicate_count=report.duplicate_count,
        allocations=MappingProxyType(normalize_allocations(allocations)),
    )


class AllowlistService:
    """
    Stateful facade over the current allowlist snapshot.

    The hash function is resolved and validated when the service is
    created, so misconfiguration fails before any tree is built.

    Example:
        >>> service = AllowlistService()
        >>> summary = service.build_tree(addresses)
        >>> result = service.get_proof(addresses[0])
        >>> service.verify(addresses[0], result.proof, summary.root)
        True
    """

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        hash_fn: HashFunction | None = None,
    ) -> None:
        self.config = config or get_default_config()
        self._hash_fn, self._hash_name = _resolve_hash(hash_fn, None, self.config)
        self._snapshot = self._build([], None)

    def _build(
        self,
        identifiers: Iterable[Any],
        allocations: Mapping[str, AllocationAmount] | None,
    ) -> AllowlistTree:
        return build_allowlist(
            identifiers,
            allocations=allocations,
            hash_fn=self._hash_fn,
            policy=self.config.merkle.invalid_identifier_policy,
            config=self.config,
        )

    @property
    def snapshot(self) -> AllowlistTree:
        return self._snapshot

    @property
    def hash_function(self) -> str:
        return self._hash_name

    def build_tree(
        self,
        identifiers: Iterable[Any],
        allocations: Mapping[str, AllocationAmount] | None = None,
    ) -> TreeSummary:
        """
        Build a new snapshot and make it current.

        Returns:
            TreeSummary with root, canonical identifiers and rejected entries
        """
        snapshot = self._build(identifiers, allocations)
        self._snapshot = snapshot
        return snapshot.summary()

    def load_snapshot(self, snapshot: AllowlistTree) -> TreeSummary:
        """
        Make a previously built snapshot current (e.g. one loaded from disk).

        Raises:
            ValueError: If the snapshot uses a different hash function
        """
        if snapshot.hash_function != self._hash_name:
            raise ValueError(
                f"Snapshot hash function {snapshot.hash_function!r} does not match "
                f"service hash function {self._hash_name!r}"
            )
        self._snapshot = snapshot
        return snapshot.summary()

    def get_proof(self, identifier: Any) -> ProofResult:
        return self._snapshot.proof_for(identifier)

    def verify(
        self,
        identifier: Any,
        proof: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        return self._snapshot.verify(identifier, proof, root)

    def get_allocation(self, identifier: Any, default: AllocationAmount = 0) -> AllocationAmount:
        return self._snapshot.allocation_for(identifier, default)

    def check_eligibility(self, identifier: Any) -> EligibilityResult:
        return self._snapshot.check_eligibility(identifier)


__all__ = [
    "AllowlistTree",
    "AllowlistService",
    "build_allowlist",
    "normalize_allocations",
]
