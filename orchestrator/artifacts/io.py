"""
Module 05 - Allowlist & Tree Artifact IO
File: io.py

Purpose: Load allowlists from disk and save/load built trees.

Allowlist formats:
- .json / .yaml / .yml: a list of addresses, a list of
  {"address": ..., "amount": ...} objects, an {address: amount} mapping,
  or {"addresses": [...], "allocations": {...}}
- .csv: address[,amount] rows, optional header row
- anything else: plain text, one address per line (commas also split),
  "#" starts a comment

Identifiers are returned raw; canonicalization and rejection reporting
happen when the tree is built.
"""

from __future__ import annotations

import csv
import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.crypto.hashing import HashFunction, get_hash_function
from core.schemas.allowlist import AllocationAmount, RejectedIdentifier
from core.schemas.errors import (
    ErrorCodes,
    HashFunctionUnavailableException,
    TreeIntegrityException,
)

from orchestrator.allowlist import CUSTOM_HASH_FUNCTION, AllowlistTree, build_allowlist


logger = logging.getLogger(__name__)


FORMAT_VERSION = "1.0"
SUPPORTED_FORMAT_MAJOR = 1

_CSV_HEADER_NAMES = {"address", "addresses", "account", "wallet"}


class ArtifactIOError(Exception):
    """Error reading or writing an allowlist or tree artifact."""

    code = ErrorCodes.ALLOWLIST_LOAD_ERROR

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


@dataclass
class AllowlistSource:
    """Raw allowlist contents as read from disk."""
    identifiers: list[Any] = field(default_factory=list)
    allocations: dict[str, AllocationAmount] = field(default_factory=dict)
    path: str | None = None


# =============================================================================
# Allowlist Loading
# =============================================================================

def _parse_amount(value: Any, where: str) -> AllocationAmount:
    if isinstance(value, bool):
        raise ArtifactIOError(f"Invalid allocation amount at {where}: {value!r}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            pass
    raise ArtifactIOError(f"Invalid allocation amount at {where}: {value!r}")


def _parse_structured(data: Any, path: Path) -> AllowlistSource:
    """Parse the JSON/YAML allowlist shapes."""
    source = AllowlistSource(path=str(path))

    if isinstance(data, list):
        for i, item in enumerate(data):
            if isinstance(item, dict):
                if "address" not in item:
                    raise ArtifactIOError(f"Entry {i} has no 'address' field", path)
                source.identifiers.append(item["address"])
                if item.get("amount") is not None:
                    source.allocations[str(item["address"])] = _parse_amount(
                        item["amount"], f"entry {i}"
                    )
            else:
                source.identifiers.append(item)
        return source

    if isinstance(data, dict):
        if "addresses" in data or "allocations" in data:
            addresses = data.get("addresses") or []
            allocations = data.get("allocations") or {}
            if not isinstance(addresses, list) or not isinstance(allocations, dict):
                raise ArtifactIOError(
                    "'addresses' must be a list and 'allocations' a mapping", path
                )
            source.identifiers.extend(addresses)
            for key, amount in allocations.items():
                source.allocations[str(key)] = _parse_amount(amount, f"allocations[{key}]")
            if not addresses:
                # Allocations alone define the member set
                source.identifiers.extend(allocations.keys())
            return source

        for key, amount in data.items():
            source.identifiers.append(key)
            source.allocations[str(key)] = _parse_amount(amount, f"key {key}")
        return source

    raise ArtifactIOError(
        f"Unsupported allowlist structure: {type(data).__name__}", path
    )


def _load_csv(path: Path) -> AllowlistSource:
    source = AllowlistSource(path=str(path))
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            cells = [c.strip() for c in row]
            if not cells or not cells[0] or cells[0].startswith("#"):
                continue
            if line_no == 1 and cells[0].lower() in _CSV_HEADER_NAMES:
                continue
            source.identifiers.append(cells[0])
            if len(cells) > 1 and cells[1]:
                source.allocations[cells[0]] = _parse_amount(cells[1], f"line {line_no}")
    return source


def _load_text(path: Path) -> AllowlistSource:
    source = AllowlistSource(path=str(path))
    for line in path.read_text(encoding="utf-8").splitlines():
        content = line.split("#", 1)[0]
        for token in content.replace(",", " ").split():
            source.identifiers.append(token)
    return source


def load_allowlist(path: str | Path) -> AllowlistSource:
    """
    Load raw identifiers and allocations from an allowlist file.

    Raises:
        ArtifactIOError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ArtifactIOError(f"Allowlist file not found: {path}", path)

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                source = _parse_structured(json.load(f), path)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                source = _parse_structured(yaml.safe_load(f) or [], path)
        elif suffix == ".csv":
            source = _load_csv(path)
        else:
            source = _load_text(path)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError, csv.Error) as e:
        raise ArtifactIOError(f"Failed to parse allowlist {path}: {e}", path) from e

    logger.info(
        f"Loaded {len(source.identifiers)} identifier(s) and "
        f"{len(source.allocations)} allocation(s) from {path}"
    )
    return source


def build_from_file(
    path: str | Path,
    **kwargs: Any,
) -> AllowlistTree:
    """Load an allowlist file and build its snapshot (kwargs go to build_allowlist)."""
    source = load_allowlist(path)
    return build_allowlist(source.identifiers, allocations=source.allocations, **kwargs)


# =============================================================================
# Tree Artifacts
# =============================================================================

def tree_to_dict(snapshot: AllowlistTree, *, include_proofs: bool = False) -> dict[str, Any]:
    """Serialize a snapshot to its artifact dictionary."""
    data: dict[str, Any] = {
        "format_version": FORMAT_VERSION,
        "hash_function": snapshot.hash_function,
        "root": snapshot.hex_root,
        "member_count": snapshot.member_count,
        "members": list(snapshot.members),
        "layers": snapshot.tree.hex_layers(),
        "allocations": dict(snapshot.allocations),
        "rejected": [r.model_dump(mode="json") for r in snapshot.rejected],
        "duplicate_count": snapshot.duplicate_count,
    }
    if include_proofs:
        data["proofs"] = {
            member: snapshot.proof_for(member).proof for member in snapshot.members
        }
    return data


def save_tree_artifact(
    snapshot: AllowlistTree,
    out_path: str | Path,
    *,
    include_proofs: bool = False,
) -> Path:
    """
    Save a built tree as a JSON artifact.

    Returns:
        Path to the written file
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(tree_to_dict(snapshot, include_proofs=include_proofs), indent=2)
    out.write_text(content + "\n", encoding="utf-8")
    logger.info(f"Saved tree artifact ({snapshot.member_count} members) to {out}")
    return out


def _is_compatible_format(version: Any) -> bool:
    try:
        return int(str(version).split(".")[0]) == SUPPORTED_FORMAT_MAJOR
    except ValueError:
        return False


def load_tree_artifact(
    path: str | Path,
    *,
    hash_fn: HashFunction | None = None,
) -> AllowlistTree:
    """
    Load a tree artifact and rebuild it from its member list.

    The rebuilt root (and leaf layer, when stored) must match what the
    artifact records; a stored root is never trusted on its own.

    Args:
        path: Artifact path
        hash_fn: Hash function to use for artifacts built with a
                 custom (unregistered) hash function

    Raises:
        ArtifactIOError: If the file is missing or malformed
        HashFunctionUnavailableException: If the hash function can't be resolved
        TreeIntegrityException: If the recomputed tree disagrees with the artifact
    """
    path = Path(path)
    if not path.exists():
        raise ArtifactIOError(f"Tree artifact not found: {path}", path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ArtifactIOError(f"Failed to parse tree artifact {path}: {e}", path) from e

    if not isinstance(data, dict) or "root" not in data or "members" not in data:
        raise ArtifactIOError(f"Tree artifact {path} is missing 'root' or 'members'", path)

    version = data.get("format_version", FORMAT_VERSION)
    if not _is_compatible_format(version):
        raise ArtifactIOError(f"Unsupported tree artifact format version: {version}", path)

    name = data.get("hash_function")
    if hash_fn is None:
        if not name or name == CUSTOM_HASH_FUNCTION:
            raise HashFunctionUnavailableException(
                f"Tree artifact {path} was built with a custom hash function; "
                "pass hash_fn to load it",
                name=name,
            )
        hash_fn = get_hash_function(name)

    snapshot = build_allowlist(
        data["members"],
        allocations=data.get("allocations") or {},
        hash_fn=hash_fn,
        policy="reject",
    )

    stored_root = str(data["root"]).lower()
    if snapshot.hex_root != stored_root:
        raise TreeIntegrityException(
            f"Tree artifact {path} root does not match its members",
            expected_root=stored_root,
            actual_root=snapshot.hex_root,
        )

    layers = data.get("layers")
    if layers:
        stored_leaves = [str(leaf).lower() for leaf in layers[0]]
        if stored_leaves != snapshot.tree.hex_layers()[0]:
            raise TreeIntegrityException(
                f"Tree artifact {path} leaves do not match its members",
                code=ErrorCodes.LEAF_HASH_MISMATCH,
            )

    rejected = tuple(RejectedIdentifier(**r) for r in data.get("rejected") or [])
    return dataclasses.replace(
        snapshot,
        rejected=rejected,
        duplicate_count=int(data.get("duplicate_count", 0)),
    )


__all__ = [
    "FORMAT_VERSION",
    "ArtifactIOError",
    "AllowlistSource",
    "load_allowlist",
    "build_from_file",
    "tree_to_dict",
    "save_tree_artifact",
    "load_tree_artifact",
]
