"""
Module 05 - Allowlist & Tree Artifact IO

Public API:
- load_allowlist: Read identifiers and allocations from json/yaml/csv/text
- build_from_file: Load an allowlist and build its snapshot
- save_tree_artifact / load_tree_artifact: Persist a built tree and
  reload it with root verification
"""

from orchestrator.artifacts.io import (
    FORMAT_VERSION,
    AllowlistSource,
    ArtifactIOError,
    build_from_file,
    load_allowlist,
    load_tree_artifact,
    save_tree_artifact,
    tree_to_dict,
)


__all__ = [
    "FORMAT_VERSION",
    "AllowlistSource",
    "ArtifactIOError",
    "build_from_file",
    "load_allowlist",
    "load_tree_artifact",
    "save_tree_artifact",
    "tree_to_dict",
]
