"""
Module 05 - Allowlist & Tree Artifact IO Tests
Tests for orchestrator/artifacts/io.py

1. Allowlist loading from text, CSV, JSON and YAML
2. Tree artifact save/load round trip with integrity checks
3. Tampered artifacts are refused
"""
import json

import pytest

from core.crypto.hashing import keccak256
from core.schemas.errors import (
    ErrorCodes,
    HashFunctionUnavailableException,
    InvalidIdentifierException,
    TreeIntegrityException,
)
from orchestrator.allowlist import build_allowlist
from orchestrator.artifacts.io import (
    FORMAT_VERSION,
    ArtifactIOError,
    build_from_file,
    load_allowlist,
    load_tree_artifact,
    save_tree_artifact,
    tree_to_dict,
)
from fixtures.common import (
    CHECKSUMMED_ADDRESSES,
    lower_form,
    make_addresses,
    write_csv_allowlist,
    write_json_allowlist,
    write_text_allowlist,
    write_yaml_allowlist,
)


class TestLoadAllowlist:
    """Allowlist file formats."""

    def test_text_with_comments_and_commas(self, tmp_path):
        a, b, c, d = CHECKSUMMED_ADDRESSES
        path = tmp_path / "list.txt"
        path.write_text(f"# airdrop round 1\n{a}\n\n{b}, {c}  # team\n{d}\n", encoding="utf-8")

        source = load_allowlist(path)

        assert source.identifiers == [a, b, c, d]
        assert source.allocations == {}
        assert source.path == str(path)

    def test_csv_with_header_and_amounts(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        path = write_csv_allowlist(tmp_path / "list.csv", {a: 100, b: "2.5"})

        source = load_allowlist(path)

        assert source.identifiers == [a, b]
        assert source.allocations == {a: 100, b: 2.5}

    def test_csv_without_header_or_amounts(self, tmp_path):
        path = tmp_path / "list.csv"
        path.write_text("\n".join(make_addresses(3)) + "\n", encoding="utf-8")

        source = load_allowlist(path)
        assert source.identifiers == make_addresses(3)
        assert source.allocations == {}

    def test_csv_bad_amount(self, tmp_path):
        path = write_csv_allowlist(tmp_path / "list.csv", {CHECKSUMMED_ADDRESSES[0]: "lots"})
        with pytest.raises(ArtifactIOError, match="allocation amount"):
            load_allowlist(path)

    def test_json_list(self, tmp_path):
        path = write_json_allowlist(tmp_path / "list.json", CHECKSUMMED_ADDRESSES)
        assert load_allowlist(path).identifiers == CHECKSUMMED_ADDRESSES

    def test_json_objects(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        data = [{"address": a, "amount": 5}, {"address": b}]
        source = load_allowlist(write_json_allowlist(tmp_path / "list.json", data))

        assert source.identifiers == [a, b]
        assert source.allocations == {a: 5}

    def test_json_object_missing_address(self, tmp_path):
        path = write_json_allowlist(tmp_path / "list.json", [{"amount": 5}])
        with pytest.raises(ArtifactIOError, match="address"):
            load_allowlist(path)

    def test_json_mapping(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        source = load_allowlist(write_json_allowlist(tmp_path / "list.json", {a: 1, b: 2}))

        assert source.identifiers == [a, b]
        assert source.allocations == {a: 1, b: 2}

    def test_json_addresses_and_allocations(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        data = {"addresses": [a, b], "allocations": {a: 7}}
        source = load_allowlist(write_json_allowlist(tmp_path / "list.json", data))

        assert source.identifiers == [a, b]
        assert source.allocations == {a: 7}

    def test_yaml(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        path = write_yaml_allowlist(tmp_path / "list.yaml", {"addresses": [a, b]})
        assert load_allowlist(path).identifiers == [a, b]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ArtifactIOError, match="Failed to parse"):
            load_allowlist(path)

    def test_unsupported_structure(self, tmp_path):
        path = write_json_allowlist(tmp_path / "list.json", "0xabc")
        with pytest.raises(ArtifactIOError, match="Unsupported"):
            load_allowlist(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArtifactIOError, match="not found") as exc_info:
            load_allowlist(tmp_path / "missing.txt")
        assert exc_info.value.code == ErrorCodes.ALLOWLIST_LOAD_ERROR

    def test_build_from_file(self, tmp_path):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        path = write_csv_allowlist(tmp_path / "list.csv", {lower_form(a): 3, b: 4})

        snapshot = build_from_file(path)

        assert snapshot.members == (a, b)
        assert snapshot.allocation_for(a) == 3

    def test_build_from_file_reports_rejected(self, tmp_path):
        path = write_text_allowlist(tmp_path / "list.txt", [CHECKSUMMED_ADDRESSES[0], "0xnothex"])
        snapshot = build_from_file(path)

        assert snapshot.member_count == 1
        assert snapshot.rejected[0].reason == "malformed_hex"


class TestTreeArtifacts:
    """Saving and loading built trees."""

    @pytest.fixture
    def snapshot(self):
        a, b = CHECKSUMMED_ADDRESSES[:2]
        return build_allowlist(
            CHECKSUMMED_ADDRESSES + ["junk", lower_form(a)],
            allocations={a: 10, b: "20"},
        )

    def test_tree_to_dict(self, snapshot):
        data = tree_to_dict(snapshot)

        assert data["format_version"] == FORMAT_VERSION
        assert data["root"] == snapshot.hex_root
        assert data["members"] == list(snapshot.members)
        assert data["layers"][-1] == [snapshot.hex_root]
        assert data["duplicate_count"] == 1
        assert data["rejected"][0]["value"] == "junk"
        assert "proofs" not in data

    def test_include_proofs(self, snapshot):
        data = tree_to_dict(snapshot, include_proofs=True)

        assert set(data["proofs"]) == set(snapshot.members)
        for member, proof in data["proofs"].items():
            assert snapshot.verify(member, proof, snapshot.root)

    def test_round_trip(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "out" / "tree.json")
        loaded = load_tree_artifact(path)

        assert loaded.hex_root == snapshot.hex_root
        assert loaded.members == snapshot.members
        assert dict(loaded.allocations) == dict(snapshot.allocations)
        assert loaded.rejected == snapshot.rejected
        assert loaded.duplicate_count == snapshot.duplicate_count
        assert loaded.hash_function == "keccak256"

    def test_round_trip_sha256(self, tmp_path):
        snapshot = build_allowlist(make_addresses(5), hash_function="sha256")
        loaded = load_tree_artifact(save_tree_artifact(snapshot, tmp_path / "tree.json"))

        assert loaded.hash_function == "sha256"
        assert loaded.root == snapshot.root

    def test_tampered_root(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")
        data = json.loads(path.read_text())
        data["root"] = "0x" + "11" * 32
        path.write_text(json.dumps(data))

        with pytest.raises(TreeIntegrityException) as exc_info:
            load_tree_artifact(path)
        assert exc_info.value.code == ErrorCodes.TREE_ROOT_MISMATCH

    def test_tampered_members(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")
        data = json.loads(path.read_text())
        data["members"][0], data["members"][2] = data["members"][2], data["members"][0]
        path.write_text(json.dumps(data))

        with pytest.raises(TreeIntegrityException):
            load_tree_artifact(path)

    def test_tampered_leaf_layer(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")
        data = json.loads(path.read_text())
        data["layers"][0][0] = "0x" + "22" * 32
        path.write_text(json.dumps(data))

        with pytest.raises(TreeIntegrityException) as exc_info:
            load_tree_artifact(path)
        assert exc_info.value.code == ErrorCodes.LEAF_HASH_MISMATCH

    def test_invalid_member_in_artifact(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")
        data = json.loads(path.read_text())
        data["members"].append("junk")
        path.write_text(json.dumps(data))

        with pytest.raises(InvalidIdentifierException):
            load_tree_artifact(path)

    def test_custom_hash_requires_hash_fn(self, tmp_path):
        def custom(data: bytes) -> bytes:
            return keccak256(b"custom" + data)

        snapshot = build_allowlist(make_addresses(3), hash_fn=custom)
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")

        with pytest.raises(HashFunctionUnavailableException):
            load_tree_artifact(path)
        assert load_tree_artifact(path, hash_fn=custom).root == snapshot.root

    def test_unsupported_version(self, snapshot, tmp_path):
        path = save_tree_artifact(snapshot, tmp_path / "tree.json")
        data = json.loads(path.read_text())
        data["format_version"] = "2.0"
        path.write_text(json.dumps(data))

        with pytest.raises(ArtifactIOError, match="format version"):
            load_tree_artifact(path)

    def test_missing_fields(self, tmp_path):
        path = tmp_path / "tree.json"
        path.write_text(json.dumps({"root": "0x" + "00" * 32}))

        with pytest.raises(ArtifactIOError, match="members"):
            load_tree_artifact(path)
