"""
Module 03 - Address Canonicalization Unit Tests
Tests for core/addresses/checksum.py and core/addresses/leaf.py

1. EIP-55 reference vectors round-trip
2. Lower/upper case accepted, bad mixed-case checksum rejected
3. Rejection reasons for malformed input
4. Leaf = keccak256(20-byte address), independent of surface form
5. Batch normalization: dedup, order, skip/reject policies
"""
import pytest

from core.addresses import (
    ADDRESS_LENGTH,
    canonical_encoding,
    is_valid_address,
    leaf_for_address,
    leaves_for_addresses,
    normalize_address,
    normalize_addresses,
)
from core.crypto.hashing import keccak256, sha256
from core.schemas.errors import ErrorCodes, InvalidIdentifierException
from fixtures.common import (
    BAD_CHECKSUM_ADDRESS,
    CHECKSUMMED_ADDRESSES,
    lower_form,
    make_address,
    upper_form,
)


class TestNormalizeAddress:
    """Single-address canonicalization."""

    @pytest.mark.parametrize("address", CHECKSUMMED_ADDRESSES)
    def test_checksummed_vectors_unchanged(self, address):
        assert normalize_address(address) == address

    @pytest.mark.parametrize("address", CHECKSUMMED_ADDRESSES)
    def test_lowercase_accepted(self, address):
        assert normalize_address(lower_form(address)) == address

    @pytest.mark.parametrize("address", CHECKSUMMED_ADDRESSES)
    def test_uppercase_accepted(self, address):
        assert normalize_address(upper_form(address)) == address

    def test_prefix_optional_and_whitespace_stripped(self):
        address = CHECKSUMMED_ADDRESSES[0]
        assert normalize_address(address[2:]) == address
        assert normalize_address(f"  {address}\n") == address

    def test_bad_checksum_rejected(self):
        with pytest.raises(InvalidIdentifierException) as exc_info:
            normalize_address(BAD_CHECKSUM_ADDRESS)

        exc = exc_info.value
        assert exc.code == ErrorCodes.INVALID_IDENTIFIER
        assert exc.reason == "bad_checksum"
        assert exc.details["identifier"] == BAD_CHECKSUM_ADDRESS

    @pytest.mark.parametrize(
        "value,reason",
        [
            ("", "empty"),
            ("   ", "empty"),
            ("0x1234", "wrong_length"),
            ("0x" + "a" * 42, "wrong_length"),
            ("0x" + "g" * 40, "malformed_hex"),
            ("not an address", "malformed_hex"),
            ("0x", "malformed_hex"),
            ("0X" + "a" * 40, "malformed_hex"),
            ("0X" + "5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed", "malformed_hex"),
        ],
    )
    def test_malformed_input_reasons(self, value, reason):
        with pytest.raises(InvalidIdentifierException) as exc_info:
            normalize_address(value)
        assert exc_info.value.reason == reason

    @pytest.mark.parametrize("value", [None, 123, b"\x00" * 20, ["0x"]])
    def test_non_string_rejected(self, value):
        with pytest.raises(InvalidIdentifierException) as exc_info:
            normalize_address(value)
        assert exc_info.value.reason == "not_a_string"

    def test_is_valid_address(self):
        assert is_valid_address(CHECKSUMMED_ADDRESSES[1])
        assert not is_valid_address(BAD_CHECKSUM_ADDRESS)
        assert not is_valid_address(None)


class TestLeafDerivation:
    """Leaves hash the raw 20 address bytes."""

    def test_canonical_encoding_is_20_bytes(self):
        address = CHECKSUMMED_ADDRESSES[0]
        encoded = canonical_encoding(address)

        assert len(encoded) == ADDRESS_LENGTH
        assert encoded == bytes.fromhex(address[2:])

    def test_leaf_is_keccak_of_packed_address(self):
        address = CHECKSUMMED_ADDRESSES[0]
        assert leaf_for_address(address) == keccak256(bytes.fromhex(address[2:]))

    def test_leaf_independent_of_surface_form(self):
        address = CHECKSUMMED_ADDRESSES[2]
        forms = [address, lower_form(address), upper_form(address), address[2:], f" {address} "]
        leaves = {leaf_for_address(form) for form in forms}
        assert len(leaves) == 1

    def test_leaf_uses_injected_hash(self):
        address = CHECKSUMMED_ADDRESSES[0]
        assert leaf_for_address(address, sha256) == sha256(bytes.fromhex(address[2:]))
        assert leaf_for_address(address, sha256) != leaf_for_address(address)

    def test_invalid_address_raises(self):
        with pytest.raises(InvalidIdentifierException):
            leaf_for_address(BAD_CHECKSUM_ADDRESS)

    def test_leaves_preserve_order(self):
        addresses = [make_address(3), make_address(1), make_address(2)]
        assert leaves_for_addresses(addresses) == [leaf_for_address(a) for a in addresses]


class TestNormalizeAddresses:
    """Batch normalization."""

    def test_dedup_keeps_first_occurrence_order(self):
        a, b, c = CHECKSUMMED_ADDRESSES[:3]
        report = normalize_addresses([b, lower_form(a), c, upper_form(b), a])

        assert report.canonical == [b, a, c]
        assert report.duplicate_count == 2
        assert report.rejected == []

    def test_skip_policy_reports_rejected(self):
        good = CHECKSUMMED_ADDRESSES[0]
        report = normalize_addresses(["0x12", good, BAD_CHECKSUM_ADDRESS, 42], policy="skip")

        assert report.canonical == [good]
        assert report.rejected_count == 3
        assert [r.index for r in report.rejected] == [0, 2, 3]
        assert [r.reason for r in report.rejected] == ["wrong_length", "bad_checksum", "not_a_string"]
        assert report.rejected[2].value == "42"

    def test_reject_policy_raises_on_first_invalid(self):
        with pytest.raises(InvalidIdentifierException) as exc_info:
            normalize_addresses([CHECKSUMMED_ADDRESSES[0], "0xzz", "0x12"], policy="reject")
        assert exc_info.value.reason == "malformed_hex"

    def test_unknown_policy_raises(self):
        with pytest.raises(ValueError, match="policy"):
            normalize_addresses([], policy="ignore")

    def test_empty_input(self):
        report = normalize_addresses([])
        assert report.canonical == []
        assert report.rejected_count == 0
        assert report.duplicate_count == 0

    def test_accepts_generators(self):
        report = normalize_addresses(make_address(i) for i in range(1, 4))
        assert len(report.canonical) == 3
