"""
Module 01 - Hashing Unit Tests
Tests for core/crypto/hashing.py

1. Known digests for keccak256 and sha256
2. Registry lookup and unknown names
3. Injected hash validation
4. Hex helpers and 32-byte coercion
"""
import pytest

from core.crypto.hashing import (
    DEFAULT_HASH_FUNCTION,
    HASH_FUNCTIONS,
    ensure_hash_function,
    from_hex,
    get_hash_function,
    hash_function_name,
    keccak256,
    sha256,
    to_bytes32,
    to_hex,
)
from core.schemas.errors import (
    ErrorCodes,
    HashFunctionUnavailableException,
    MalformedHashException,
)


KECCAK_EMPTY = "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
SHA256_EMPTY = "0xe3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestKnownDigests:
    """Digests of the empty string are well-known constants."""

    def test_keccak256_empty(self):
        assert to_hex(keccak256(b"")) == KECCAK_EMPTY

    def test_sha256_empty(self):
        assert to_hex(sha256(b"")) == SHA256_EMPTY

    def test_keccak_is_not_sha3_256(self):
        """Ethereum keccak256 differs from the NIST SHA3-256 padding."""
        import hashlib
        assert keccak256(b"") != hashlib.sha3_256(b"").digest()

    def test_digest_length(self):
        assert len(keccak256(b"abc")) == 32
        assert len(sha256(b"abc")) == 32


class TestRegistry:
    """Hash functions are selected by name."""

    def test_default_is_keccak(self):
        assert DEFAULT_HASH_FUNCTION == "keccak256"
        assert get_hash_function() is keccak256
        assert get_hash_function(None) is keccak256

    def test_lookup_by_name(self):
        assert get_hash_function("sha256") is sha256
        assert get_hash_function(" KECCAK256 ") is keccak256

    def test_unknown_name_raises(self):
        with pytest.raises(HashFunctionUnavailableException) as exc_info:
            get_hash_function("md5")

        assert exc_info.value.code == ErrorCodes.HASH_FUNCTION_UNAVAILABLE
        assert exc_info.value.details["hash_function"] == "md5"

    def test_name_of_registered_and_custom(self):
        for name, fn in HASH_FUNCTIONS.items():
            assert hash_function_name(fn) == name
        assert hash_function_name(lambda data: bytes(32)) is None


class TestEnsureHashFunction:
    """Injected hash functions are checked before use."""

    def test_registered_functions_pass(self):
        assert ensure_hash_function(keccak256) is keccak256
        assert ensure_hash_function(sha256) is sha256

    def test_none_rejected(self):
        with pytest.raises(HashFunctionUnavailableException):
            ensure_hash_function(None)

    def test_not_callable_rejected(self):
        with pytest.raises(HashFunctionUnavailableException, match="not callable"):
            ensure_hash_function("keccak256")

    def test_wrong_digest_size_rejected(self):
        with pytest.raises(HashFunctionUnavailableException, match="32 bytes"):
            ensure_hash_function(lambda data: b"\x00" * 20)

    def test_failing_function_rejected(self):
        def broken(data: bytes) -> bytes:
            raise RuntimeError("backend missing")

        with pytest.raises(HashFunctionUnavailableException, match="backend missing"):
            ensure_hash_function(broken)

    def test_custom_32_byte_function_accepted(self):
        def custom(data: bytes) -> bytes:
            return sha256(b"custom" + data)

        assert ensure_hash_function(custom) is custom


class TestHexHelpers:
    """to_hex / from_hex / to_bytes32."""

    def test_to_hex_lowercase_prefixed(self):
        assert to_hex(bytes.fromhex("DEADBEEF")) == "0xdeadbeef"

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_to_bytes32_accepts_hex_and_bytes(self):
        raw = keccak256(b"x")
        assert to_bytes32(raw) == raw
        assert to_bytes32(to_hex(raw)) == raw
        assert to_bytes32(bytearray(raw)) == raw

    def test_to_bytes32_accepts_uppercase_hex(self):
        raw = keccak256(b"x")
        assert to_bytes32("0x" + raw.hex().upper()) == raw

    def test_to_bytes32_wrong_length(self):
        with pytest.raises(MalformedHashException) as exc_info:
            to_bytes32(b"\x00" * 31, "root")

        assert exc_info.value.code == ErrorCodes.MALFORMED_HASH
        assert exc_info.value.details["field"] == "root"

    def test_to_bytes32_bad_hex(self):
        with pytest.raises(MalformedHashException, match="not valid hex"):
            to_bytes32("0x" + "zz" * 32, "proof[0]")

    def test_to_bytes32_wrong_type(self):
        with pytest.raises(MalformedHashException, match="bytes or hex"):
            to_bytes32(12345)
