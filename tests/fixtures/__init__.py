"""
Test fixtures package for allowlist engine tests.

- common.py: reference addresses, synthetic addresses and allowlist
  file writers

Usage:
    from fixtures.common import CHECKSUMMED_ADDRESSES, make_addresses

    def test_something(tmp_path):
        path = write_text_allowlist(tmp_path / "list.txt", make_addresses(5))
"""

from .common import (
    BAD_CHECKSUM_ADDRESS,
    CHECKSUMMED_ADDRESSES,
    OUTSIDER_ADDRESS,
    lower_form,
    make_address,
    make_addresses,
    upper_form,
    write_csv_allowlist,
    write_json_allowlist,
    write_text_allowlist,
    write_yaml_allowlist,
)

__all__ = [
    "BAD_CHECKSUM_ADDRESS",
    "CHECKSUMMED_ADDRESSES",
    "OUTSIDER_ADDRESS",
    "lower_form",
    "make_address",
    "make_addresses",
    "upper_form",
    "write_csv_allowlist",
    "write_json_allowlist",
    "write_text_allowlist",
    "write_yaml_allowlist",
]
