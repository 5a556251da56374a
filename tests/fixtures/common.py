"""
Common test fixtures shared by all modules.

Provides:
- EIP-55 reference addresses (checksummed, lower and upper forms)
- Deterministic synthetic addresses
- Allowlist file writers for the supported formats
"""

import json
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml


# =============================================================================
# Addresses
# =============================================================================

# Reference vectors from EIP-55
CHECKSUMMED_ADDRESSES = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]

# Same address as CHECKSUMMED_ADDRESSES[0] with one letter's case flipped
BAD_CHECKSUM_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeD"

# Never part of any default allowlist
OUTSIDER_ADDRESS = "0x" + "ab" * 20


def make_address(n: int) -> str:
    """Deterministic all-lowercase address for an integer."""
    return "0x" + format(n, "040x")


def make_addresses(count: int, start: int = 1) -> list[str]:
    return [make_address(start + i) for i in range(count)]


def lower_form(address: str) -> str:
    return "0x" + address[2:].lower()


def upper_form(address: str) -> str:
    return "0x" + address[2:].upper()


# =============================================================================
# Allowlist Files
# =============================================================================

def write_text_allowlist(path: Path, addresses: Iterable[str], header: Optional[str] = None) -> Path:
    lines = []
    if header:
        lines.append(f"# {header}")
    lines.extend(addresses)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_csv_allowlist(path: Path, allocations: dict[str, Any], with_header: bool = True) -> Path:
    rows = ["address,amount"] if with_header else []
    rows.extend(f"{address},{amount}" for address, amount in allocations.items())
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path


def write_json_allowlist(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_yaml_allowlist(path: Path, data: Any) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path
