"""
Module 06 - Merkle Allowlist CLI

Command-line interface for building allowlist trees and checking proofs.

Usage:
    python -m allowlist_cli build allowlist.csv --out tree.json
    python -m allowlist_cli prove 0x... --tree tree.json
    python -m allowlist_cli verify 0x... --root 0x... --proof 0x...,0x...
    python -m allowlist_cli check 0x... --allowlist allowlist.csv
"""

__version__ = "0.1.0"
