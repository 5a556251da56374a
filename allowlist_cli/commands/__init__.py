"""
CLI command modules.
"""

from allowlist_cli.commands import build, check, prove, verify

__all__ = ["build", "check", "prove", "verify"]
