"""
Module 06 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m allowlist_cli build <allowlist> [--out PATH] [--include-proofs] [--strict] [--json]
    python -m allowlist_cli prove <address> (--allowlist PATH | --tree PATH) [--json]
    python -m allowlist_cli verify <address> --root HEX (--proof HEX,HEX | --proof-file PATH) [--json]
    python -m allowlist_cli check <address> (--allowlist PATH | --tree PATH) [--json]
    python -m allowlist_cli config --init

Environment Variables:
    ALLOWLIST_HASH_FUNCTION     Hash function: keccak256 (default), sha256
    ALLOWLIST_INVALID_POLICY    Invalid identifier policy: skip (default), reject
    ALLOWLIST_PATH              Default allowlist file
    ALLOWLIST_TREE_PATH         Default saved tree
    ALLOWLIST_LOG_LEVEL         Log level (default: INFO)
    ALLOWLIST_LOG_FILE          Also log to this file
    ALLOWLIST_OUTPUT_FORMAT     human (default) or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from allowlist_cli import __version__
from allowlist_cli.commands import build, check, prove, verify
from allowlist_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from allowlist_cli.config import CONFIG_FILE_NAME, get_default_config_template, load_config
from core.crypto.hashing import HASH_FUNCTIONS


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--allowlist", "-a",
        type=str,
        default=None,
        help="Allowlist file to build the tree from (json, yaml, csv or text)",
    )
    source.add_argument(
        "--tree", "-t",
        type=str,
        default=None,
        help="Saved tree artifact from `build --out`",
    )


def _add_json_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="allowlist",
        description="Merkle allowlist CLI - Build trees, issue proofs, and check eligibility.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{CONFIG_FILE_NAME} or ~/.config/merkle-allowlist/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--hash-function",
        type=str,
        default=None,
        choices=sorted(HASH_FUNCTIONS),
        help="Hash function for leaves and nodes (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a Merkle tree from an allowlist file",
        description="Canonicalize the allowlist, build the tree, and print its root.",
    )
    build_parser.add_argument(
        "allowlist",
        type=str,
        nargs="?",
        default=None,
        help="Allowlist file (default: from config)",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Save the tree artifact (JSON) to this path",
    )
    build_parser.add_argument(
        "--include-proofs",
        action="store_true",
        default=False,
        help="Include every member's proof in the saved artifact",
    )
    build_parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Fail on the first invalid address instead of skipping it",
    )
    _add_json_arg(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print the inclusion proof for an address",
    )
    prove_parser.add_argument("address", type=str, help="Address to prove")
    _add_source_args(prove_parser)
    _add_json_arg(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof against a root (offline)",
        description="Recompute the root from an address and its proof.",
    )
    verify_parser.add_argument("address", type=str, help="Address the proof is for")
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Expected Merkle root (0x hex)",
    )
    proof_group = verify_parser.add_mutually_exclusive_group(required=True)
    proof_group.add_argument(
        "--proof", "-p",
        type=str,
        help="Comma separated sibling hashes (empty string for an empty proof)",
    )
    proof_group.add_argument(
        "--proof-file",
        type=str,
        help="JSON file with the proof list",
    )
    _add_json_arg(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Check whether an address is eligible",
        description="Look up the address, verify its proof, and print its allocation.",
    )
    check_parser.add_argument("address", type=str, help="Address to check")
    _add_source_args(check_parser)
    _add_json_arg(check_parser)
    check_parser.set_defaults(func=check.check_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=CONFIG_FILE_NAME,
        help=f"Path for config file (default: {CONFIG_FILE_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ALLOWLIST_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(asdict(args.cli_config), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: allowlist config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed / not eligible)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.hash_function:
        config.hash_function = args.hash_function

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
