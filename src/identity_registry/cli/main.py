#!/usr/bin/env python3
"""
Identity Registry CLI - inspect a registry snapshot.

Commands:
  identity-registry details <ein>       Show an identity
  identity-registry lookup <address>    Find the identity of an address
  identity-registry events              List committed events
  identity-registry config              Show effective settings
"""

from __future__ import annotations

import argparse
import sys

from ..core.logging import configure_logging
from .commands import COMMAND_MODULES


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="identity-registry",
        description="Inspect an identity registry snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  identity-registry --store registry.json details 1
  identity-registry --store registry.json lookup 0xAbC...
  identity-registry --store registry.json events --ein 1 --kind RecoveryTriggered
        """,
    )
    parser.add_argument("--store", default=None, help="Path to the JSON store snapshot")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json_format=False)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
