"""``identity-registry config``: show the effective registry settings."""

from __future__ import annotations

import argparse

from ...core.config import get_config
from ..output import output_json


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``config`` command."""
    config_parser = subparsers.add_parser("config", help="Show effective registry settings")
    config_parser.set_defaults(func=cmd_config)


def cmd_config(args: argparse.Namespace) -> int:
    config = get_config()
    data = {
        "registry_address": config.registry_address,
        "max_associated_addresses": config.max_associated_addresses,
        "recovery_timeout": config.recovery_timeout,
        "signature_timeout": config.signature_timeout,
        "store_path": config.store_path,
        "log_level": config.log_level,
    }
    if getattr(args, "json", False):
        output_json(data)
    else:
        for key, value in data.items():
            print(f"  {key + ':':<26}{value}")
    return 0
