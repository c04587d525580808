"""Identity inspection commands.

Usage::

    identity-registry details <ein>
    identity-registry lookup <address>
    identity-registry events [--ein N] [--kind KIND]

All commands read a JSON store snapshot (``--store`` or
``IDENTITY_REGISTRY_STORE_PATH``); none of them submit transactions.
"""

from __future__ import annotations

import argparse
import logging

from ...core.config import get_config
from ...core.exceptions import ConfigError, RegistryError
from ...identity.events import EVENT_TYPES
from ...identity.registry import IdentityRegistry
from ...identity.store import InMemoryIdentityStore, load_store
from ..output import output_error, output_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _store_path(args: argparse.Namespace) -> str:
    path = getattr(args, "store", None) or get_config().store_path
    if not path:
        raise ConfigError("No store snapshot given; pass --store or set IDENTITY_REGISTRY_STORE_PATH",
                          missing_vars=["IDENTITY_REGISTRY_STORE_PATH"])
    return path


def _load_registry(path: str) -> tuple[IdentityRegistry, InMemoryIdentityStore]:
    config = get_config()
    store = load_store(path, max_associated_addresses=config.max_associated_addresses)
    return IdentityRegistry(store=store, settings=config), store


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the identity inspection commands."""
    details_p = subparsers.add_parser("details", help="Show an identity's addresses, providers and resolvers")
    details_p.add_argument("ein", type=int, help="Identity handle")
    details_p.set_defaults(func=cmd_details)

    lookup_p = subparsers.add_parser("lookup", help="Find the identity an address belongs to")
    lookup_p.add_argument("address", help="Address to look up")
    lookup_p.set_defaults(func=cmd_lookup)

    events_p = subparsers.add_parser("events", help="List committed registry events")
    events_p.add_argument("--ein", type=int, default=None, help="Only events of this identity")
    events_p.add_argument("--kind", choices=sorted(EVENT_TYPES), default=None, help="Only events of this kind")
    events_p.set_defaults(func=cmd_events)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_details(args: argparse.Namespace) -> int:
    """Show one identity."""
    try:
        registry, _ = _load_registry(_store_path(args))
        details = registry.get_details(args.ein)
    except RegistryError as e:
        output_error(e.message)
        return 1

    if args.json:
        output_json({"ein": args.ein, **details.to_dict()})
        return 0

    print(f"Identity {args.ein}")
    print(f"  Recovery address: {details.recovery_address}")
    for label, members in (
        ("Associated addresses", details.associated_addresses),
        ("Providers", details.providers),
        ("Resolvers", details.resolvers),
    ):
        print(f"  {label} ({len(members)}):")
        for member in members:
            print(f"    {member}")
    return 0


def cmd_lookup(args: argparse.Namespace) -> int:
    """Resolve an address to its EIN."""
    try:
        registry, _ = _load_registry(_store_path(args))
        ein = registry.get_ein(args.address)
    except RegistryError as e:
        output_error(e.message)
        return 1

    if args.json:
        output_json({"address": args.address, "ein": ein})
    else:
        print(f"{args.address} -> identity {ein}")
    return 0


def cmd_events(args: argparse.Namespace) -> int:
    """List events, oldest first."""
    try:
        registry, _ = _load_registry(_store_path(args))
        events = registry.events(ein=args.ein, kind=args.kind)
    except RegistryError as e:
        output_error(e.message)
        return 1

    if args.json:
        output_json([e.to_dict() for e in events])
        return 0

    if not events:
        print("No events recorded.")
        return 0
    for event in events:
        print(f"#{event.sequence:<5} t={event.timestamp} ein={event.ein} {event.kind} by {event.initiator}")
    return 0
