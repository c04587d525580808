"""Storage backends for registry state.

The registry never touches storage directly; it goes through the
:class:`IdentityStore` protocol. The in-memory backend is the default and is
what the tests use. It can be snapshotted to JSON (``save_store`` /
``load_store``), which is how the CLI inspects a registry offline.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from identity_registry.core.exceptions import ConfigError
from identity_registry.identity.events import EventLog, RegistryEvent
from identity_registry.identity.models import (
    Identity,
    RecoveredChangeLog,
    RecoveryAddressChangeLog,
)

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class IdentityStore(Protocol):
    """Abstract storage backend for identity data."""

    def allocate_ein(self) -> int: ...
    def last_ein(self) -> int: ...
    def get_identity(self, ein: int) -> Identity | None: ...
    def save_identity(self, ein: int, identity: Identity) -> None: ...
    def get_ein(self, address: str) -> int | None: ...
    def link_address(self, address: str, ein: int) -> None: ...
    def unlink_address(self, address: str) -> None: ...
    def get_recovery_address_change(self, ein: int) -> RecoveryAddressChangeLog | None: ...
    def save_recovery_address_change(self, ein: int, log: RecoveryAddressChangeLog) -> None: ...
    def get_recovered_change(self, ein: int) -> RecoveredChangeLog | None: ...
    def save_recovered_change(self, ein: int, log: RecoveredChangeLog) -> None: ...
    def append_event(self, event: RegistryEvent) -> RegistryEvent: ...
    def list_events(self, ein: int | None = None, kind: str | None = None) -> list[RegistryEvent]: ...


# ---------------------------------------------------------------------------
# In-memory store (default / tests)
# ---------------------------------------------------------------------------


class InMemoryIdentityStore:
    """Simple in-memory implementation of :class:`IdentityStore`."""

    def __init__(self) -> None:
        self._next_ein = 1
        self._identities: dict[int, Identity] = {}
        self._address_to_ein: dict[str, int] = {}
        self._recovery_address_changes: dict[int, RecoveryAddressChangeLog] = {}
        self._recovered_changes: dict[int, RecoveredChangeLog] = {}
        self._events = EventLog()

    def allocate_ein(self) -> int:
        ein = self._next_ein
        self._next_ein += 1
        return ein

    def last_ein(self) -> int:
        return self._next_ein - 1

    def get_identity(self, ein: int) -> Identity | None:
        return self._identities.get(ein)

    def save_identity(self, ein: int, identity: Identity) -> None:
        self._identities[ein] = identity

    def get_ein(self, address: str) -> int | None:
        return self._address_to_ein.get(address)

    def link_address(self, address: str, ein: int) -> None:
        self._address_to_ein[address] = ein

    def unlink_address(self, address: str) -> None:
        self._address_to_ein.pop(address, None)

    def get_recovery_address_change(self, ein: int) -> RecoveryAddressChangeLog | None:
        return self._recovery_address_changes.get(ein)

    def save_recovery_address_change(self, ein: int, log: RecoveryAddressChangeLog) -> None:
        self._recovery_address_changes[ein] = log

    def get_recovered_change(self, ein: int) -> RecoveredChangeLog | None:
        return self._recovered_changes.get(ein)

    def save_recovered_change(self, ein: int, log: RecoveredChangeLog) -> None:
        self._recovered_changes[ein] = log

    def append_event(self, event: RegistryEvent) -> RegistryEvent:
        return self._events.append(event)

    def list_events(self, ein: int | None = None, kind: str | None = None) -> list[RegistryEvent]:
        return self._events.filter(ein=ein, kind=kind)

    # -- serialisation --

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "next_ein": self._next_ein,
            "identities": {str(ein): ident.to_dict() for ein, ident in self._identities.items()},
            "recovery_address_changes": {
                str(ein): log.to_dict() for ein, log in self._recovery_address_changes.items()
            },
            "recovered_changes": {str(ein): log.to_dict() for ein, log in self._recovered_changes.items()},
            "events": self._events.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_associated_addresses: int | None = None) -> InMemoryIdentityStore:
        """Rebuild a store from a snapshot, re-checking its invariants.

        The reverse index is derived from the identities rather than stored,
        so it cannot disagree with them.

        Raises:
            ConfigError: If the snapshot is malformed or inconsistent.
        """
        if data.get("version") != SNAPSHOT_VERSION:
            raise ConfigError(f"Unsupported store snapshot version: {data.get('version')!r}")

        store = cls()
        try:
            store._next_ein = int(data["next_ein"])
            for key, ident_data in data.get("identities", {}).items():
                store._identities[int(key)] = Identity.from_dict(ident_data)
            for key, log_data in data.get("recovery_address_changes", {}).items():
                store._recovery_address_changes[int(key)] = RecoveryAddressChangeLog.from_dict(log_data)
            for key, log_data in data.get("recovered_changes", {}).items():
                store._recovered_changes[int(key)] = RecoveredChangeLog.from_dict(log_data)
            store._events = EventLog.from_list(data.get("events", []))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Corrupt store snapshot: {e}") from e

        for ein, identity in store._identities.items():
            if not 0 < ein < store._next_ein:
                raise ConfigError(f"Snapshot holds identity {ein} outside 1..{store._next_ein - 1}")
            if max_associated_addresses is not None and len(identity.associated_addresses) > max_associated_addresses:
                raise ConfigError(f"Identity {ein} exceeds {max_associated_addresses} associated addresses")
            for address in identity.associated_addresses:
                owner = store._address_to_ein.get(address)
                if owner is not None:
                    raise ConfigError(f"Address {address} is associated with identities {owner} and {ein}")
                store._address_to_ein[address] = ein

        return store


def save_store(store: InMemoryIdentityStore, path: str | Path) -> None:
    """Write a JSON snapshot atomically (temp file + rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(store.to_dict(), f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved store snapshot to %s", path)


def load_store(path: str | Path, max_associated_addresses: int | None = None) -> InMemoryIdentityStore:
    """Load a JSON snapshot; a missing file yields an empty store."""
    path = Path(path)
    if not path.exists():
        logger.debug("No store snapshot at %s, starting empty", path)
        return InMemoryIdentityStore()
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"Store snapshot {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Store snapshot {path} must hold a JSON object")
    return InMemoryIdentityStore.from_dict(data, max_associated_addresses=max_associated_addresses)
