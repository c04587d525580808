"""Notification records emitted by committed registry transactions.

Events are immutable and appended to an ordered log; nothing ever edits or
removes one. Each carries the transaction's sender (``initiator``), the EIN
it touched and the ledger time it committed at. The log assigns a sequence
number on append.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, kw_only=True)
class RegistryEvent:
    """Base class for all registry notifications."""

    kind: ClassVar[str] = "RegistryEvent"

    initiator: str
    ein: int
    timestamp: int
    sequence: int = -1

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        data["kind"] = self.kind
        return data


@dataclass(frozen=True, kw_only=True)
class IdentityMinted(RegistryEvent):
    kind: ClassVar[str] = "IdentityMinted"

    recovery_address: str
    associated_address: str
    provider: str
    resolvers: tuple[str, ...]
    delegated: bool


@dataclass(frozen=True, kw_only=True)
class AddressAdded(RegistryEvent):
    kind: ClassVar[str] = "AddressAdded"

    approving_address: str
    added_address: str


@dataclass(frozen=True, kw_only=True)
class AddressRemoved(RegistryEvent):
    kind: ClassVar[str] = "AddressRemoved"

    removed_address: str


@dataclass(frozen=True, kw_only=True)
class ProviderAdded(RegistryEvent):
    kind: ClassVar[str] = "ProviderAdded"

    provider: str
    delegated: bool


@dataclass(frozen=True, kw_only=True)
class ProviderRemoved(RegistryEvent):
    kind: ClassVar[str] = "ProviderRemoved"

    provider: str
    delegated: bool


@dataclass(frozen=True, kw_only=True)
class ResolverAdded(RegistryEvent):
    kind: ClassVar[str] = "ResolverAdded"

    resolver: str


@dataclass(frozen=True, kw_only=True)
class ResolverRemoved(RegistryEvent):
    kind: ClassVar[str] = "ResolverRemoved"

    resolver: str


@dataclass(frozen=True, kw_only=True)
class RecoveryAddressChangeInitiated(RegistryEvent):
    kind: ClassVar[str] = "RecoveryAddressChangeInitiated"

    old_recovery_address: str
    new_recovery_address: str


@dataclass(frozen=True, kw_only=True)
class RecoveryTriggered(RegistryEvent):
    """A recovery replaced every associated address.

    ``old_associated_addresses`` is in the order the recovery hash commits
    to; an evicted address proves membership by splitting this list around
    itself.
    """

    kind: ClassVar[str] = "RecoveryTriggered"

    old_associated_addresses: tuple[str, ...]
    new_associated_address: str


@dataclass(frozen=True, kw_only=True)
class IdentityPoisoned(RegistryEvent):
    kind: ClassVar[str] = "IdentityPoisoned"

    recovery_address: str
    resolvers_cleared: bool


EVENT_TYPES: dict[str, type[RegistryEvent]] = {
    cls.kind: cls
    for cls in (
        IdentityMinted,
        AddressAdded,
        AddressRemoved,
        ProviderAdded,
        ProviderRemoved,
        ResolverAdded,
        ResolverRemoved,
        RecoveryAddressChangeInitiated,
        RecoveryTriggered,
        IdentityPoisoned,
    )
}


def event_from_dict(data: dict[str, Any]) -> RegistryEvent:
    """Rebuild an event serialized with :meth:`RegistryEvent.to_dict`."""
    fields = dict(data)
    kind = fields.pop("kind")
    try:
        cls = EVENT_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown event kind: {kind}") from None
    for key, value in fields.items():
        if isinstance(value, list):
            fields[key] = tuple(value)
    return cls(**fields)


class EventLog:
    """Append-only, ordered log of registry events."""

    def __init__(self) -> None:
        self._events: list[RegistryEvent] = []

    def append(self, event: RegistryEvent) -> RegistryEvent:
        """Stamp ``event`` with the next sequence number and store it."""
        stamped = dataclasses.replace(event, sequence=len(self._events))
        self._events.append(stamped)
        return stamped

    def filter(self, ein: int | None = None, kind: str | None = None) -> list[RegistryEvent]:
        return [
            e
            for e in self._events
            if (ein is None or e.ein == ein) and (kind is None or e.kind == kind)
        ]

    def __iter__(self) -> Iterator[RegistryEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self._events]

    @classmethod
    def from_list(cls, items: list[dict[str, Any]]) -> EventLog:
        log = cls()
        for item in items:
            log._events.append(event_from_dict(item))
        return log
