"""Identity data model.

An identity is addressed by its EIN, a sequential integer handle starting at
1 (0 never names an identity). It binds:

- one **recovery address**, authoritative for recovery actions,
- a set of **associated addresses**, each owned by exactly one identity,
- a set of **providers**, trusted to act on the identity's behalf,
- a set of **resolvers**, extensions attached to the identity.

Two per-identity logs drive the recovery state machine:
:class:`RecoveryAddressChangeLog` keeps the displaced recovery address
trusted for a grace window, :class:`RecoveredChangeLog` commits to the set of
addresses a recovery evicted so exactly those may swallow the poison pill.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from identity_registry.identity.address_set import AddressSet

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@dataclass
class Identity:
    """Mutable per-identity state held by the store.

    Attributes:
        recovery_address: Address empowered to run a recovery.
        associated_addresses: Addresses that *are* this identity.
        providers: Addresses allowed to act for the identity.
        resolvers: Extensions attached to the identity.
    """

    recovery_address: str
    associated_addresses: AddressSet = field(default_factory=AddressSet)
    providers: AddressSet = field(default_factory=AddressSet)
    resolvers: AddressSet = field(default_factory=AddressSet)

    def details(self) -> IdentityDetails:
        return IdentityDetails(
            recovery_address=self.recovery_address,
            associated_addresses=tuple(self.associated_addresses.members()),
            providers=tuple(self.providers.members()),
            resolvers=tuple(self.resolvers.members()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "recovery_address": self.recovery_address,
            "associated_addresses": self.associated_addresses.members(),
            "providers": self.providers.members(),
            "resolvers": self.resolvers.members(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Identity:
        return cls(
            recovery_address=data["recovery_address"],
            associated_addresses=AddressSet(data.get("associated_addresses", [])),
            providers=AddressSet(data.get("providers", [])),
            resolvers=AddressSet(data.get("resolvers", [])),
        )


@dataclass(frozen=True)
class IdentityDetails:
    """Read-only snapshot returned by ``IdentityRegistry.get_details``.

    Address tuples are in the store's enumeration order; compare them as
    sets unless you specifically care about that order.
    """

    recovery_address: str
    associated_addresses: tuple[str, ...]
    providers: tuple[str, ...]
    resolvers: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "recovery_address": self.recovery_address,
            "associated_addresses": list(self.associated_addresses),
            "providers": list(self.providers),
            "resolvers": list(self.resolvers),
        }


# ---------------------------------------------------------------------------
# Recovery logs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecoveryAddressChangeLog:
    """The most recent swap of an identity's recovery address."""

    timestamp: int
    old_recovery_address: str

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "old_recovery_address": self.old_recovery_address}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecoveryAddressChangeLog:
        return cls(timestamp=int(data["timestamp"]), old_recovery_address=data["old_recovery_address"])


@dataclass(frozen=True)
class RecoveredChangeLog:
    """The most recent recovery of an identity.

    Attributes:
        timestamp: Ledger time of the recovery.
        evicted_addresses_hash: Packed keccak of the evicted associated
            addresses, in their enumeration order at eviction time.
        consumed: Set once a poison pill has been triggered against this
            recovery; a consumed log authorizes nothing.
    """

    timestamp: int
    evicted_addresses_hash: bytes
    consumed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "evicted_addresses_hash": "0x" + self.evicted_addresses_hash.hex(),
            "consumed": self.consumed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecoveredChangeLog:
        return cls(
            timestamp=int(data["timestamp"]),
            evicted_addresses_hash=bytes.fromhex(data["evicted_addresses_hash"].removeprefix("0x")),
            consumed=bool(data.get("consumed", False)),
        )


# ---------------------------------------------------------------------------
# Acting roles
# ---------------------------------------------------------------------------


class Role(enum.StrEnum):
    """Capacity in which a sender manages an identity's providers."""

    SELF = "self"
    PROVIDER = "provider"


@dataclass(frozen=True)
class ActingAs:
    """Who is acting, and for which identity.

    ``Role.SELF`` means an associated address managing its own identity
    (the EIN is resolved from the address). ``Role.PROVIDER`` means an
    existing provider acting for an explicit EIN.
    """

    role: Role
    address: str
    ein: int | None = None

    @classmethod
    def self_(cls, address: str) -> ActingAs:
        return cls(role=Role.SELF, address=address)

    @classmethod
    def provider(cls, address: str, ein: int) -> ActingAs:
        return cls(role=Role.PROVIDER, address=address, ein=ein)

    @property
    def delegated(self) -> bool:
        return self.role == Role.PROVIDER
