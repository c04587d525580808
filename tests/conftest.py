"""Global test fixtures for the identity registry test suite."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

import pytest

from identity_registry.core.clock import ManualClock
from identity_registry.core.config import RegistrySettings, clear_config_cache
from identity_registry.identity import messages
from identity_registry.identity.registry import IdentityRegistry
from identity_registry.identity.signatures import Signature, address_of, sign_message_hash

GENESIS = 1_700_000_000
REGISTRY_ADDRESS = "0x00000000000000000000000000000000DeaDBeef"

# ============================================================================
# Accounts
# ============================================================================


@dataclass(frozen=True)
class Account:
    """A test keypair."""

    private_key: str
    address: str

    def sign(self, message_hash: bytes, prefixed: bool = True) -> Signature:
        return sign_message_hash(self.private_key, message_hash, prefixed=prefixed)


def make_account(index: int) -> Account:
    private_key = f"0x{index + 1:064x}"
    return Account(private_key=private_key, address=address_of(private_key))


@pytest.fixture(scope="session")
def accounts() -> list[Account]:
    return [make_account(i) for i in range(16)]


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Strip IDENTITY_REGISTRY_* variables so settings fall back to defaults."""
    for key in list(os.environ):
        if key.startswith("IDENTITY_REGISTRY_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Registry
# ============================================================================


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(GENESIS)


@pytest.fixture
def settings(clean_env) -> RegistrySettings:
    return RegistrySettings(registry_address=REGISTRY_ADDRESS)


@pytest.fixture
def registry(settings, clock) -> IdentityRegistry:
    return IdentityRegistry(settings=settings, clock=clock)


class Permissions:
    """Builds signed permissions for a given registry."""

    def __init__(self, registry: IdentityRegistry, clock: ManualClock) -> None:
        self.registry = registry
        self.clock = clock

    def timestamp(self) -> int:
        return self.clock.now() - 1

    def mint(
        self,
        signer: Account,
        recovery: str,
        provider: str,
        resolvers: Sequence[str] = (),
        timestamp: int | None = None,
    ) -> tuple[Signature, int]:
        ts = self.timestamp() if timestamp is None else timestamp
        digest = messages.mint_permission_hash(
            self.registry.address, recovery, signer.address, provider, list(resolvers), ts
        )
        return signer.sign(digest), ts

    def add_address(
        self,
        ein: int,
        approver: Account,
        joiner: Account,
        timestamp: int | None = None,
    ) -> tuple[tuple[Signature, Signature], tuple[int, int]]:
        ts = self.timestamp() if timestamp is None else timestamp
        approval = approver.sign(messages.add_address_approval_hash(self.registry.address, ein, joiner.address, ts))
        consent = joiner.sign(messages.add_address_consent_hash(self.registry.address, ein, joiner.address, ts))
        return (approval, consent), (ts, ts)

    def remove_address(self, ein: int, leaver: Account, timestamp: int | None = None) -> tuple[Signature, int]:
        ts = self.timestamp() if timestamp is None else timestamp
        return leaver.sign(messages.remove_address_hash(self.registry.address, ein, leaver.address, ts)), ts

    def recovery(self, ein: int, joiner: Account, timestamp: int | None = None) -> tuple[Signature, int]:
        ts = self.timestamp() if timestamp is None else timestamp
        return joiner.sign(messages.recovery_permission_hash(self.registry.address, ein, joiner.address, ts)), ts


@pytest.fixture
def permissions(registry, clock) -> Permissions:
    return Permissions(registry, clock)


@dataclass
class Cast:
    """Named accounts of the standard test identity."""

    recovery: Account
    associated: list[Account]
    provider: Account
    outsiders: list[Account]


@pytest.fixture
def cast(accounts) -> Cast:
    return Cast(
        recovery=accounts[0],
        associated=accounts[1:4],
        provider=accounts[4],
        outsiders=accounts[5:],
    )


@pytest.fixture
def minted(registry, cast) -> int:
    """Identity 1: recovery R0, first associated address A0, provider P0."""
    return registry.mint_identity(cast.recovery.address, cast.provider.address, [], sender=cast.associated[0].address)


@pytest.fixture
def populated(registry, permissions, cast, minted) -> int:
    """Identity 1 with all three associated addresses linked."""
    for joiner in cast.associated[1:]:
        sigs, stamps = permissions.add_address(minted, cast.associated[0], joiner)
        registry.add_address(cast.associated[0].address, joiner.address, sigs, stamps, sender=cast.provider.address)
    return minted


@pytest.fixture
def make_permissions():
    """Factory for permissions bound to a registry other than the default one."""
    return Permissions
