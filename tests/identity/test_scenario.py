"""End-to-end lifecycle of one identity: mint, grow, change recovery, recover, poison."""

from __future__ import annotations

import pytest

from identity_registry.core.exceptions import ConflictError, NotFoundError, UnauthorizedError


def test_full_lifecycle(registry, permissions, clock, accounts):
    r0, r1, a0, a1, a2, p0, resolver = accounts[:7]

    # Mint EIN 1
    ein = registry.mint_identity(r0.address, p0.address, [], sender=a0.address)
    assert ein == 1

    # A1 joins with approval from A0 and its own consent
    sigs, stamps = permissions.add_address(ein, a0, a1)
    registry.add_address(a0.address, a1.address, sigs, stamps, sender=p0.address)

    details = registry.get_details(ein)
    assert details.recovery_address == r0.address
    assert set(details.associated_addresses) == {a0.address, a1.address}
    assert details.providers == (p0.address,)
    assert details.resolvers == ()

    registry.add_resolvers(ein, [resolver.address], sender=p0.address)

    # P0 moves the recovery address to R1
    clock.advance(60)
    registry.initiate_recovery_address_change(ein, r1.address, sender=p0.address)
    assert registry.get_details(ein).recovery_address == r1.address

    # Within the window R1 may not recover, R0 may
    clock.advance(60 * 60 * 24)
    sig, ts = permissions.recovery(ein, a2)
    with pytest.raises(UnauthorizedError):
        registry.trigger_recovery(ein, a2.address, sig, ts, sender=r1.address)
    registry.trigger_recovery(ein, a2.address, sig, ts, sender=r0.address)

    details = registry.get_details(ein)
    assert details.recovery_address == r0.address
    assert details.associated_addresses == (a2.address,)
    assert details.providers == ()
    assert details.resolvers == (resolver.address,)

    # A1, evicted by that recovery, swallows the poison pill
    (recovery_event,) = registry.events(kind="RecoveryTriggered")
    evicted = list(recovery_event.old_associated_addresses)
    position = evicted.index(a1.address)
    clock.advance(60)
    registry.trigger_poison_pill(ein, evicted[:position], evicted[position + 1 :], False, sender=a1.address)

    details = registry.get_details(ein)
    assert details.recovery_address == r0.address
    assert details.associated_addresses == ()
    assert details.providers == ()
    assert details.resolvers == (resolver.address,)
    with pytest.raises(NotFoundError):
        registry.get_ein(a2.address)

    assert [e.kind for e in registry.events(ein=ein)] == [
        "IdentityMinted",
        "AddressAdded",
        "ResolverAdded",
        "RecoveryAddressChangeInitiated",
        "RecoveryTriggered",
        "IdentityPoisoned",
    ]
    assert [e.sequence for e in registry.events()] == list(range(6))


def test_address_belongs_to_one_identity(registry, permissions, accounts):
    recovery, provider, a, b = accounts[:4]
    first = registry.mint_identity(recovery.address, provider.address, sender=a.address)
    second = registry.mint_identity(recovery.address, provider.address, sender=b.address)

    # B cannot be pulled into the first identity while it holds the second
    sigs, stamps = permissions.add_address(first, a, b)
    with pytest.raises(ConflictError):
        registry.add_address(a.address, b.address, sigs, stamps, sender=provider.address)

    sig, ts = permissions.remove_address(second, b)
    registry.remove_address(b.address, sig, ts, sender=provider.address)
    sigs, stamps = permissions.add_address(first, a, b)
    registry.add_address(a.address, b.address, sigs, stamps, sender=provider.address)

    assert registry.get_ein(b.address) == first
    assert not registry.is_address_for(second, b.address)
