"""Tests for identity data models."""

from __future__ import annotations

from identity_registry.identity.address_set import AddressSet
from identity_registry.identity.models import (
    ActingAs,
    Identity,
    RecoveredChangeLog,
    RecoveryAddressChangeLog,
    Role,
)

A = "0x1111111111111111111111111111111111111111"
B = "0x2222222222222222222222222222222222222222"
R = "0x3333333333333333333333333333333333333333"


class TestIdentity:
    def test_details_snapshot(self):
        identity = Identity(recovery_address=R, associated_addresses=AddressSet([A, B]))
        details = identity.details()
        identity.associated_addresses.remove(A)
        assert details.associated_addresses == (A, B)
        assert details.providers == ()

    def test_dict_round_trip(self):
        identity = Identity(recovery_address=R, providers=AddressSet([A]), resolvers=AddressSet([B]))
        restored = Identity.from_dict(identity.to_dict())
        assert restored == identity
        assert restored.providers.members() == [A]

    def test_details_to_dict(self):
        details = Identity(recovery_address=R, associated_addresses=AddressSet([A])).details()
        assert details.to_dict() == {
            "recovery_address": R,
            "associated_addresses": [A],
            "providers": [],
            "resolvers": [],
        }


class TestLogs:
    def test_recovered_change_log_hex(self):
        log = RecoveredChangeLog(timestamp=3, evicted_addresses_hash=bytes(range(32)))
        data = log.to_dict()
        assert data["evicted_addresses_hash"].startswith("0x")
        assert RecoveredChangeLog.from_dict(data) == log

    def test_recovered_change_log_consumed_default(self):
        data = {"timestamp": 1, "evicted_addresses_hash": "0x" + "00" * 32}
        assert RecoveredChangeLog.from_dict(data).consumed is False

    def test_recovery_address_change_log(self):
        log = RecoveryAddressChangeLog(timestamp=9, old_recovery_address=R)
        assert RecoveryAddressChangeLog.from_dict(log.to_dict()) == log


class TestActingAs:
    def test_self(self):
        acting = ActingAs.self_(A)
        assert acting.role == Role.SELF
        assert acting.ein is None
        assert not acting.delegated

    def test_provider(self):
        acting = ActingAs.provider(A, 4)
        assert acting.role == Role.PROVIDER
        assert acting.ein == 4
        assert acting.delegated
        assert acting.role.value == "provider"
