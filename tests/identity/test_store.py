"""Tests for the in-memory store and its JSON snapshots."""

from __future__ import annotations

import json

import pytest

from identity_registry.core.exceptions import ConfigError
from identity_registry.identity.models import Identity, RecoveredChangeLog
from identity_registry.identity.registry import IdentityRegistry
from identity_registry.identity.store import SNAPSHOT_VERSION, InMemoryIdentityStore, load_store, save_store

A = "0x1111111111111111111111111111111111111111"
B = "0x2222222222222222222222222222222222222222"
R = "0x3333333333333333333333333333333333333333"


def _snapshot(**overrides) -> dict:
    data = {
        "version": SNAPSHOT_VERSION,
        "next_ein": 2,
        "identities": {
            "1": {"recovery_address": R, "associated_addresses": [A], "providers": [], "resolvers": []},
        },
        "recovery_address_changes": {},
        "recovered_changes": {},
        "events": [],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class TestInMemoryIdentityStore:
    def test_ein_allocation(self):
        store = InMemoryIdentityStore()
        assert store.last_ein() == 0
        assert store.allocate_ein() == 1
        assert store.allocate_ein() == 2
        assert store.last_ein() == 2

    def test_reverse_index(self):
        store = InMemoryIdentityStore()
        store.link_address(A, 1)
        assert store.get_ein(A) == 1
        store.unlink_address(A)
        assert store.get_ein(A) is None
        # unlinking twice is harmless
        store.unlink_address(A)

    def test_logs(self):
        store = InMemoryIdentityStore()
        assert store.get_recovered_change(1) is None
        log = RecoveredChangeLog(timestamp=5, evicted_addresses_hash=b"\x01" * 32)
        store.save_recovered_change(1, log)
        assert store.get_recovered_change(1) == log


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


class TestSnapshot:
    @pytest.fixture()
    def busy_registry(self, registry, permissions, cast, populated):
        registry.add_resolvers(populated, [cast.outsiders[5].address], sender=cast.provider.address)
        registry.initiate_recovery_address_change(populated, cast.outsiders[2].address, sender=cast.provider.address)
        sig, ts = permissions.recovery(populated, cast.outsiders[0])
        registry.trigger_recovery(populated, cast.outsiders[0].address, sig, ts, sender=cast.recovery.address)
        registry.mint_identity(cast.recovery.address, cast.provider.address, sender=cast.outsiders[1].address)
        return registry

    def test_save_and_load(self, busy_registry, settings, clock, tmp_path):
        path = tmp_path / "state" / "registry.json"
        save_store(busy_registry.store, path)
        restored = IdentityRegistry(store=load_store(path), settings=settings, clock=clock)

        for ein in (1, 2):
            assert restored.get_details(ein) == busy_registry.get_details(ein)
        assert restored.store.last_ein() == 2
        assert restored.store.get_recovered_change(1) == busy_registry.store.get_recovered_change(1)
        assert restored.store.get_recovery_address_change(1) == busy_registry.store.get_recovery_address_change(1)
        assert [e.to_dict() for e in restored.events()] == [e.to_dict() for e in busy_registry.events()]

    def test_restored_registry_keeps_working(self, busy_registry, settings, clock, cast, tmp_path):
        path = tmp_path / "registry.json"
        save_store(busy_registry.store, path)
        restored = IdentityRegistry(store=load_store(path), settings=settings, clock=clock)

        (event,) = restored.events(kind="RecoveryTriggered")
        evicted = list(event.old_associated_addresses)
        restored.trigger_poison_pill(1, [], evicted[1:], False, sender=evicted[0])
        assert restored.get_details(1).associated_addresses == ()
        assert restored.mint_identity(R, cast.provider.address, sender=cast.outsiders[3].address) == 3

    def test_no_temp_files_left(self, busy_registry, tmp_path):
        save_store(busy_registry.store, tmp_path / "registry.json")
        assert [p.name for p in tmp_path.iterdir()] == ["registry.json"]

    def test_missing_file_is_empty_store(self, tmp_path):
        store = load_store(tmp_path / "absent.json")
        assert store.last_ein() == 0

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_store(path)

    def test_unsupported_version(self):
        with pytest.raises(ConfigError, match="version"):
            InMemoryIdentityStore.from_dict(_snapshot(version=99))

    def test_missing_field(self):
        data = _snapshot()
        del data["next_ein"]
        with pytest.raises(ConfigError, match="Corrupt"):
            InMemoryIdentityStore.from_dict(data)

    def test_unknown_event_kind(self):
        events = [{"kind": "Bogus", "initiator": A, "ein": 1, "timestamp": 0, "sequence": 0}]
        with pytest.raises(ConfigError):
            InMemoryIdentityStore.from_dict(_snapshot(events=events))

    def test_ein_out_of_range(self):
        with pytest.raises(ConfigError):
            InMemoryIdentityStore.from_dict(_snapshot(next_ein=1))

    def test_address_shared_between_identities(self):
        identities = {
            "1": Identity(recovery_address=R).to_dict() | {"associated_addresses": [A]},
            "2": Identity(recovery_address=R).to_dict() | {"associated_addresses": [A, B]},
        }
        with pytest.raises(ConfigError, match="associated with identities"):
            InMemoryIdentityStore.from_dict(_snapshot(next_ein=3, identities=identities))

    def test_address_cap_enforced(self):
        identities = {"1": {"recovery_address": R, "associated_addresses": [A, B]}}
        with pytest.raises(ConfigError):
            InMemoryIdentityStore.from_dict(_snapshot(identities=identities), max_associated_addresses=1)

    def test_reverse_index_rebuilt(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps(_snapshot()))
        store = load_store(path)
        assert store.get_ein(A) == 1
        assert store.get_ein(B) is None
