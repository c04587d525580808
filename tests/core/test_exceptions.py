"""Tests for identity_registry.core.exceptions module."""

from __future__ import annotations

import pytest

from identity_registry.core.exceptions import (
    ConfigError,
    ConflictError,
    NotFoundError,
    ReentrancyError,
    RegistryError,
    TimingError,
    UnauthorizedError,
    ValidationError,
)


# ============================================================================
# RegistryError Tests
# ============================================================================

class TestRegistryError:
    """Tests for base RegistryError."""

    def test_create_with_message(self):
        exc = RegistryError("Something went wrong")
        assert str(exc) == "Something went wrong"
        assert exc.message == "Something went wrong"
        assert exc.details == {}

    def test_to_dict(self):
        """to_dict should use the concrete class name."""
        d = TimingError("Timestamp is not valid.", timestamp=1, now=2).to_dict()
        assert d == {
            "error": "TimingError",
            "message": "Timestamp is not valid.",
            "details": {"timestamp": 1, "now": 2},
        }

    @pytest.mark.parametrize(
        "exc",
        [
            ValidationError("bad"),
            ConfigError("bad"),
            NotFoundError("Identity", 1),
            ConflictError("taken"),
            UnauthorizedError("nope"),
            TimingError("late"),
            ReentrancyError("a", "b"),
        ],
    )
    def test_taxonomy_shares_base(self, exc):
        assert isinstance(exc, RegistryError)


# ============================================================================
# Subclass details
# ============================================================================

class TestValidationError:
    def test_field_and_value(self):
        exc = ValidationError("Invalid", field="sender", value=123)
        assert exc.field == "sender"
        assert exc.details == {"field": "sender", "value": "123"}

    def test_without_field(self):
        assert ValidationError("Invalid").details == {}


class TestConfigError:
    def test_missing_vars(self):
        exc = ConfigError("Missing", missing_vars=["IDENTITY_REGISTRY_STORE_PATH"])
        assert exc.missing_vars == ["IDENTITY_REGISTRY_STORE_PATH"]
        assert exc.details["missing_vars"] == ["IDENTITY_REGISTRY_STORE_PATH"]

    def test_no_missing_vars(self):
        assert ConfigError("Bad").missing_vars == []


class TestNotFoundError:
    def test_message(self):
        exc = NotFoundError("Identity", 7)
        assert exc.message == "Identity not found: 7"
        assert exc.resource_id == 7
        assert exc.details == {"resource_type": "Identity", "resource_id": "7"}


class TestConflictError:
    def test_ein_zero_is_kept(self):
        # EIN 0 never names an identity but must still serialize
        exc = ConflictError("taken", address="0xabc", ein=0)
        assert exc.details == {"address": "0xabc", "ein": 0}


class TestUnauthorizedError:
    def test_sender(self):
        exc = UnauthorizedError("nope", sender="0xabc")
        assert exc.sender == "0xabc"
        assert exc.details == {"sender": "0xabc"}


class TestReentrancyError:
    def test_message(self):
        exc = ReentrancyError("add_address", "mint_identity")
        assert exc.message == "Cannot run add_address while mint_identity is in progress"
        assert exc.details == {"operation": "add_address", "active": "mint_identity"}
