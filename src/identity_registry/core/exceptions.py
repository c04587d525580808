# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Custom exception hierarchy for the identity registry.

Every rejected transaction raises exactly one of these. The class tells the
caller *which* precondition failed, the message carries the reason:

- :class:`NotFoundError`: referenced identity or address mapping absent
- :class:`ConflictError`: address already taken, or the address cap is hit
- :class:`UnauthorizedError`: bad signature or missing role
- :class:`TimingError`: stale/future signature or cooldown not elapsed

A raised error always means the registry state is unchanged.
"""

from __future__ import annotations

from typing import Any


class RegistryError(Exception):
    """Base exception for all identity registry errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(RegistryError):
    """Exception for malformed input.

    Raised when:
    - A value is not a valid address
    - An EIN or timestamp is negative
    - A paired argument has the wrong arity
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigError(RegistryError):
    """Exception for configuration and snapshot errors.

    Raised when:
    - Settings hold out-of-range values
    - A persisted store snapshot is corrupt or violates an invariant
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


class NotFoundError(RegistryError):
    """Exception for absent identities and address mappings."""

    def __init__(self, resource_type: str, resource_id: Any):
        message = f"{resource_type} not found: {resource_id}"
        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
        }
        super().__init__(message, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(RegistryError):
    """Exception for state conflicts.

    Raised when:
    - An address already belongs to an identity
    - An identity already holds the maximum number of addresses
    """

    def __init__(self, message: str, address: str | None = None, ein: int | None = None):
        details: dict[str, Any] = {}
        if address:
            details["address"] = address
        if ein is not None:
            details["ein"] = ein
        super().__init__(message, details)
        self.address = address
        self.ein = ein


class UnauthorizedError(RegistryError):
    """Exception for failed authorization.

    Raised when:
    - A permission signature does not recover to the claimed signer
    - The sender is not a provider / associated address of the identity
    - The sender is not the recovery address entitled to act right now
    - A poison-pill proof does not match the recorded evicted set
    """

    def __init__(self, message: str, sender: str | None = None):
        details = {}
        if sender:
            details["sender"] = sender
        super().__init__(message, details)
        self.sender = sender


class TimingError(RegistryError):
    """Exception for time-window violations.

    Raised when:
    - A signature timestamp lies outside its freshness window
    - A cooldown (recovery address change, recovery) has not elapsed
    - The poison-pill window is closed
    """

    def __init__(self, message: str, timestamp: int | None = None, now: int | None = None):
        details = {}
        if timestamp is not None:
            details["timestamp"] = timestamp
        if now is not None:
            details["now"] = now
        super().__init__(message, details)
        self.timestamp = timestamp
        self.now = now


class ReentrancyError(RegistryError):
    """Raised when a mutating operation starts inside another one."""

    def __init__(self, operation: str, active: str):
        super().__init__(
            f"Cannot run {operation} while {active} is in progress",
            {"operation": operation, "active": active},
        )
        self.operation = operation
        self.active = active
