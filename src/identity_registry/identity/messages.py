"""Permission message formats.

Each permission is ``keccak256(abi.encodePacked(purpose, registry, ...))``.
The byte layout is fixed: wallets and other registry clients compute the
same hashes, so field order and Solidity types here must never change.
"""

from __future__ import annotations

from collections.abc import Sequence

from web3 import Web3

MINT_PURPOSE = "I authorize an Identity to be minted on my behalf."
ADD_ADDRESS_APPROVE_PURPOSE = "I authorize adding this address to my Identity."
ADD_ADDRESS_JOIN_PURPOSE = "I authorize being added to this Identity."
REMOVE_ADDRESS_PURPOSE = "I authorize removing this address from my Identity."
RECOVERY_PURPOSE = "I authorize being added to this Identity via recovery."


def _solidity_keccak(abi_types: list[str], values: list) -> bytes:
    return bytes(Web3.solidity_keccak(abi_types, values))


def mint_permission_hash(
    registry: str,
    recovery_address: str,
    associated_address: str,
    provider: str,
    resolvers: Sequence[str],
    timestamp: int,
) -> bytes:
    """Hash an associated address signs to let ``provider`` mint for it."""
    return _solidity_keccak(
        ["string", "address", "address", "address", "address", "address[]", "uint256"],
        [MINT_PURPOSE, registry, recovery_address, associated_address, provider, list(resolvers), timestamp],
    )


def _address_permission_hash(purpose: str, registry: str, ein: int, address: str, timestamp: int) -> bytes:
    return _solidity_keccak(
        ["string", "address", "uint256", "address", "uint256"],
        [purpose, registry, ein, address, timestamp],
    )


def add_address_approval_hash(registry: str, ein: int, address_to_add: str, timestamp: int) -> bytes:
    """Hash an already-associated address signs to approve a new member."""
    return _address_permission_hash(ADD_ADDRESS_APPROVE_PURPOSE, registry, ein, address_to_add, timestamp)


def add_address_consent_hash(registry: str, ein: int, address_to_add: str, timestamp: int) -> bytes:
    """Hash the joining address signs to consent to being added."""
    return _address_permission_hash(ADD_ADDRESS_JOIN_PURPOSE, registry, ein, address_to_add, timestamp)


def remove_address_hash(registry: str, ein: int, address_to_remove: str, timestamp: int) -> bytes:
    """Hash an associated address signs to leave its identity."""
    return _address_permission_hash(REMOVE_ADDRESS_PURPOSE, registry, ein, address_to_remove, timestamp)


def recovery_permission_hash(registry: str, ein: int, new_associated_address: str, timestamp: int) -> bytes:
    """Hash the incoming address signs to be installed by a recovery."""
    return _address_permission_hash(RECOVERY_PURPOSE, registry, ein, new_associated_address, timestamp)


def address_list_hash(addresses: Sequence[str]) -> bytes:
    """``keccak256(abi.encodePacked(address[]))``, each member padded to 32 bytes."""
    return _solidity_keccak(["address[]"], [list(addresses)])
