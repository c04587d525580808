"""Identity registry: the public API over identities, recovery and poison pills.

Every mutating method is one self-contained transaction:

1. resolve the identity it acts on,
2. check the sender's role,
3. check state (address conflicts, the address cap, cooldowns),
4. check timestamped permission signatures (freshness, then validity),
5. only then mutate the store and append events.

The first failing check raises (see :mod:`identity_registry.core.exceptions`)
and nothing has been written. ``sender`` is the authenticated origin of the
transaction, supplied by whatever submits it; the registry does no session
handling of its own.

Typical workflow::

    registry = IdentityRegistry()

    ein = registry.mint_identity(recovery, provider, [], sender=address)
    registry.add_address(address, new_address, (approval, consent), (t, t), sender=provider)
    registry.initiate_recovery_address_change(ein, new_recovery, sender=provider)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing import Any

from eth_utils import is_address, to_checksum_address

from identity_registry.core.clock import Clock, SystemClock
from identity_registry.core.config import RegistrySettings, get_config
from identity_registry.core.exceptions import (
    ConflictError,
    NotFoundError,
    ReentrancyError,
    RegistryError,
    TimingError,
    UnauthorizedError,
    ValidationError,
)
from identity_registry.core.logging import correlation_context, operation_logger
from identity_registry.identity import messages
from identity_registry.identity.events import (
    AddressAdded,
    AddressRemoved,
    IdentityMinted,
    IdentityPoisoned,
    ProviderAdded,
    ProviderRemoved,
    RecoveryAddressChangeInitiated,
    RecoveryTriggered,
    RegistryEvent,
    ResolverAdded,
    ResolverRemoved,
)
from identity_registry.identity.models import (
    ActingAs,
    Identity,
    IdentityDetails,
    RecoveredChangeLog,
    RecoveryAddressChangeLog,
    Role,
)
from identity_registry.identity.poison_pill import can_poison, proves_eviction
from identity_registry.identity.recovery import (
    can_change_recovery_address,
    can_recover,
    require_entitled_recoverer,
)
from identity_registry.identity.signatures import Signature, is_signed
from identity_registry.identity.store import IdentityStore, InMemoryIdentityStore

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Signature-authorized registry binding EINs to addresses.

    Args:
        store: Storage backend; in-memory if omitted.
        settings: Registry settings; the global config if omitted.
        clock: Time source; wall clock if omitted.
    """

    def __init__(
        self,
        store: IdentityStore | None = None,
        settings: RegistrySettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store: Any = store or InMemoryIdentityStore()
        self._settings = settings or get_config()
        self._clock = clock or SystemClock()
        # Serializes transactions and views across threads; reentrancy is detected via _active
        self._lock = threading.RLock()
        self._active: str | None = None

    # -- configuration ------------------------------------------------------

    @property
    def address(self) -> str:
        """This registry's address, bound into every permission hash."""
        return self._settings.registry_address

    @property
    def max_associated_addresses(self) -> int:
        return self._settings.max_associated_addresses

    @property
    def recovery_timeout(self) -> int:
        return self._settings.recovery_timeout

    @property
    def signature_timeout(self) -> int:
        return self._settings.signature_timeout

    @property
    def store(self) -> IdentityStore:
        return self._store

    # -- transaction plumbing ----------------------------------------------

    @contextmanager
    def _transaction(self, operation: str, **arguments: Any) -> Generator[int, None, None]:
        """Run one mutating operation; yields the ledger time for it."""
        with self._lock:
            if self._active is not None:
                raise ReentrancyError(operation, self._active)
            self._active = operation
            try:
                with correlation_context():
                    operation_logger.log_call(operation, arguments)
                    try:
                        yield self._clock.now()
                    except RegistryError as e:
                        operation_logger.log_result(operation, False, reason=e.message)
                        raise
                    operation_logger.log_result(operation, True)
            finally:
                self._active = None

    @staticmethod
    def _address(value: str, field: str) -> str:
        if not isinstance(value, str) or not is_address(value):
            raise ValidationError(f"{field} is not a valid address", field=field, value=value)
        return to_checksum_address(value)

    @staticmethod
    def _uint(value: int, field: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{field} must be a non-negative integer", field=field, value=value)
        return value

    def _addresses(self, values: Sequence[str], field: str) -> list[str]:
        if isinstance(values, str):
            raise ValidationError(f"{field} must be a list of addresses", field=field, value=values)
        return [self._address(v, field) for v in values]

    def _identity(self, ein: int) -> Identity:
        if not self.identity_exists(ein):
            raise NotFoundError("Identity", ein)
        return self._store.get_identity(ein)

    def _ein_of(self, address: str) -> int:
        ein = self._store.get_ein(address)
        if ein is None:
            raise NotFoundError("Identity for address", address)
        return ein

    def _require_provider(self, identity: Identity, sender: str) -> None:
        if sender not in identity.providers:
            raise UnauthorizedError("The sender is not a provider for this identity.", sender=sender)

    def _require_unassociated(self, address: str) -> None:
        ein = self._store.get_ein(address)
        if ein is not None:
            raise ConflictError("The address already has an identity.", address=address, ein=ein)

    def _require_fresh(self, timestamp: int, now: int) -> None:
        """A permission is valid for ``timestamp <= now < timestamp + signature_timeout``."""
        if not (timestamp <= now < timestamp + self.signature_timeout):
            raise TimingError("Timestamp is not valid.", timestamp=timestamp, now=now)

    def _require_signed(self, signer: str, message_hash: bytes, signature: Signature | bytes) -> None:
        if not is_signed(signer, message_hash, signature):
            raise UnauthorizedError(f"Permission denied: no valid signature from {signer}.")

    def _emit(self, event: RegistryEvent) -> RegistryEvent:
        return self._store.append_event(event)

    def _reset_identity(self, ein: int, identity: Identity, clear_resolvers: bool) -> None:
        """Evict every associated address and provider of ``identity``."""
        for address in identity.associated_addresses:
            self._store.unlink_address(address)
        identity.associated_addresses.clear()
        identity.providers.clear()
        if clear_resolvers:
            identity.resolvers.clear()
        self._store.save_identity(ein, identity)

    # -- minting -------------------------------------------------------------

    def mint_identity(
        self,
        recovery_address: str,
        provider: str,
        resolvers: Sequence[str] = (),
        *,
        sender: str,
    ) -> int:
        """Mint an identity whose first associated address is ``sender``.

        Returns:
            The new EIN.

        Raises:
            ConflictError: If ``sender`` already has an identity.
        """
        with self._transaction(
            "mint_identity", recovery_address=recovery_address, provider=provider, resolvers=resolvers, sender=sender
        ) as now:
            sender = self._address(sender, "sender")
            recovery_address = self._address(recovery_address, "recovery_address")
            provider = self._address(provider, "provider")
            resolvers = self._addresses(resolvers, "resolvers")

            self._require_unassociated(sender)
            return self._mint(now, recovery_address, sender, provider, resolvers, delegated=False, initiator=sender)

    def mint_identity_delegated(
        self,
        recovery_address: str,
        associated_address: str,
        resolvers: Sequence[str],
        signature: Signature | bytes,
        timestamp: int,
        *,
        sender: str,
    ) -> int:
        """Mint an identity for ``associated_address``, submitted by a provider.

        ``sender`` becomes the identity's first provider. The associated
        address authorizes this by signing
        :func:`~identity_registry.identity.messages.mint_permission_hash`.

        Raises:
            ConflictError: If ``associated_address`` already has an identity.
            TimingError: If ``timestamp`` is outside the freshness window.
            UnauthorizedError: If the signature does not verify.
        """
        with self._transaction(
            "mint_identity_delegated",
            recovery_address=recovery_address,
            associated_address=associated_address,
            resolvers=resolvers,
            timestamp=timestamp,
            sender=sender,
        ) as now:
            sender = self._address(sender, "sender")
            recovery_address = self._address(recovery_address, "recovery_address")
            associated_address = self._address(associated_address, "associated_address")
            resolvers = self._addresses(resolvers, "resolvers")
            timestamp = self._uint(timestamp, "timestamp")

            self._require_unassociated(associated_address)
            self._require_fresh(timestamp, now)
            permission = messages.mint_permission_hash(
                self.address, recovery_address, associated_address, sender, resolvers, timestamp
            )
            self._require_signed(associated_address, permission, signature)

            return self._mint(
                now, recovery_address, associated_address, sender, resolvers, delegated=True, initiator=sender
            )

    def _mint(
        self,
        now: int,
        recovery_address: str,
        associated_address: str,
        provider: str,
        resolvers: list[str],
        delegated: bool,
        initiator: str,
    ) -> int:
        ein = self._store.allocate_ein()
        identity = Identity(recovery_address=recovery_address)
        identity.associated_addresses.insert(associated_address)
        identity.providers.insert(provider)
        for resolver in resolvers:
            identity.resolvers.insert(resolver)
        self._store.save_identity(ein, identity)
        self._store.link_address(associated_address, ein)

        self._emit(
            IdentityMinted(
                initiator=initiator,
                ein=ein,
                timestamp=now,
                recovery_address=recovery_address,
                associated_address=associated_address,
                provider=provider,
                resolvers=tuple(resolvers),
                delegated=delegated,
            )
        )
        logger.info("Minted identity %d for %s (delegated=%s)", ein, associated_address, delegated)
        return ein

    # -- associated addresses ---------------------------------------------

    def add_address(
        self,
        approving_address: str,
        address_to_add: str,
        signatures: Sequence[Signature | bytes],
        timestamps: Sequence[int],
        *,
        sender: str,
    ) -> int:
        """Add ``address_to_add`` to the identity of ``approving_address``.

        Needs two permissions, in this order: the approving (already
        associated) address signs the approval hash, the joining address
        signs the consent hash. Each carries its own timestamp. Only a
        provider of the identity may submit.

        Returns:
            The EIN the address joined.
        """
        with self._transaction(
            "add_address",
            approving_address=approving_address,
            address_to_add=address_to_add,
            timestamps=timestamps,
            sender=sender,
        ) as now:
            sender = self._address(sender, "sender")
            approving_address = self._address(approving_address, "approving_address")
            address_to_add = self._address(address_to_add, "address_to_add")
            if len(signatures) != 2 or len(timestamps) != 2:
                raise ValidationError("add_address needs exactly two signatures and two timestamps", field="signatures")
            approve_ts, join_ts = (self._uint(ts, "timestamps") for ts in timestamps)

            ein = self._ein_of(approving_address)
            identity = self._identity(ein)
            self._require_provider(identity, sender)
            self._require_unassociated(address_to_add)
            if len(identity.associated_addresses) >= self.max_associated_addresses:
                raise ConflictError("Too many addresses.", address=address_to_add, ein=ein)

            self._require_fresh(approve_ts, now)
            self._require_fresh(join_ts, now)
            approve_sig, join_sig = signatures
            self._require_signed(
                approving_address,
                messages.add_address_approval_hash(self.address, ein, address_to_add, approve_ts),
                approve_sig,
            )
            self._require_signed(
                address_to_add,
                messages.add_address_consent_hash(self.address, ein, address_to_add, join_ts),
                join_sig,
            )

            identity.associated_addresses.insert(address_to_add)
            self._store.save_identity(ein, identity)
            self._store.link_address(address_to_add, ein)
            self._emit(
                AddressAdded(
                    initiator=sender,
                    ein=ein,
                    timestamp=now,
                    approving_address=approving_address,
                    added_address=address_to_add,
                )
            )
            logger.info("Added %s to identity %d", address_to_add, ein)
            return ein

    def remove_address(
        self,
        address_to_remove: str,
        signature: Signature | bytes,
        timestamp: int,
        *,
        sender: str,
    ) -> int:
        """Remove an address from its identity on the strength of its own signature.

        Anyone may relay the permission; the removed address's consent is the
        only authorization.

        Returns:
            The EIN the address left.
        """
        with self._transaction(
            "remove_address", address_to_remove=address_to_remove, timestamp=timestamp, sender=sender
        ) as now:
            sender = self._address(sender, "sender")
            address_to_remove = self._address(address_to_remove, "address_to_remove")
            timestamp = self._uint(timestamp, "timestamp")

            ein = self._ein_of(address_to_remove)
            identity = self._identity(ein)
            self._require_fresh(timestamp, now)
            self._require_signed(
                address_to_remove,
                messages.remove_address_hash(self.address, ein, address_to_remove, timestamp),
                signature,
            )

            identity.associated_addresses.remove(address_to_remove)
            self._store.save_identity(ein, identity)
            self._store.unlink_address(address_to_remove)
            self._emit(AddressRemoved(initiator=sender, ein=ein, timestamp=now, removed_address=address_to_remove))
            logger.info("Removed %s from identity %d", address_to_remove, ein)
            return ein

    # -- providers -----------------------------------------------------------

    def _acting_ein(self, acting: ActingAs) -> tuple[int, Identity, str]:
        """Resolve who is acting and for which identity, then authorize them."""
        address = self._address(acting.address, "sender")
        if acting.role == Role.SELF:
            ein = self._ein_of(address)
            return ein, self._identity(ein), address

        if acting.ein is None:
            raise ValidationError("A provider must name the EIN it acts for", field="ein")
        ein = self._uint(acting.ein, "ein")
        identity = self._identity(ein)
        self._require_provider(identity, address)
        return ein, identity, address

    def add_providers(self, providers: Sequence[str], *, acting: ActingAs) -> int:
        """Add providers, either as an associated address or as an existing provider."""
        with self._transaction(
            "add_providers", providers=providers, role=acting.role.value, sender=acting.address, ein=acting.ein
        ) as now:
            ein, identity, sender = self._acting_ein(acting)
            providers = self._addresses(providers, "providers")

            for provider in providers:
                identity.providers.insert(provider)
            self._store.save_identity(ein, identity)
            for provider in providers:
                self._emit(
                    ProviderAdded(
                        initiator=sender, ein=ein, timestamp=now, provider=provider, delegated=acting.delegated
                    )
                )
            logger.info("Added %d provider(s) to identity %d", len(providers), ein)
            return ein

    def remove_providers(self, providers: Sequence[str], *, acting: ActingAs) -> int:
        """Remove providers, either as an associated address or as an existing provider."""
        with self._transaction(
            "remove_providers", providers=providers, role=acting.role.value, sender=acting.address, ein=acting.ein
        ) as now:
            ein, identity, sender = self._acting_ein(acting)
            providers = self._addresses(providers, "providers")

            for provider in providers:
                identity.providers.remove(provider)
            self._store.save_identity(ein, identity)
            for provider in providers:
                self._emit(
                    ProviderRemoved(
                        initiator=sender, ein=ein, timestamp=now, provider=provider, delegated=acting.delegated
                    )
                )
            logger.info("Removed %d provider(s) from identity %d", len(providers), ein)
            return ein

    def add_providers_for(self, ein: int, providers: Sequence[str], *, sender: str) -> int:
        return self.add_providers(providers, acting=ActingAs.provider(sender, ein))

    def remove_providers_for(self, ein: int, providers: Sequence[str], *, sender: str) -> int:
        return self.remove_providers(providers, acting=ActingAs.provider(sender, ein))

    # -- resolvers -----------------------------------------------------------

    def add_resolvers(self, ein: int, resolvers: Sequence[str], *, sender: str) -> int:
        """Attach resolvers; only a provider of the identity may do this."""
        with self._transaction("add_resolvers", ein=ein, resolvers=resolvers, sender=sender) as now:
            sender = self._address(sender, "sender")
            ein = self._uint(ein, "ein")
            identity = self._identity(ein)
            self._require_provider(identity, sender)
            resolvers = self._addresses(resolvers, "resolvers")

            for resolver in resolvers:
                identity.resolvers.insert(resolver)
            self._store.save_identity(ein, identity)
            for resolver in resolvers:
                self._emit(ResolverAdded(initiator=sender, ein=ein, timestamp=now, resolver=resolver))
            logger.info("Added %d resolver(s) to identity %d", len(resolvers), ein)
            return ein

    def remove_resolvers(self, ein: int, resolvers: Sequence[str], *, sender: str) -> int:
        """Detach resolvers; only a provider of the identity may do this."""
        with self._transaction("remove_resolvers", ein=ein, resolvers=resolvers, sender=sender) as now:
            sender = self._address(sender, "sender")
            ein = self._uint(ein, "ein")
            identity = self._identity(ein)
            self._require_provider(identity, sender)
            resolvers = self._addresses(resolvers, "resolvers")

            for resolver in resolvers:
                identity.resolvers.remove(resolver)
            self._store.save_identity(ein, identity)
            for resolver in resolvers:
                self._emit(ResolverRemoved(initiator=sender, ein=ein, timestamp=now, resolver=resolver))
            logger.info("Removed %d resolver(s) from identity %d", len(resolvers), ein)
            return ein

    # -- recovery ------------------------------------------------------------

    def initiate_recovery_address_change(self, ein: int, new_recovery_address: str, *, sender: str) -> int:
        """Swap the recovery address, keeping the old one trusted for ``recovery_timeout``.

        Raises:
            UnauthorizedError: If ``sender`` is not a provider of the identity.
            TimingError: If the previous change is still inside its window.
        """
        with self._transaction(
            "initiate_recovery_address_change", ein=ein, new_recovery_address=new_recovery_address, sender=sender
        ) as now:
            sender = self._address(sender, "sender")
            new_recovery_address = self._address(new_recovery_address, "new_recovery_address")
            ein = self._uint(ein, "ein")
            identity = self._identity(ein)
            self._require_provider(identity, sender)
            change_log = self._store.get_recovery_address_change(ein)
            if not can_change_recovery_address(change_log, self.recovery_timeout, now):
                raise TimingError(
                    "Pending change of recovery address has not timed out.",
                    timestamp=change_log.timestamp if change_log else None,
                    now=now,
                )

            old_recovery_address = identity.recovery_address
            self._store.save_recovery_address_change(
                ein, RecoveryAddressChangeLog(timestamp=now, old_recovery_address=old_recovery_address)
            )
            identity.recovery_address = new_recovery_address
            self._store.save_identity(ein, identity)
            self._emit(
                RecoveryAddressChangeInitiated(
                    initiator=sender,
                    ein=ein,
                    timestamp=now,
                    old_recovery_address=old_recovery_address,
                    new_recovery_address=new_recovery_address,
                )
            )
            logger.info("Recovery address of identity %d changing to %s", ein, new_recovery_address)
            return ein

    def trigger_recovery(
        self,
        ein: int,
        new_associated_address: str,
        signature: Signature | bytes,
        timestamp: int,
        *,
        sender: str,
    ) -> int:
        """Replace every associated address and provider with ``new_associated_address``.

        While a recovery address change is pending only the displaced
        recovery address may call this; otherwise only the current one. The
        sender becomes the recovery address. The evicted addresses are hashed
        into the recovered-change log so they can trigger the poison pill.

        Raises:
            UnauthorizedError: Wrong sender, or the new address did not sign.
            ConflictError: If the new address already has an identity.
            TimingError: Recovery cooldown not elapsed, or stale permission.
        """
        with self._transaction(
            "trigger_recovery",
            ein=ein,
            new_associated_address=new_associated_address,
            timestamp=timestamp,
            sender=sender,
        ) as now:
            sender = self._address(sender, "sender")
            new_associated_address = self._address(new_associated_address, "new_associated_address")
            ein = self._uint(ein, "ein")
            timestamp = self._uint(timestamp, "timestamp")
            identity = self._identity(ein)
            require_entitled_recoverer(
                identity, self._store.get_recovery_address_change(ein), sender, self.recovery_timeout, now
            )
            self._require_unassociated(new_associated_address)
            recovered_log = self._store.get_recovered_change(ein)
            if not can_recover(recovered_log, self.recovery_timeout, now):
                raise TimingError(
                    "Cannot trigger recovery yet.",
                    timestamp=recovered_log.timestamp if recovered_log else None,
                    now=now,
                )
            self._require_fresh(timestamp, now)
            self._require_signed(
                new_associated_address,
                messages.recovery_permission_hash(self.address, ein, new_associated_address, timestamp),
                signature,
            )

            evicted = identity.associated_addresses.members()
            self._store.save_recovered_change(
                ein,
                RecoveredChangeLog(timestamp=now, evicted_addresses_hash=messages.address_list_hash(evicted)),
            )
            self._reset_identity(ein, identity, clear_resolvers=False)
            identity.recovery_address = sender
            identity.associated_addresses.insert(new_associated_address)
            self._store.save_identity(ein, identity)
            self._store.link_address(new_associated_address, ein)
            self._emit(
                RecoveryTriggered(
                    initiator=sender,
                    ein=ein,
                    timestamp=now,
                    old_associated_addresses=tuple(evicted),
                    new_associated_address=new_associated_address,
                )
            )
            logger.warning("Recovery triggered on identity %d by %s, %d address(es) evicted", ein, sender, len(evicted))
            return ein

    def trigger_poison_pill(
        self,
        ein: int,
        addresses_before: Sequence[str],
        addresses_after: Sequence[str],
        clear_resolvers: bool,
        *,
        sender: str,
    ) -> int:
        """Irreversibly empty an identity, as an address evicted by its last recovery.

        ``addresses_before`` and ``addresses_after`` are the evicted list (as
        published in the ``RecoveryTriggered`` event) split around the
        sender's own position.

        Raises:
            TimingError: No recovery within the last ``recovery_timeout``.
            UnauthorizedError: The split does not reproduce the evicted set,
                or the pill was already triggered for this recovery.
        """
        with self._transaction(
            "trigger_poison_pill",
            ein=ein,
            addresses_before=addresses_before,
            addresses_after=addresses_after,
            clear_resolvers=clear_resolvers,
            sender=sender,
        ) as now:
            sender = self._address(sender, "sender")
            addresses_before = self._addresses(addresses_before, "addresses_before")
            addresses_after = self._addresses(addresses_after, "addresses_after")
            ein = self._uint(ein, "ein")
            identity = self._identity(ein)
            recovered_log = self._store.get_recovered_change(ein)
            if recovered_log is None or not can_poison(recovered_log, self.recovery_timeout, now):
                raise TimingError(
                    "No addresses have recently been removed from a recovery.",
                    timestamp=recovered_log.timestamp if recovered_log else None,
                    now=now,
                )
            if not proves_eviction(recovered_log, addresses_before, sender, addresses_after):
                raise UnauthorizedError(
                    "Cannot activate the poison pill from an address that was not recently removed via recovery.",
                    sender=sender,
                )

            self._reset_identity(ein, identity, clear_resolvers=clear_resolvers)
            self._store.save_recovered_change(
                ein,
                RecoveredChangeLog(
                    timestamp=recovered_log.timestamp,
                    evicted_addresses_hash=recovered_log.evicted_addresses_hash,
                    consumed=True,
                ),
            )
            self._emit(
                IdentityPoisoned(
                    initiator=sender,
                    ein=ein,
                    timestamp=now,
                    recovery_address=identity.recovery_address,
                    resolvers_cleared=clear_resolvers,
                )
            )
            logger.warning("Identity %d poisoned by %s", ein, sender)
            return ein

    # -- views ---------------------------------------------------------------
    # Views hold the same reentrant lock as transactions

    def identity_exists(self, ein: int) -> bool:
        if isinstance(ein, bool) or not isinstance(ein, int):
            return False
        with self._lock:
            return 0 < ein <= self._store.last_ein()

    def has_identity(self, address: str) -> bool:
        address = self._address(address, "address")
        with self._lock:
            return self._store.get_ein(address) is not None

    def get_ein(self, address: str) -> int:
        """Return the EIN ``address`` belongs to.

        Raises:
            NotFoundError: If the address has no identity.
        """
        address = self._address(address, "address")
        with self._lock:
            return self._ein_of(address)

    def is_address_for(self, ein: int, address: str) -> bool:
        address = self._address(address, "address")
        with self._lock:
            return address in self._identity(ein).associated_addresses

    def is_provider_for(self, ein: int, provider: str) -> bool:
        provider = self._address(provider, "provider")
        with self._lock:
            return provider in self._identity(ein).providers

    def is_resolver_for(self, ein: int, resolver: str) -> bool:
        resolver = self._address(resolver, "resolver")
        with self._lock:
            return resolver in self._identity(ein).resolvers

    def get_details(self, ein: int) -> IdentityDetails:
        """Return recovery address, associated addresses, providers and resolvers.

        Raises:
            NotFoundError: If the identity does not exist.
        """
        with self._lock:
            return self._identity(ein).details()

    def is_signed(self, address: str, message_hash: bytes, signature: Signature | bytes) -> bool:
        return is_signed(address, message_hash, signature)

    def events(self, ein: int | None = None, kind: str | None = None) -> list[RegistryEvent]:
        """Return committed events, oldest first, optionally filtered."""
        with self._lock:
            return self._store.list_events(ein=ein, kind=kind)
