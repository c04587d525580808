"""Recovery state machine rules.

Per identity the recovery address moves through::

    Stable --initiate_recovery_address_change--> RecoveryAddressPending
    RecoveryAddressPending --recovery_timeout elapses--> Stable

While a change is pending the *displaced* recovery address, not the newly
installed one, is the only address that may trigger a recovery. A freshly
installed recovery address may be attacker-controlled; the old one gets a
full ``recovery_timeout`` to undo that.

These helpers are pure: they read logs and a timestamp and decide. The
registry owns the transaction around them.
"""

from __future__ import annotations

from identity_registry.core.exceptions import UnauthorizedError
from identity_registry.identity.models import (
    Identity,
    RecoveredChangeLog,
    RecoveryAddressChangeLog,
)

ONLY_CURRENT_REASON = "Only the current recovery address can initiate a recovery."
ONLY_OLD_REASON = "Only the recently removed recovery address can initiate a recovery."


def is_timed_out(timestamp: int | None, timeout: int, now: int) -> bool:
    """True once ``now`` is strictly past ``timestamp + timeout``.

    A missing timestamp (no log entry yet) counts as timed out.
    """
    if timestamp is None:
        return True
    return now > timestamp + timeout


def change_pending(change_log: RecoveryAddressChangeLog | None, timeout: int, now: int) -> bool:
    """Whether a recovery address change is still inside its grace window."""
    return change_log is not None and not is_timed_out(change_log.timestamp, timeout, now)


def can_change_recovery_address(change_log: RecoveryAddressChangeLog | None, timeout: int, now: int) -> bool:
    return not change_pending(change_log, timeout, now)


def can_recover(recovered_log: RecoveredChangeLog | None, timeout: int, now: int) -> bool:
    """Recoveries are rate-limited to one per ``timeout``."""
    return recovered_log is None or is_timed_out(recovered_log.timestamp, timeout, now)


def require_entitled_recoverer(
    identity: Identity,
    change_log: RecoveryAddressChangeLog | None,
    sender: str,
    timeout: int,
    now: int,
) -> None:
    """Check ``sender`` may trigger a recovery right now.

    Raises:
        UnauthorizedError: If another address holds that right.
    """
    if change_log is not None and change_pending(change_log, timeout, now):
        if sender != change_log.old_recovery_address:
            raise UnauthorizedError(ONLY_OLD_REASON, sender=sender)
    elif sender != identity.recovery_address:
        raise UnauthorizedError(ONLY_CURRENT_REASON, sender=sender)
