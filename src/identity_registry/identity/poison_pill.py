"""Poison pill authorization.

A recovery logs only a hash of the addresses it evicted. An evicted address
proves it was in that set by submitting the evicted list with itself cut
out: the addresses before it and the addresses after it. The registry splices
the sender back in and compares hashes. Nobody has to store, or iterate, the
evicted list; the split arrays are public once submitted, but they only help
an address that was itself evicted.
"""

from __future__ import annotations

from collections.abc import Sequence

from identity_registry.identity.messages import address_list_hash
from identity_registry.identity.models import RecoveredChangeLog
from identity_registry.identity.recovery import is_timed_out


def reconstruct_evicted(before: Sequence[str], sender: str, after: Sequence[str]) -> list[str]:
    return [*before, sender, *after]


def can_poison(recovered_log: RecoveredChangeLog | None, timeout: int, now: int) -> bool:
    """A poison pill is possible only within ``timeout`` of a recovery."""
    return recovered_log is not None and not is_timed_out(recovered_log.timestamp, timeout, now)


def proves_eviction(
    recovered_log: RecoveredChangeLog,
    before: Sequence[str],
    sender: str,
    after: Sequence[str],
) -> bool:
    """True if ``before + [sender] + after`` is exactly the evicted list."""
    if recovered_log.consumed:
        return False
    return address_list_hash(reconstruct_evicted(before, sender, after)) == recovered_log.evicted_addresses_hash
