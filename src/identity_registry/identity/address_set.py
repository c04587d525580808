"""Insertion-ordered address set with O(1) membership, insert and delete.

Members live in a list; a dict maps each member to its list index. Removal
swaps the last member into the vacated slot, so enumeration order is
insertion order perturbed by removals. The recovery log commits to this
exact order, so callers splitting the evicted list must read it from the
``RecoveryTriggered`` event rather than reconstruct it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class AddressSet:
    """A set of addresses that remembers an enumeration order."""

    __slots__ = ("_index", "_members")

    def __init__(self, members: Iterable[str] = ()) -> None:
        self._index: dict[str, int] = {}
        self._members: list[str] = []
        for member in members:
            self.insert(member)

    def insert(self, address: str) -> bool:
        """Add ``address``; return False if it was already present."""
        if address in self._index:
            return False
        self._index[address] = len(self._members)
        self._members.append(address)
        return True

    def remove(self, address: str) -> bool:
        """Delete ``address``; return False if it was not present."""
        position = self._index.pop(address, None)
        if position is None:
            return False
        last = self._members.pop()
        if position < len(self._members):
            self._members[position] = last
            self._index[last] = position
        return True

    def clear(self) -> None:
        self._index.clear()
        self._members.clear()

    def members(self) -> list[str]:
        """Return an ordered copy of the members."""
        return list(self._members)

    def __contains__(self, address: object) -> bool:
        return address in self._index

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._members))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AddressSet):
            return self._index.keys() == other._index.keys()
        return NotImplemented

    def __repr__(self) -> str:
        return f"AddressSet({self._members!r})"
