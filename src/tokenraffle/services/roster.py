"""Ticket roster — ordered, append-only list of ticket holders.

Each ticket is one list slot holding the buyer's identity, so a holder of N
tickets appears N times and every slot carries the same weight in the draw.
The roster has no size cap of its own; it grows with what buyers pay for,
one list slot per ticket, and position lookups stay O(1).
"""

from __future__ import annotations

from collections import Counter


class TicketRoster:
    def __init__(self) -> None:
        self._entries: list[str] = []
        self._counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def append(self, identity: str, quantity: int) -> int:
        """Append ``quantity`` tickets for ``identity``; return the new length."""
        self._entries.extend([identity] * quantity)
        self._counts[identity] += quantity
        return len(self._entries)

    def count_for(self, identity: str) -> int:
        return self._counts.get(identity, 0)

    def holders(self) -> list[str]:
        """Distinct identities in order of their first purchase."""
        return list(self._counts)

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def to_list(self) -> list[str]:
        return list(self._entries)
