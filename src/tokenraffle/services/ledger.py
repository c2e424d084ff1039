"""Token ledger contract consumed by the raffle engine.

The ledger is an external fungible-token system. The engine only reads
balances and allowances and asks for an atomic ``transfer_from``; it never
keeps balances itself.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenLedger(Protocol):
    """Balance, allowance and transfer primitives of a fungible token."""

    def balance_of(self, account: str) -> int:
        """Return the token balance held by ``account``."""
        ...

    def allowance(self, owner: str, spender: str) -> int:
        """Return how much ``spender`` may still pull from ``owner``."""
        ...

    def transfer_from(self, owner: str, spender: str, amount: int) -> bool:
        """Move ``amount`` from ``owner`` to ``spender``, consuming allowance.

        Atomic: returns ``False`` (or raises) with balances unchanged when the
        transfer cannot be made.
        """
        ...
