"""Raffle error taxonomy.

Every error is a rejected operation: the engine raises before mutating any
state, so callers may retry (for instance after approving more funds).
"""

from __future__ import annotations


class RaffleError(Exception):
    """Raffle operation error with HTTP status hint."""

    default_detail = "Raffle: Operation rejected"
    default_status_code = 400

    def __init__(self, detail: str | None = None, status_code: int | None = None) -> None:
        self.detail = detail or self.default_detail
        self.status_code = status_code or self.default_status_code
        super().__init__(self.detail)


class InvalidQuantity(RaffleError):
    default_detail = "Raffle: Number of tickets must be greater than 0"


class SaleNotOpen(RaffleError):
    default_detail = "Raffle: Ticket sale is not open"


class InsufficientBalance(RaffleError):
    default_detail = "Raffle: Insufficient balance"


class TokenNotApproved(RaffleError):
    default_detail = "Raffle: Token not approved"


class NotAuthorized(RaffleError):
    default_detail = "Raffle: Caller is not the operator"
    default_status_code = 403


class SaleNotEnded(RaffleError):
    default_detail = "Raffle: Ticket sale has not ended"


class NoParticipants(RaffleError):
    default_detail = "Raffle: No participants"


class AlreadyDrawn(RaffleError):
    default_detail = "Raffle: Raffle already drawn"
    default_status_code = 409


class TokenLedgerFailure(RaffleError):
    """The ledger rejected or failed the transfer itself."""

    default_detail = "Raffle: Token transfer failed"
    default_status_code = 502
