"""Raffle engine — ticket sales, roster accounting and the single draw.

Lifecycle: pending → open → closed → drawn. The state is never stored: it
is derived on every call from the clock and the drawn flag, so it cannot
drift from the configured sale window.

Purchases pull funds through the token ledger before any ticket is
recorded. The draw asks the injected entropy source for an integer and
reduces it modulo the roster length.
"""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime
from typing import Any

from tokenraffle.core.config import get_settings
from tokenraffle.core.context import raffle_context
from tokenraffle.core.errors import (
    AlreadyDrawn,
    InsufficientBalance,
    InvalidQuantity,
    NoParticipants,
    NotAuthorized,
    RaffleError,
    SaleNotEnded,
    SaleNotOpen,
    TokenLedgerFailure,
    TokenNotApproved,
)
from tokenraffle.schemas.events import RaffleDrawn, TicketsPurchased
from tokenraffle.schemas.raffle import DrawResult, RaffleConfig, RaffleState
from tokenraffle.services.entropy import EntropySource, build_entropy_source
from tokenraffle.services.events import EventLog
from tokenraffle.services.ledger import TokenLedger
from tokenraffle.services.roster import TicketRoster

logger = logging.getLogger(__name__)


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(tz=UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def derive_state(
    now: datetime, open_time: datetime, close_time: datetime, drawn: bool
) -> RaffleState:
    """Compute the raffle state from the clock and the drawn flag."""
    if drawn:
        return RaffleState.DRAWN
    if now < open_time:
        return RaffleState.PENDING
    if now < close_time:
        return RaffleState.OPEN
    return RaffleState.CLOSED


class RaffleEngine:
    """Runs one raffle: sells tickets during the window, then draws once.

    ``buy`` and ``draw_raffle`` hold one re-entrant lock for their whole
    duration, ledger calls included, so concurrent callers are serialized
    and each call either commits fully or changes nothing.
    """

    def __init__(
        self,
        config: RaffleConfig,
        ledger: TokenLedger,
        *,
        entropy: EntropySource | None = None,
        events: EventLog | None = None,
    ) -> None:
        self.config = config
        self.ledger = ledger
        self.entropy = entropy if entropy is not None else build_entropy_source(get_settings())
        self.events = events if events is not None else EventLog()

        self._roster = TicketRoster()
        self._result: DrawResult | None = None
        self._total_collected = 0
        self._lock = threading.RLock()

    # ── State ───────────────────────────────────────────────────────

    @property
    def raffle_id(self) -> str:
        return self.config.raffle_id

    @property
    def drawn(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> DrawResult | None:
        return self._result

    @property
    def total_collected(self) -> int:
        """Token units moved into custody by accepted purchases."""
        return self._total_collected

    def state(self, now: datetime | None = None) -> RaffleState:
        return derive_state(
            _resolve_now(now), self.config.open_time, self.config.close_time, self.drawn
        )

    # ── Purchase ────────────────────────────────────────────────────

    def buy(
        self,
        buyer: str,
        quantity: int,
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Buy ``quantity`` tickets for ``buyer``.

        Validates, in order:
          - Quantity is a positive integer
          - Sale window is open
          - Buyer balance covers the cost
          - Buyer approved the custody account for the cost

        Then pulls the funds through the ledger and appends the tickets.
        Nothing is recorded unless the transfer succeeded.
        """
        now = _resolve_now(now)

        with raffle_context(self.raffle_id), self._lock:
            try:
                return self._buy(buyer, quantity, now)
            except RaffleError as exc:
                logger.info(
                    "Purchase rejected for %s (quantity=%r): %s", buyer, quantity, exc.detail
                )
                raise

    def _buy(self, buyer: str, quantity: int, now: datetime) -> dict[str, Any]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity()

        if self.state(now) is not RaffleState.OPEN:
            raise SaleNotOpen()

        custody = self.config.custody_account
        total_cost = quantity * self.config.ticket_price

        # Balance before allowance
        if self.ledger.balance_of(buyer) < total_cost:
            raise InsufficientBalance()
        if self.ledger.allowance(buyer, custody) < total_cost:
            raise TokenNotApproved()

        try:
            transferred = self.ledger.transfer_from(buyer, custody, total_cost)
        except Exception as exc:
            raise TokenLedgerFailure(f"Raffle: Token transfer failed ({exc})") from exc
        if not transferred:
            raise TokenLedgerFailure()

        first_ticket = len(self._roster)
        roster_length = self._roster.append(buyer, quantity)
        self._total_collected += total_cost

        logger.info(
            "Sold %d ticket(s) to %s for %d %s (roster: %d)",
            quantity,
            buyer,
            total_cost,
            self.config.token,
            roster_length,
        )

        self.events.emit(
            TicketsPurchased(
                raffle_id=self.raffle_id,
                buyer=buyer,
                quantity=quantity,
                roster_length=roster_length,
            )
        )

        return {
            "raffle_id": self.raffle_id,
            "buyer": buyer,
            "quantity": quantity,
            "ticket_price": self.config.ticket_price,
            "total_cost": total_cost,
            "first_ticket": first_ticket,
            "last_ticket": roster_length - 1,
            "roster_length": roster_length,
        }

    # ── Queries ─────────────────────────────────────────────────────

    def get_participants(self) -> list[str]:
        """Return every ticket's holder, in purchase order."""
        with self._lock:
            return self._roster.to_list()

    def tickets_of(self, identity: str) -> int:
        with self._lock:
            return self._roster.count_for(identity)

    def summary(self, now: datetime | None = None) -> dict[str, Any]:
        with self._lock:
            return {
                "raffle_id": self.raffle_id,
                "token": self.config.token,
                "ticket_price": self.config.ticket_price,
                "open_time": self.config.open_time.isoformat(),
                "close_time": self.config.close_time.isoformat(),
                "state": str(self.state(now)),
                "total_tickets": len(self._roster),
                "total_participants": len(self._roster.holders()),
                "total_collected": self._total_collected,
                "winner": self._result.winner if self._result else None,
            }

    # ── Draw ────────────────────────────────────────────────────────

    def draw_raffle(self, caller: str, *, now: datetime | None = None) -> DrawResult:
        """Select the winner. Operator only, once, after the sale has closed.

        Steps:
          1. Check caller, drawn flag, sale end and roster, in that order
          2. Sample entropy for (raffle_id, roster length)
          3. index = entropy mod roster length; winner = roster[index]
          4. Record the result and emit ``RaffleDrawn``
        """
        now = _resolve_now(now)

        with raffle_context(self.raffle_id), self._lock:
            try:
                return self._draw(caller, now)
            except RaffleError as exc:
                logger.info("Draw rejected for %s: %s", caller, exc.detail)
                raise

    def _draw(self, caller: str, now: datetime) -> DrawResult:
        if caller != self.config.operator:
            raise NotAuthorized()
        if self.drawn:
            raise AlreadyDrawn()
        if now < self.config.close_time:
            raise SaleNotEnded()

        roster_length = len(self._roster)
        if roster_length == 0:
            raise NoParticipants()

        sample = self.entropy.sample(raffle_id=self.raffle_id, roster_length=roster_length)
        index = sample.value % roster_length
        winner = self._roster[index]

        result = DrawResult(
            raffle_id=self.raffle_id,
            winner=winner,
            index=index,
            entropy=sample.value,
            roster_length=roster_length,
            drawn_at=now,
            algorithm=sample.algorithm,
            proof_hash=sample.proof_hash,
            seed_commitment=sample.seed_commitment,
            nonce=sample.nonce,
        )
        self._result = result

        logger.info(
            "Raffle drawn: winner %s at index %d of %d ticket(s) (%s)",
            winner,
            index,
            roster_length,
            sample.algorithm,
        )

        self.events.emit(
            RaffleDrawn(
                raffle_id=self.raffle_id,
                winner=winner,
                index=index,
                entropy=sample.value,
            )
        )

        return result
