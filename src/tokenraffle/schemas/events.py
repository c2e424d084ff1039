"""Event schemas emitted by the raffle engine."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tokenraffle.core.constants import EVENT_RAFFLE_DRAWN, EVENT_TICKETS_PURCHASED


class TicketsPurchased(BaseModel):
    """A purchase was accounted: ``quantity`` entries appended for ``buyer``."""

    model_config = ConfigDict(frozen=True)

    name: Literal["TicketsPurchased"] = EVENT_TICKETS_PURCHASED
    raffle_id: str
    buyer: str
    quantity: int = Field(ge=1)
    roster_length: int = Field(ge=1)


class RaffleDrawn(BaseModel):
    """The raffle was drawn. ``index``/``entropy`` are opaque verification data."""

    model_config = ConfigDict(frozen=True)

    name: Literal["RaffleDrawn"] = EVENT_RAFFLE_DRAWN
    raffle_id: str
    winner: str
    index: int = Field(ge=0)
    entropy: int


RaffleEvent = TicketsPurchased | RaffleDrawn
