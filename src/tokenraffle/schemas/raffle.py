"""Raffle entity schemas."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tokenraffle.core.config import Settings, get_settings
from tokenraffle.core.constants import (
    CUSTODY_ACCOUNT_PREFIX,
    STATE_CLOSED,
    STATE_DRAWN,
    STATE_OPEN,
    STATE_PENDING,
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RaffleState(StrEnum):
    """Raffle lifecycle state, derived from the clock and the drawn flag."""

    PENDING = STATE_PENDING
    OPEN = STATE_OPEN
    CLOSED = STATE_CLOSED
    DRAWN = STATE_DRAWN


class RaffleConfig(BaseModel):
    """Immutable raffle parameters fixed at creation."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    ticket_price: int = Field(ge=1, strict=True)
    open_time: datetime
    close_time: datetime
    operator: str = Field(min_length=1)
    raffle_id: str = Field(default_factory=lambda: uuid.uuid4().hex, min_length=1)
    custody_account: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _default_custody_account(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("custody_account"):
            data = dict(data)
            data.setdefault("raffle_id", uuid.uuid4().hex)
            data["custody_account"] = f"{CUSTODY_ACCOUNT_PREFIX}{data['raffle_id']}"
        return data

    @field_validator("open_time", "close_time")
    @classmethod
    def _normalize_tz(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _check_window(self) -> RaffleConfig:
        if self.close_time <= self.open_time:
            raise ValueError("close_time must be after open_time")
        return self

    @classmethod
    def from_settings(
        cls,
        *,
        token: str,
        operator: str,
        open_time: datetime,
        close_time: datetime | None = None,
        ticket_price: int | None = None,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> RaffleConfig:
        """Build a config, filling price and sale window from settings.

        ``ticket_price`` falls back to ``DEFAULT_TICKET_PRICE`` and
        ``close_time`` to ``open_time`` plus ``DEFAULT_SALE_DURATION_SECONDS``.
        """
        if settings is None:
            settings = get_settings()
        if ticket_price is None:
            ticket_price = settings.default_ticket_price
        if close_time is None:
            close_time = _as_utc(open_time) + timedelta(
                seconds=settings.default_sale_duration_seconds
            )
        return cls(
            token=token,
            operator=operator,
            open_time=open_time,
            close_time=close_time,
            ticket_price=ticket_price,
            **kwargs,
        )


class DrawResult(BaseModel):
    """Outcome of the single draw of a raffle."""

    model_config = ConfigDict(frozen=True)

    raffle_id: str
    winner: str
    index: int = Field(ge=0)
    entropy: int
    roster_length: int = Field(ge=1)
    drawn_at: datetime
    algorithm: str
    proof_hash: str | None = None
    seed_commitment: str | None = None
    nonce: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_index(self) -> DrawResult:
        if self.index >= self.roster_length:
            raise ValueError("index must be smaller than roster_length")
        return self
