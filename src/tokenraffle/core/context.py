"""Call context management via contextvars — active raffle ID."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_raffle_id: ContextVar[str | None] = ContextVar("raffle_id", default=None)


def set_raffle_id(value: str | None) -> None:
    """Set the raffle ID for the current call context."""
    _raffle_id.set(value)


def get_raffle_id() -> str | None:
    """Get the raffle ID for the current call context."""
    return _raffle_id.get()


@contextmanager
def raffle_context(raffle_id: str) -> Iterator[None]:
    """Bind ``raffle_id`` for the duration of a block, restoring the previous value."""
    token = _raffle_id.set(raffle_id)
    try:
        yield
    finally:
        _raffle_id.reset(token)
