"""Draw worker — automated draws for raffles whose sale has closed.

Run periodically (e.g. every minute). Each cycle draws every raffle that is
closed and not yet drawn, acting as that raffle's operator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from tokenraffle.core.config import get_settings
from tokenraffle.core.errors import NoParticipants, RaffleError
from tokenraffle.schemas.raffle import RaffleState
from tokenraffle.services.raffle import RaffleEngine

logger = logging.getLogger(__name__)


class DrawWorkerResult:
    """Result of a draw worker run."""

    def __init__(self) -> None:
        self.drawn: list[str] = []
        self.skipped: list[str] = []
        self.errors: list[str] = []

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "drawn": self.drawn,
            "skipped": self.skipped,
            "errors": self.errors,
            "success": self.success,
        }


class RaffleDrawWorker:
    def __init__(self, engines: Iterable[RaffleEngine], max_errors: int | None = None) -> None:
        self.engines = list(engines)
        if max_errors is None:
            max_errors = get_settings().max_draw_worker_errors
        self.max_errors = max_errors

    def add(self, engine: RaffleEngine) -> None:
        self.engines.append(engine)

    def run(self, now: datetime | None = None) -> DrawWorkerResult:
        """Execute one cycle of the draw worker."""
        if now is None:
            now = datetime.now(tz=UTC)

        result = DrawWorkerResult()

        for engine in self.engines:
            if engine.state(now) is not RaffleState.CLOSED:
                continue

            raffle_id = engine.raffle_id
            try:
                engine.draw_raffle(engine.config.operator, now=now)
                result.drawn.append(raffle_id)
                logger.info("Auto-drew raffle %s", raffle_id)
            except NoParticipants:
                result.skipped.append(raffle_id)
            except RaffleError as e:
                result.errors.append(f"Failed to draw raffle {raffle_id}: {e.detail}")

            if len(result.errors) >= self.max_errors:
                logger.warning("Draw worker stopping after %d errors", len(result.errors))
                break

        return result
