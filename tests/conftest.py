"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tests.factories.data_factories import (  # noqa: E402
    SALE_END,
    SALE_START,
    build_account,
    build_raffle_config,
)
from tests.factories.ledger_fakes import (  # noqa: E402
    HALF_SUPPLY,
    TEST_SERVER_SEED,
    TOTAL_SUPPLY,
    FakeTokenLedger,
)
from tokenraffle.schemas.raffle import RaffleConfig  # noqa: E402
from tokenraffle.services.entropy import SeededEntropySource  # noqa: E402
from tokenraffle.services.events import EventLog  # noqa: E402
from tokenraffle.services.raffle import RaffleEngine  # noqa: E402


@pytest.fixture
def sale_start() -> datetime:
    return SALE_START


@pytest.fixture
def sale_end() -> datetime:
    return SALE_END


@pytest.fixture
def during_sale() -> datetime:
    return SALE_START + timedelta(days=1)


@pytest.fixture
def owner() -> str:
    return build_account()


@pytest.fixture
def other_account() -> str:
    return build_account()


@pytest.fixture
def ledger(owner: str) -> FakeTokenLedger:
    """Ledger where ``owner`` holds the whole supply, like a fresh token deploy."""
    token = FakeTokenLedger()
    token.mint(owner, TOTAL_SUPPLY)
    return token


@pytest.fixture
def funded_other(ledger: FakeTokenLedger, owner: str, other_account: str) -> str:
    """Move half the supply to ``other_account``."""
    ledger.transfer(owner, other_account, HALF_SUPPLY)
    return other_account


@pytest.fixture
def config(owner: str) -> RaffleConfig:
    return build_raffle_config(operator=owner, ticket_price=10)


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def entropy() -> SeededEntropySource:
    return SeededEntropySource(server_seed=TEST_SERVER_SEED)


@pytest.fixture
def engine(
    config: RaffleConfig,
    ledger: FakeTokenLedger,
    entropy: SeededEntropySource,
    events: EventLog,
) -> RaffleEngine:
    return RaffleEngine(config, ledger, entropy=entropy, events=events)
