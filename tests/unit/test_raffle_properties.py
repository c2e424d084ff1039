"""Hypothesis property-based tests for ticket accounting and selection."""

from __future__ import annotations

from datetime import timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from tests.factories.data_factories import SALE_END, SALE_START, build_raffle_config
from tests.factories.ledger_fakes import FakeTokenLedger, FixedEntropy
from tokenraffle.core.errors import InsufficientBalance, InvalidQuantity, SaleNotOpen, TokenNotApproved
from tokenraffle.schemas.raffle import RaffleState
from tokenraffle.services.raffle import RaffleEngine, derive_state

BUYERS = ["0xaaa", "0xbbb", "0xccc", "0xddd"]
DURING = SALE_START + timedelta(hours=1)


def _engine(price: int = 10, entropy: int = 0) -> tuple[RaffleEngine, FakeTokenLedger]:
    config = build_raffle_config(operator="0xop", ticket_price=price)
    ledger = FakeTokenLedger()
    for buyer in BUYERS:
        ledger.mint(buyer, 10**12)
        ledger.approve(buyer, config.custody_account, 10**12)
    return RaffleEngine(config, ledger, entropy=FixedEntropy(entropy)), ledger


# ── Quantity ────────────────────────────────────────────────────────


@given(quantity=st.integers(max_value=0))
@settings(max_examples=100)
def test_non_positive_quantity_never_changes_roster(quantity: int):
    engine, _ = _engine()
    try:
        engine.buy(BUYERS[0], quantity, now=DURING)
    except InvalidQuantity:
        pass
    else:
        raise AssertionError("quantity <= 0 accepted")
    assert engine.get_participants() == []


# ── Window ──────────────────────────────────────────────────────────


@given(offset=st.integers(min_value=1, max_value=10**8))
@settings(max_examples=100)
def test_outside_window_rejected(offset: int):
    engine, _ = _engine()
    for now in (SALE_START - timedelta(seconds=offset), SALE_END + timedelta(seconds=offset - 1)):
        try:
            engine.buy(BUYERS[0], 1, now=now)
        except SaleNotOpen:
            continue
        raise AssertionError(f"purchase accepted at {now}")


@given(
    offset=st.integers(min_value=-(10**8), max_value=10**8),
    drawn=st.booleans(),
)
@settings(max_examples=200)
def test_state_is_pure_function_of_time_and_flag(offset: int, drawn: bool):
    now = SALE_START + timedelta(seconds=offset)
    state = derive_state(now, SALE_START, SALE_END, drawn)
    if drawn:
        assert state is RaffleState.DRAWN
    elif now < SALE_START:
        assert state is RaffleState.PENDING
    elif now < SALE_END:
        assert state is RaffleState.OPEN
    else:
        assert state is RaffleState.CLOSED


# ── Funds ───────────────────────────────────────────────────────────


@given(
    price=st.integers(min_value=1, max_value=1_000),
    quantity=st.integers(min_value=1, max_value=50),
    balance=st.integers(min_value=0, max_value=60_000),
    allowance=st.integers(min_value=0, max_value=60_000),
)
@settings(max_examples=200)
def test_funds_checks_follow_precedence(price: int, quantity: int, balance: int, allowance: int):
    config = build_raffle_config(operator="0xop", ticket_price=price)
    ledger = FakeTokenLedger()
    ledger.mint("0xbuyer", balance)
    ledger.approve("0xbuyer", config.custody_account, allowance)
    engine = RaffleEngine(config, ledger)
    cost = price * quantity

    try:
        engine.buy("0xbuyer", quantity, now=DURING)
    except InsufficientBalance:
        assert balance < cost
        outcome = "balance"
    except TokenNotApproved:
        assert balance >= cost > allowance
        outcome = "allowance"
    else:
        assert balance >= cost and allowance >= cost
        outcome = "ok"

    expected_len = quantity if outcome == "ok" else 0
    assert len(engine.get_participants()) == expected_len
    assert ledger.balance_of("0xbuyer") == balance - (cost if outcome == "ok" else 0)
    assert engine.get_participants() == ["0xbuyer"] * expected_len


# ── Roster accounting ───────────────────────────────────────────────


@given(
    purchases=st.lists(
        st.tuples(st.sampled_from(BUYERS), st.integers(min_value=1, max_value=25)),
        min_size=1,
        max_size=20,
    )
)
@settings(max_examples=100)
def test_roster_is_concatenation_of_purchases(purchases: list[tuple[str, int]]):
    engine, _ = _engine()
    expected: list[str] = []
    for buyer, quantity in purchases:
        result = engine.buy(buyer, quantity, now=DURING)
        expected.extend([buyer] * quantity)
        assert result["roster_length"] == len(expected)

    assert engine.get_participants() == expected
    assert engine.total_collected == len(expected) * engine.config.ticket_price


# ── Selection ───────────────────────────────────────────────────────


@given(
    entropy=st.integers(min_value=0, max_value=2**256 - 1),
    purchases=st.lists(
        st.tuples(st.sampled_from(BUYERS), st.integers(min_value=1, max_value=10)),
        min_size=1,
        max_size=10,
    ),
)
@settings(max_examples=200)
def test_winner_index_in_range(entropy: int, purchases: list[tuple[str, int]]):
    engine, _ = _engine(entropy=entropy)
    for buyer, quantity in purchases:
        engine.buy(buyer, quantity, now=DURING)

    result = engine.draw_raffle("0xop", now=SALE_END)
    participants = engine.get_participants()

    assert 0 <= result.index < len(participants)
    assert result.index == entropy % len(participants)
    assert participants[result.index] == result.winner
