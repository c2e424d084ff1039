"""Domain constants for tokenraffle."""

from __future__ import annotations

# ── Raffle States ───────────────────────────────────────────────────
STATE_PENDING = "pending"
STATE_OPEN = "open"
STATE_CLOSED = "closed"
STATE_DRAWN = "drawn"

# ── Defaults ────────────────────────────────────────────────────────
ONE_MONTH_SECONDS = 30 * 24 * 60 * 60

DEFAULT_TICKET_PRICE = 10  # Smallest token unit
DEFAULT_SALE_DURATION_SECONDS = ONE_MONTH_SECONDS

# ── Events ──────────────────────────────────────────────────────────
EVENT_TICKETS_PURCHASED = "TicketsPurchased"
EVENT_RAFFLE_DRAWN = "RaffleDrawn"

EVENT_NAMES: list[str] = [EVENT_TICKETS_PURCHASED, EVENT_RAFFLE_DRAWN]

# ── Entropy ─────────────────────────────────────────────────────────
ENTROPY_SOURCES: list[str] = ["secrets", "seeded"]

ENTROPY_BITS = 256
SERVER_SEED_BYTES = 32  # 64 hex chars

ALGORITHM_SECRETS = "secrets.randbits"
ALGORITHM_SEEDED = "sha256(server_seed:client_seed:nonce)"

# ── Custody ─────────────────────────────────────────────────────────
CUSTODY_ACCOUNT_PREFIX = "raffle:"
