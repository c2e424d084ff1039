"""Entropy sources for winner selection.

The draw reduces an integer sample modulo the roster length. Where that
integer comes from is injectable:

  - ``SecretsEntropySource`` — CSPRNG via Python's ``secrets`` module.
  - ``SeededEntropySource`` — provably fair SHA-256 commit/reveal scheme.
    The SHA-256 of the server seed is published before the draw; revealing
    the seed afterwards lets anyone recompute the proof hash, entropy and
    winning index with ``verify_draw``.
"""

from __future__ import annotations

import hashlib
import secrets
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tokenraffle.core.constants import (
    ALGORITHM_SECRETS,
    ALGORITHM_SEEDED,
    ENTROPY_BITS,
    ENTROPY_SOURCES,
    SERVER_SEED_BYTES,
)

if TYPE_CHECKING:
    from tokenraffle.core.config import Settings
    from tokenraffle.schemas.raffle import DrawResult


@dataclass(frozen=True)
class EntropySample:
    """One entropy value plus the audit data needed to check it."""

    value: int
    algorithm: str
    proof_hash: str | None = None
    seed_commitment: str | None = None
    nonce: int | None = None


class EntropySource(Protocol):
    def sample(self, *, raffle_id: str, roster_length: int) -> EntropySample: ...


class SecretsEntropySource:
    """Cryptographically secure random integers from ``secrets``."""

    def sample(self, *, raffle_id: str, roster_length: int) -> EntropySample:
        return EntropySample(value=secrets.randbits(ENTROPY_BITS), algorithm=ALGORITHM_SECRETS)


def _client_seed(raffle_id: str, roster_length: int) -> str:
    return f"{raffle_id}:{roster_length}"


def _proof_hash(server_seed: str, client_seed: str, nonce: int) -> str:
    combined = f"{server_seed}:{client_seed}:{nonce}"
    return hashlib.sha256(combined.encode()).hexdigest()


def commit_seed(server_seed: str) -> str:
    """Return the public commitment (SHA-256 hex) of a server seed."""
    return hashlib.sha256(server_seed.encode()).hexdigest()


class SeededEntropySource:
    """Provably fair entropy: ``sha256(server_seed:client_seed:nonce)``.

    Algorithm:
      1. server_seed — 64 hex chars from ``secrets`` unless one is supplied
      2. client_seed — ``"<raffle_id>:<roster_length>"``
      3. nonce — per-source counter, starting at 0
      4. proof_hash — SHA-256 of ``"server_seed:client_seed:nonce"``
      5. value — the full proof hash read as an integer

    A fixed ``server_seed`` makes the source fully deterministic, which is
    what tests use.
    """

    def __init__(self, server_seed: str | None = None) -> None:
        self._server_seed = server_seed or secrets.token_hex(SERVER_SEED_BYTES)
        self._nonce = 0
        self._lock = threading.Lock()

    @property
    def seed_commitment(self) -> str:
        return commit_seed(self._server_seed)

    @property
    def nonce(self) -> int:
        return self._nonce

    def reveal(self) -> str:
        """Return the server seed. Only publish it after the draw."""
        return self._server_seed

    def sample(self, *, raffle_id: str, roster_length: int) -> EntropySample:
        with self._lock:
            nonce = self._nonce
            self._nonce += 1

        proof_hash = _proof_hash(self._server_seed, _client_seed(raffle_id, roster_length), nonce)
        return EntropySample(
            value=int(proof_hash, 16),
            algorithm=ALGORITHM_SEEDED,
            proof_hash=proof_hash,
            seed_commitment=self.seed_commitment,
            nonce=nonce,
        )


def verify_draw(result: DrawResult, server_seed: str) -> bool:
    """Verify a seeded draw by recomputing its hash, entropy and index.

    Args:
        result: The published draw result.
        server_seed: The revealed server seed.

    Returns:
        True when every recomputed value matches the published result.
    """
    if result.algorithm != ALGORITHM_SEEDED or result.nonce is None:
        return False

    if result.seed_commitment is not None and commit_seed(server_seed) != result.seed_commitment:
        return False

    client_seed = _client_seed(result.raffle_id, result.roster_length)
    computed = _proof_hash(server_seed, client_seed, result.nonce)
    if computed != result.proof_hash:
        return False

    entropy = int(computed, 16)
    return entropy == result.entropy and entropy % result.roster_length == result.index


def build_entropy_source(settings: Settings) -> SecretsEntropySource | SeededEntropySource:
    """Create the entropy source named by ``settings.entropy_source``."""
    if settings.entropy_source not in ENTROPY_SOURCES:
        raise ValueError(
            f"Unknown entropy source: {settings.entropy_source}. Allowed: {ENTROPY_SOURCES}"
        )
    if settings.entropy_source == "seeded":
        return SeededEntropySource(server_seed=settings.entropy_server_seed)
    return SecretsEntropySource()
