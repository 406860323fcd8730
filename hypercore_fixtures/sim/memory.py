"""In-memory simulated core — local ledger with optional fork fallback reads."""

from __future__ import annotations

import logging
import re

from hypercore_fixtures.core import constants
from hypercore_fixtures.errors import (
    AccountNotActivated,
    InvalidAddress,
    InvalidAmount,
    RealReadUnavailable,
    UnsupportedToken,
)
from hypercore_fixtures.sim.engine import SimulatedCore
from hypercore_fixtures.sim.snapshot import RpcSnapshot

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str) -> str:
    """Validate a 20-byte hex address and return it lowercased."""
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise InvalidAddress(f"Malformed address: {address!r}")
    return address.lower()


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(f"Amount must be a non-negative integer, got {amount!r}")


class InMemoryCore(SimulatedCore):
    """Simulated core holding activations and balances in memory.

    Locally seeded state always wins. Anything not seeded is read from the
    bound snapshot when real reads are enabled, and synthesized as zero when
    they are disabled, so offline runs never touch the network.
    """

    def __init__(self, snapshot: RpcSnapshot | None = None) -> None:
        self.snapshot = snapshot
        self._use_real_reads = True
        self._activated: set[str] = set()
        self._spot: dict[tuple[str, int], int] = {}
        self._margin: dict[str, int] = {}

    @property
    def use_real_reads(self) -> bool:
        return self._use_real_reads

    def set_use_real_reads(self, enabled: bool) -> None:
        self._use_real_reads = bool(enabled)
        logger.debug("Real reads %s", "enabled" if self._use_real_reads else "disabled")

    # --- Mutations ---

    def activate_account(self, address: str) -> None:
        addr = normalize_address(address)
        self._activated.add(addr)
        logger.debug("Activated %s", addr)

    def is_activated(self, address: str) -> bool:
        return normalize_address(address) in self._activated

    def seed_spot_balance(self, address: str, token_index: int, amount: int) -> None:
        addr = self._require_activated(address)
        if not constants.is_known_token(token_index):
            raise UnsupportedToken(f"Unknown spot token index: {token_index}")
        _check_amount(amount)
        self._spot[(addr, token_index)] = amount

    def seed_margin_balance(self, address: str, amount: int) -> None:
        addr = self._require_activated(address)
        _check_amount(amount)
        self._margin[addr] = amount

    def _require_activated(self, address: str) -> str:
        addr = normalize_address(address)
        if addr not in self._activated:
            raise AccountNotActivated(f"Account {addr} must be activated before seeding")
        return addr

    # --- Reads ---

    def spot_balance(self, address: str, token_index: int) -> int:
        addr = normalize_address(address)
        if not constants.is_known_token(token_index):
            raise UnsupportedToken(f"Unknown spot token index: {token_index}")
        seeded = self._spot.get((addr, token_index))
        if seeded is not None:
            return seeded
        return self._real_read(lambda snap: snap.read_spot_balance(addr, token_index))

    def margin_balance(self, address: str) -> int:
        addr = normalize_address(address)
        seeded = self._margin.get(addr)
        if seeded is not None:
            return seeded
        return self._real_read(lambda snap: snap.read_margin_balance(addr))

    def _real_read(self, read) -> int:
        if not self._use_real_reads:
            return 0
        if self.snapshot is None:
            raise RealReadUnavailable("Real reads are enabled but no snapshot is bound")
        return read(self.snapshot)

    def reset(self) -> None:
        self._activated.clear()
        self._spot.clear()
        self._margin.clear()
