"""Core data structures used throughout the fixture harness."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExecutionMode(str, Enum):
    """How the simulated core is backed for a test."""

    FORK = "fork"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class Fork:
    """Initialize against a live network snapshot; unmocked reads hit the network."""

    endpoint: str
    block_number: int | None = None
    timeout: float = 10.0

    @property
    def mode(self) -> ExecutionMode:
        return ExecutionMode.FORK


@dataclass(frozen=True, slots=True)
class Offline:
    """Fully local, deterministic simulation with real reads disabled."""

    @property
    def mode(self) -> ExecutionMode:
        return ExecutionMode.OFFLINE


InitStrategy = Fork | Offline


@dataclass(frozen=True, slots=True)
class TokenInfo:
    """Spot token reference data."""

    symbol: str
    address: str
    index: int
    wei_decimals: int


@dataclass(frozen=True, slots=True)
class TestAccount:
    """The designated test user and the balances it is seeded with."""

    __test__ = False  # not a pytest test class

    address: str
    spot_token: int
    spot_amount: int
    margin_amount: int


@dataclass(frozen=True, slots=True)
class SnapshotInfo:
    """Metadata of a pinned network snapshot."""

    endpoint: str
    chain_id: int
    block_number: int
