"""Fixture initializer — turns a strategy into a ready simulated core."""

from __future__ import annotations

import logging
from collections.abc import Callable

from hypercore_fixtures.core.types import Fork, InitStrategy, Offline
from hypercore_fixtures.sim.engine import SimulatedCore
from hypercore_fixtures.sim.memory import InMemoryCore
from hypercore_fixtures.sim.snapshot import RpcSnapshot

logger = logging.getLogger(__name__)

Connector = Callable[[Fork], RpcSnapshot]
CoreFactory = Callable[[RpcSnapshot | None], SimulatedCore]


def connect_snapshot(strategy: Fork) -> RpcSnapshot:
    return RpcSnapshot.connect(
        strategy.endpoint,
        block_number=strategy.block_number,
        timeout=strategy.timeout,
    )


def initialize(
    strategy: InitStrategy,
    *,
    connect: Connector = connect_snapshot,
    core_factory: CoreFactory = InMemoryCore,
) -> tuple[SimulatedCore, RpcSnapshot | None]:
    """Build a simulated core for ``strategy``.

    Fork: connect first, then bind the core to the snapshot with real reads
    left enabled. A failed connection raises ``ConnectionFailure`` before any
    core exists; there is no fallback to offline.

    Offline: build an unbound core and disable real reads.
    """
    if isinstance(strategy, Fork):
        snapshot = connect(strategy)
        try:
            core = core_factory(snapshot)
        except Exception:
            snapshot.close()
            raise
        logger.info("Simulated core bound to fork snapshot (real reads enabled)")
        return core, snapshot
    if isinstance(strategy, Offline):
        core = core_factory(None)
        core.set_use_real_reads(False)
        logger.info("Simulated core running offline (real reads disabled)")
        return core, None
    raise TypeError(f"Unknown init strategy: {strategy!r}")
