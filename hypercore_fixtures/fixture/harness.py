"""Per-test setup: select mode, initialize the core, seed the test account."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hypercore_fixtures.config import Settings
from hypercore_fixtures.core.constants import TEST_ACCOUNT
from hypercore_fixtures.core.types import ExecutionMode, InitStrategy, TestAccount
from hypercore_fixtures.fixture.initializer import (
    Connector,
    CoreFactory,
    connect_snapshot,
    initialize,
)
from hypercore_fixtures.fixture.mode import select_strategy
from hypercore_fixtures.fixture.seeder import ActivatedAccount, seed_test_account
from hypercore_fixtures.sim.engine import SimulatedCore
from hypercore_fixtures.sim.memory import InMemoryCore
from hypercore_fixtures.sim.snapshot import RpcSnapshot

logger = logging.getLogger(__name__)


@dataclass
class FixtureContext:
    """Everything a test gets from one fixture setup."""

    strategy: InitStrategy
    core: SimulatedCore
    account: ActivatedAccount
    snapshot: RpcSnapshot | None = None

    @property
    def mode(self) -> ExecutionMode:
        return self.strategy.mode

    def close(self) -> None:
        """Reset the core and release the fork connection, if any."""
        self.core.reset()
        if self.snapshot is not None:
            self.snapshot.close()
            self.snapshot = None


def setup_fixture(
    settings: Settings | None = None,
    *,
    account: TestAccount = TEST_ACCOUNT,
    connect: Connector = connect_snapshot,
    core_factory: CoreFactory = InMemoryCore,
) -> FixtureContext:
    """Run mode selection, core initialization and account seeding in order.

    Any failure propagates as a ``FixtureError`` subclass; nothing is retried.
    """
    settings = settings if settings is not None else Settings()
    strategy = select_strategy(settings)
    core, snapshot = initialize(strategy, connect=connect, core_factory=core_factory)
    try:
        activated = seed_test_account(core, account)
    except Exception:
        if snapshot is not None:
            snapshot.close()
        raise
    return FixtureContext(strategy=strategy, core=core, account=activated, snapshot=snapshot)
