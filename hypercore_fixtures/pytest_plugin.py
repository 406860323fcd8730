"""pytest plugin exposing the simulated core fixture.

Enable with ``pytest_plugins = ["hypercore_fixtures.pytest_plugin"]`` in a
conftest. Every test requesting ``hypercore`` gets a freshly initialized and
seeded core, torn down after the test.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from hypercore_fixtures.config import Settings, settings, setup_logging
from hypercore_fixtures.fixture.harness import FixtureContext, setup_fixture
from hypercore_fixtures.fixture.seeder import ActivatedAccount


def pytest_configure(config: pytest.Config) -> None:
    setup_logging(settings.log_level)
    config.addinivalue_line("markers", "fork: test needs a live network fork (FORK_MODE=true)")


def pytest_report_header(config: pytest.Config) -> str:
    current = Settings()
    if current.fork_mode:
        return f"hypercore: fork mode ({current.rpc_url})"
    return "hypercore: offline mode"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if Settings().fork_mode:
        return
    skip_fork = pytest.mark.skip(reason="fork mode disabled (set FORK_MODE=true)")
    for item in items:
        if "fork" in item.keywords:
            item.add_marker(skip_fork)


@pytest.fixture
def hypercore() -> Iterator[FixtureContext]:
    """Fresh simulated core with the test account activated and funded."""
    ctx = setup_fixture()
    try:
        yield ctx
    finally:
        ctx.close()


@pytest.fixture
def test_user(hypercore: FixtureContext) -> ActivatedAccount:
    return hypercore.account
