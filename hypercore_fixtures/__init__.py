"""Test-fixture harness that provisions a simulated HyperCore for each test."""

from hypercore_fixtures.fixture.harness import FixtureContext, setup_fixture

__all__ = ["FixtureContext", "setup_fixture"]
