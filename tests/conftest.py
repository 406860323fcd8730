"""Shared fixtures and test configuration."""

import os

# Pin offline mode BEFORE any hypercore_fixtures imports so the suite never
# reaches the network unless FORK_MODE is set explicitly by the caller.
os.environ.setdefault("FORK_MODE", "false")

pytest_plugins = ["hypercore_fixtures.pytest_plugin"]
