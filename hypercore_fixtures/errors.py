"""Exceptions raised by fixture setup and by the simulated core."""

from __future__ import annotations


class FixtureError(Exception):
    """Fixture setup failed; the dependent test must not run."""


class ConnectionFailure(FixtureError):
    """Fork endpoint unreachable, or the pinned snapshot could not serve a read."""

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Cannot use fork endpoint {endpoint}: {reason}")


class ActivationFailure(FixtureError):
    """The simulated core rejected account activation."""


class SeedingFailure(FixtureError):
    """The simulated core rejected a spot or margin balance mutation."""


class CoreError(Exception):
    """Base class for errors raised by the simulated core."""


class InvalidAddress(CoreError):
    pass


class AccountNotActivated(CoreError):
    pass


class UnsupportedToken(CoreError):
    pass


class InvalidAmount(CoreError):
    pass


class RealReadUnavailable(CoreError):
    """Real reads are enabled but no network snapshot is bound to the core."""
