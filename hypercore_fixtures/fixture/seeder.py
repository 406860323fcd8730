"""Account seeder — activation first, then spot and margin balances.

Balance seeding is only reachable through an ``ActivatedAccount``, which
``activate`` is the sole producer of, so seeding an inactive account cannot
be written by accident.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hypercore_fixtures.core.types import TestAccount
from hypercore_fixtures.errors import ActivationFailure, CoreError, SeedingFailure
from hypercore_fixtures.sim.engine import SimulatedCore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActivatedAccount:
    """An account that the simulated core has accepted as a participant."""

    core: SimulatedCore
    address: str

    def seed_spot(self, token_index: int, amount: int) -> None:
        try:
            self.core.seed_spot_balance(self.address, token_index, amount)
        except CoreError as exc:
            logger.error("Spot seeding rejected for %s: %s", self.address, exc)
            raise SeedingFailure(
                f"Cannot seed spot balance of {self.address} (token {token_index}): {exc}"
            ) from exc
        logger.debug("Seeded spot %s token=%d amount=%d", self.address, token_index, amount)

    def seed_margin(self, amount: int) -> None:
        try:
            self.core.seed_margin_balance(self.address, amount)
        except CoreError as exc:
            logger.error("Margin seeding rejected for %s: %s", self.address, exc)
            raise SeedingFailure(f"Cannot seed margin balance of {self.address}: {exc}") from exc
        logger.debug("Seeded margin %s amount=%d", self.address, amount)

    def spot_balance(self, token_index: int) -> int:
        return self.core.spot_balance(self.address, token_index)

    def margin_balance(self) -> int:
        return self.core.margin_balance(self.address)


def activate(core: SimulatedCore, address: str) -> ActivatedAccount:
    """Activate ``address`` in ``core``. Raises ActivationFailure if rejected."""
    try:
        core.activate_account(address)
    except CoreError as exc:
        logger.error("Activation rejected for %s: %s", address, exc)
        raise ActivationFailure(f"Cannot activate {address}: {exc}") from exc
    logger.debug("Activated %s", address)
    return ActivatedAccount(core=core, address=address)


def seed_test_account(core: SimulatedCore, account: TestAccount) -> ActivatedAccount:
    """Activate the test account and seed its spot and margin balances."""
    activated = activate(core, account.address)
    activated.seed_spot(account.spot_token, account.spot_amount)
    activated.seed_margin(account.margin_amount)
    logger.info(
        "Seeded test account %s: spot[%d]=%d margin=%d",
        account.address,
        account.spot_token,
        account.spot_amount,
        account.margin_amount,
    )
    return activated
