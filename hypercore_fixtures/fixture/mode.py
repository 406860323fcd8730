"""Mode selection: configuration in, initialization strategy out. No side effects."""

from __future__ import annotations

import logging

from hypercore_fixtures.config import Settings
from hypercore_fixtures.core.types import Fork, InitStrategy, Offline

logger = logging.getLogger(__name__)


def select_strategy(settings: Settings) -> InitStrategy:
    """Return ``Fork`` when the fork-mode flag is set, otherwise ``Offline``."""
    if settings.fork_mode:
        strategy: InitStrategy = Fork(
            endpoint=settings.rpc_url,
            block_number=settings.fork_block,
            timeout=settings.rpc_timeout,
        )
        logger.info("Execution mode: fork (endpoint=%s)", settings.rpc_url)
    else:
        strategy = Offline()
        logger.info("Execution mode: offline")
    return strategy
