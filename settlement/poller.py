"""Polling loop driving feed -> engine -> balance guard."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol

from .balance import BalanceGuard
from .engine import SettlementEngine
from .events import EventSnapshot

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    def fetch(self) -> List[EventSnapshot]: ...


class SettlementPoller:
    def __init__(
        self,
        feed: SnapshotSource,
        engine: SettlementEngine,
        balance_guard: Optional[BalanceGuard],
        interval_seconds: int,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.feed = feed
        self.engine = engine
        self.balance_guard = balance_guard
        self.interval_seconds = interval_seconds
        self._sleep = sleep

    def run_cycle(self) -> None:
        logger.info("[%s] Checking for completed games...", datetime.now(timezone.utc).isoformat())
        snapshots = self.feed.fetch()
        logger.info("Found %s games this week", len(snapshots))
        self.engine.process_cycle(snapshots)
        if self.balance_guard is not None:
            self.balance_guard.run()

    def run_forever(self) -> None:
        """Blocking loop: one immediate cycle, then one per interval.

        The next cycle starts only after the previous one has finished.
        """
        logger.info("Starting settlement loop with interval %s seconds", self.interval_seconds)
        if self.balance_guard is not None:
            self.balance_guard.run()
        try:
            while True:
                start = time.monotonic()
                self.run_cycle()
                elapsed = time.monotonic() - start
                self._sleep(max(self.interval_seconds - elapsed, 0))
        except KeyboardInterrupt:
            logger.info("Settlement loop stopped via keyboard interrupt")


__all__ = ["SettlementPoller"]
