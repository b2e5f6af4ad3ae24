from __future__ import annotations

import asyncio
import logging

from .config import Config
from .stats import RunningStatistics, Summary

log = logging.getLogger(__name__)

# Put on the results queue once the issuer has stopped.
CLOSED = object()


class Aggregator:
    def __init__(self, results: asyncio.Queue, config: Config, started_at: float):
        self.results = results
        self.config = config
        self._stats = RunningStatistics(started_at=started_at)

    async def run(self) -> Summary:
        """Consume outcomes in arrival order until CLOSED, then freeze the counters."""
        method, uri = self.config.method, self.config.uri
        while True:
            outcome = await self.results.get()
            if outcome is CLOSED:
                break
            self._stats.record(outcome)
            if outcome.ok:
                log.info("[%s] %s %s", outcome.label, method, uri)
            else:
                log.warning("[ERR] %s %s: %s", method, uri, outcome.error)
        return self._stats.freeze()
