from __future__ import annotations

import asyncio
import logging
import time

import httpx

from .config import Config
from .outcome import Outcome
from .shutdown import REASON_LIMIT, Shutdown

log = logging.getLogger(__name__)


class Ticker:
    """Fixed-interval clock.

    Ticks sit on a grid of `interval` seconds, the first one interval after
    creation. If the caller falls behind (a slow request), missed ticks are
    dropped: the next wait() returns at once and the grid restarts from
    there, so there is never a burst of catch-up requests.
    """

    def __init__(self, interval: float, clock=time.monotonic):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._clock = clock
        self._next = clock() + interval

    async def wait(self) -> None:
        now = self._clock()
        if self._next > now:
            await asyncio.sleep(self._next - now)
            self._next += self.interval
        else:
            self._next = now + self.interval


async def send_one(client: httpx.AsyncClient, config: Config) -> Outcome:
    """Execute a single request. Transport errors become failure outcomes."""
    auth = (config.username or "", config.password or "") if config.has_auth else None
    try:
        # bytes content is replayed fresh for every request
        response = await client.request(config.method, config.uri, content=config.body, auth=auth)
    except httpx.HTTPError as e:
        return Outcome.failure(e)
    return Outcome.success(response)


class Issuer:
    """Sends one request per tick and hands each outcome to the aggregator.

    Strictly sequential: request N+1 is not started until outcome N has
    been accepted by the results queue. With slow responses the achieved
    rate silently drops below the configured one.
    """

    def __init__(self, client: httpx.AsyncClient, config: Config, results: asyncio.Queue, shutdown: Shutdown):
        self.client = client
        self.config = config
        self.results = results
        self.shutdown = shutdown
        self.sent = 0
        # Completed but not yet queued; handed over by the runner if we are cancelled.
        self.pending: Outcome | None = None

    async def run(self) -> None:
        ticker = Ticker(self.config.interval)
        limit = self.config.limit
        while not self.shutdown.triggered:
            await ticker.wait()
            self.pending = await send_one(self.client, self.config)
            # Blocks while the aggregator is busy: that's our backpressure.
            await self.results.put(self.pending)
            self.pending = None
            self.sent += 1
            if limit > 0 and self.sent >= limit:
                log.debug("limit of %d requests reached", limit)
                self.shutdown.trigger(REASON_LIMIT, str(limit))
                return
