from __future__ import annotations

import asyncio
import contextlib
import logging
import time

import httpx

from .aggregator import CLOSED, Aggregator
from .config import Config
from .issuer import Issuer
from .report import summary_lines
from .shutdown import Shutdown, install_signal_handlers, remove_signal_handlers
from .stats import Summary

log = logging.getLogger(__name__)


async def run(
    config: Config,
    client: httpx.AsyncClient | None = None,
    shutdown: Shutdown | None = None,
    install_signals: bool = True,
) -> Summary:
    """Drive one load run until a signal or the request limit stops it.

    Shutdown order: issuer stops (an in-flight request is abandoned),
    the results queue is closed, the aggregator drains it and freezes the
    counters, then the summary is logged once.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=config.timeout) as owned:
            return await run(config, owned, shutdown, install_signals)

    loop = asyncio.get_running_loop()
    shutdown = shutdown or Shutdown()
    installed = install_signal_handlers(loop, shutdown) if install_signals else []

    # maxsize=1: the issuer can be at most one outcome ahead of the aggregator
    results: asyncio.Queue = asyncio.Queue(maxsize=1)
    aggregator = Aggregator(results, config, started_at=time.monotonic())
    issuer = Issuer(client, config, results, shutdown)

    aggregator_task = asyncio.create_task(aggregator.run(), name="aggregator")
    issuer_task = asyncio.create_task(issuer.run(), name="issuer")
    stop_task = asyncio.create_task(shutdown.wait(), name="shutdown")
    try:
        await asyncio.wait({issuer_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        issuer_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            # re-raises anything the issuer died of
            await issuer_task
        if issuer.pending is not None:
            # cancelled while blocked on a full queue; the request did complete
            await results.put(issuer.pending)
        await results.put(CLOSED)
        summary = await aggregator_task
    finally:
        remove_signal_handlers(loop, installed)
        stop_task.cancel()
        aggregator_task.cancel()

    for line in summary_lines(summary, shutdown.reason, shutdown.detail):
        log.info(line)
    return summary
