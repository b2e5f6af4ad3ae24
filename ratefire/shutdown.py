from __future__ import annotations

import asyncio
import logging
import signal

log = logging.getLogger(__name__)

SIGNALS = (signal.SIGINT, signal.SIGTERM)

REASON_SIGNAL = "signal"
REASON_LIMIT = "limit"


class Shutdown:
    """One-shot stop trigger shared by the signal handlers and the issuer.

    Only the first trigger counts; later ones (e.g. a Ctrl-C racing the
    limit) are ignored so the run is reported exactly once.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: str | None = None
        self.detail: str | None = None

    @property
    def triggered(self) -> bool:
        return self._event.is_set()

    def trigger(self, reason: str, detail: str | None = None) -> bool:
        if self._event.is_set():
            return False
        self.reason = reason
        self.detail = detail
        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()


def install_signal_handlers(loop: asyncio.AbstractEventLoop, shutdown: Shutdown) -> list[signal.Signals]:
    installed = []
    for sig in SIGNALS:
        try:
            loop.add_signal_handler(sig, shutdown.trigger, REASON_SIGNAL, sig.name)
        except (NotImplementedError, RuntimeError):
            # Windows event loops, or not running in the main thread.
            log.debug("cannot watch %s on this loop", sig.name)
            continue
        installed.append(sig)
    return installed


def remove_signal_handlers(loop: asyncio.AbstractEventLoop, installed: list[signal.Signals]) -> None:
    for sig in installed:
        loop.remove_signal_handler(sig)
